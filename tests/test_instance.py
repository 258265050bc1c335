"""
Tests for layerenv.instance module.

Tests the process-wide shared store including:
- First-call-wins semantics
- Thread-safe first construction
- Retry after a failed construction
"""

from __future__ import annotations

import threading
from unittest.mock import patch

import pytest

from layerenv.exceptions import FatalIOError
from layerenv.instance import get_instance, reset_instance
from layerenv.sink import MemoryEnvironmentSink


class TestFirstCallWins:
    """Tests for get_instance() sharing."""

    def test_same_instance_for_different_paths(self, create_env_file, tmp_test_dir):
        """Test that a second path is ignored and the first path's files win."""
        first = tmp_test_dir / "first"
        second = tmp_test_dir / "second"
        create_env_file(".env", "APP_NAME=first\nONLY_FIRST=1\n", base=first)
        create_env_file(".env", "APP_NAME=second\nONLY_SECOND=1\n", base=second)

        a = get_instance(first, sink=MemoryEnvironmentSink())
        b = get_instance(second, sink=MemoryEnvironmentSink())

        assert a is b
        assert b.base_path == first.resolve()
        assert b.get("APP_NAME") == "first"
        assert "ONLY_SECOND" not in b

    def test_later_arguments_ignored(self, sample_env_dir):
        """Test that env= and sink= on later calls have no effect."""
        first_sink = MemoryEnvironmentSink()
        later_sink = MemoryEnvironmentSink()

        store = get_instance(sample_env_dir, sink=first_sink)
        again = get_instance(sample_env_dir, env="production", sink=later_sink)

        assert again is store
        assert again.env == ""
        assert later_sink.environ == {}
        assert first_sink.environ["APP_NAME"] == "Example App"

    def test_defaults_to_working_directory(self, sample_env_dir, monkeypatch):
        """Test that the first call without a path uses the current directory."""
        monkeypatch.chdir(sample_env_dir)

        store = get_instance(sink=MemoryEnvironmentSink())

        assert store.base_path == sample_env_dir.resolve()

    def test_reset_allows_new_instance(self, sample_env_dir, tmp_test_dir):
        """Test that reset_instance() lets the next call load again."""
        first = get_instance(sample_env_dir, sink=MemoryEnvironmentSink())

        reset_instance()
        second = get_instance(sample_env_dir, sink=MemoryEnvironmentSink())

        assert first is not second


class TestConcurrency:
    """Tests for racing first calls."""

    def test_single_construction_under_race(self, sample_env_dir):
        """Test that concurrent first calls build exactly one store."""
        from layerenv import store as store_module

        calls = []
        real_load = store_module.load_layers
        barrier = threading.Barrier(8)

        def counting_load(*args, **kwargs):
            calls.append(1)
            return real_load(*args, **kwargs)

        results = []

        def worker():
            barrier.wait()
            results.append(get_instance(sample_env_dir, sink=MemoryEnvironmentSink()))

        with patch.object(store_module, "load_layers", side_effect=counting_load):
            threads = [threading.Thread(target=worker) for _ in range(8)]
            for t in threads:
                t.start()
            for t in threads:
                t.join()

        assert len(calls) == 1
        assert len(results) == 8
        assert all(r is results[0] for r in results)


class TestFailedConstruction:
    """Tests for construction errors."""

    def test_failure_installs_nothing(self, tmp_test_dir, create_env_file):
        """Test that a FatalIOError leaves room for a retry."""
        (tmp_test_dir / ".env").mkdir()

        with pytest.raises(FatalIOError):
            get_instance(tmp_test_dir, sink=MemoryEnvironmentSink())

        (tmp_test_dir / ".env").rmdir()
        create_env_file(".env", "RECOVERED=yes")

        store = get_instance(tmp_test_dir, sink=MemoryEnvironmentSink())

        assert store.get("RECOVERED") == "yes"

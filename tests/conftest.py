"""
Pytest configuration and shared fixtures for layerenv tests.

This module provides reusable fixtures and test utilities used across
the test suite.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from layerenv.instance import reset_instance
from layerenv.logging import SilentLogger, set_global_logger
from layerenv.sink import MemoryEnvironmentSink


@pytest.fixture
def tmp_test_dir(tmp_path: Path) -> Path:
    """
    Provide a temporary directory for test artifacts.

    Automatically cleaned up after test completion.
    """
    return tmp_path


@pytest.fixture
def memory_sink() -> MemoryEnvironmentSink:
    """Provide an empty in-memory environment sink."""
    return MemoryEnvironmentSink()


@pytest.fixture
def create_env_file(tmp_test_dir: Path):
    """
    Factory fixture for creating layer files.

    Usage:
        path = create_env_file(".env", "KEY=value\\nOTHER=1\\n")
        path = create_env_file(".env.local", "KEY=x", base=some_dir)
    """

    def _create(filename: str, content: str, base: Path | None = None) -> Path:
        directory = base or tmp_test_dir
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / filename
        path.write_text(content, encoding="utf-8")
        return path

    return _create


@pytest.fixture
def sample_env_dir(create_env_file, tmp_test_dir: Path) -> Path:
    """
    Provide a directory with all three layers, mirroring a typical app.

    .env defines everything, .env.production overrides the database host
    and debug flag, .env.local overrides the password.
    """
    create_env_file(
        ".env",
        """
# Application
APP_NAME="Example App"
APP_DEBUG=true
DB_HOST=localhost
DB_PORT=5432
DB_USERNAME=app
DB_PASSWORD=
FEATURES=search, export ,beta
""",
    )
    create_env_file(
        ".env.production",
        """
APP_DEBUG=false
DB_HOST=db.internal
""",
    )
    create_env_file(
        ".env.local",
        """
DB_PASSWORD='s3cret value'
""",
    )
    return tmp_test_dir


@pytest.fixture(autouse=True)
def _reset_process_state():
    """Ensure every test starts without a shared store or a chatty logger."""
    reset_instance()
    set_global_logger(SilentLogger())
    yield
    reset_instance()
    set_global_logger(SilentLogger())

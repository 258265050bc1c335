"""
Tests for layerenv.validation module.

Tests directory validation including:
- Required variable checks
- Warnings for malformed and repeated lines
- Unreadable layers reported as errors
- No side effects on the process environment
"""

from __future__ import annotations

import os

from layerenv.validation import validate_env_dir


class TestValidDirectories:
    """Tests for directories that pass validation."""

    def test_valid_with_required(self, sample_env_dir):
        """Test that present required keys give a valid result."""
        result = validate_env_dir(sample_env_dir, ["APP_NAME", "DB_PASSWORD"], env="")

        assert result.status == "valid"
        assert result.is_valid
        assert result.errors == []
        assert result.key_count == 7
        assert [p.name for p in result.loaded_files] == [".env", ".env.local"]

    def test_env_from_environ(self, sample_env_dir):
        """Test that APP_ENV is read from the given environ mapping."""
        result = validate_env_dir(sample_env_dir, environ={"APP_ENV": "production"})

        assert result.env == "production"
        assert sample_env_dir / ".env.production" in result.loaded_files

    def test_does_not_modify_environment(self, sample_env_dir, monkeypatch):
        """Test that validation never writes to os.environ."""
        monkeypatch.delenv("APP_NAME", raising=False)

        validate_env_dir(sample_env_dir, ["APP_NAME"], env="")

        assert "APP_NAME" not in os.environ


class TestErrors:
    """Tests for conditions reported as errors."""

    def test_missing_required(self, sample_env_dir):
        """Test that missing and empty required keys are errors in order."""
        result = validate_env_dir(
            sample_env_dir, ["NOPE", "APP_NAME", "ALSO_NOPE"], env=""
        )

        assert result.status == "invalid"
        assert result.errors == [
            "Missing required variable: NOPE",
            "Missing required variable: ALSO_NOPE",
        ]

    def test_empty_required_value(self, create_env_file, tmp_test_dir):
        create_env_file(".env", "SECRET=\n")

        result = validate_env_dir(tmp_test_dir, ["SECRET"], env="")

        assert result.errors == ["Missing required variable: SECRET"]

    def test_unreadable_layer(self, tmp_test_dir, create_env_file):
        """Test that an unreadable layer is an error, not an exception."""
        create_env_file(".env", "A=1\n")
        (tmp_test_dir / ".env.local").mkdir()

        result = validate_env_dir(tmp_test_dir, env="")

        assert result.status == "invalid"
        assert len(result.errors) == 1
        assert ".env.local" in result.errors[0]
        assert result.key_count == 1

    def test_undecodable_layer(self, tmp_test_dir):
        (tmp_test_dir / ".env").write_bytes(b"\xff\xfe")

        result = validate_env_dir(tmp_test_dir, env="")

        assert "not valid UTF-8" in result.errors[0]

    def test_nul_character_layer(self, tmp_test_dir):
        """Test that a NUL character is reported instead of raised."""
        (tmp_test_dir / ".env").write_bytes(b"GOOD=1\nBAD=x\x00y\n")

        result = validate_env_dir(tmp_test_dir, env="")

        assert result.status == "invalid"
        assert "NUL character" in result.errors[0]
        assert result.loaded_files == []


class TestWarnings:
    """Tests for conditions reported as warnings."""

    def test_malformed_lines(self, create_env_file, tmp_test_dir):
        """Test that lines without '=' and empty keys are flagged."""
        create_env_file(".env", "GOOD=1\nexport\n=orphan\n")

        result = validate_env_dir(tmp_test_dir, env="")

        assert result.is_valid
        assert result.warnings == [
            ".env:2: ignored line without '=': 'export'",
            ".env:3: empty key in '=orphan'",
        ]

    def test_repeated_key(self, create_env_file, tmp_test_dir):
        """Test that a key repeated within one file is flagged."""
        create_env_file(".env", "A=1\nB=2\nA=3\n")

        result = validate_env_dir(tmp_test_dir, env="")

        assert result.warnings == [".env:3: A overrides line 1"]

    def test_override_across_layers_not_flagged(self, create_env_file, tmp_test_dir):
        """Test that overriding a key in a later layer is normal."""
        create_env_file(".env", "A=1\n")
        create_env_file(".env.local", "A=2\n")

        result = validate_env_dir(tmp_test_dir, env="")

        assert result.warnings == []

    def test_no_layers(self, tmp_test_dir):
        """Test that an empty directory warns but is valid."""
        result = validate_env_dir(tmp_test_dir, env="")

        assert result.is_valid
        assert result.warnings == [f"No layer files found in {tmp_test_dir.resolve()}"]

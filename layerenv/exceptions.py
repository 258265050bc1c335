# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Exception hierarchy for layerenv.

Only two things can go wrong when working with a store:

- ConfigValidationError: required variables are missing or empty. Raised
  by ConfigStore.require_vars() (as MissingRequiredVariableError) and
  nowhere else. Callers are expected to handle it.
- FatalIOError: a layer file exists but cannot be read (permission denied,
  the path is a directory, undecodable bytes). Raised while the store is
  being constructed; no store is produced.

A missing layer file is not an error, and the typed accessors never raise.

All exceptions inherit from LayerEnvError, so callers can catch every
layerenv error with a single except clause.

Example:
    Validating required variables:
        ```python
        from layerenv import get_instance
        from layerenv.exceptions import MissingRequiredVariableError

        env = get_instance("/srv/app")
        try:
            env.require_vars(["DB_HOST", "DB_USERNAME", "DB_PASSWORD"])
        except MissingRequiredVariableError as e:
            print(f"Validation error: {e}")
            print(e.missing)  # ["DB_PASSWORD"]
        ```
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

__all__ = [
    "LayerEnvError",
    "ConfigValidationError",
    "MissingRequiredVariableError",
    "FatalIOError",
]


class LayerEnvError(Exception):
    """Base exception for all layerenv errors."""

    pass


class ConfigValidationError(LayerEnvError):
    """Raised when loaded configuration fails validation."""

    pass


class MissingRequiredVariableError(ConfigValidationError):
    """Raised by require_vars() when required variables are missing.

    A variable counts as missing when it is absent from the merged mapping
    or present with an empty value.

    Attributes:
        missing: Names of the missing variables, in the order they were
            requested.
    """

    def __init__(self, missing: Iterable[str]) -> None:
        self.missing: list[str] = list(missing)
        super().__init__(
            "Missing required env vars: " + ", ".join(self.missing)
        )


class FatalIOError(LayerEnvError):
    """Raised when an existing layer file cannot be read.

    The original OSError or UnicodeDecodeError is chained as __cause__.

    Attributes:
        path: The layer file that failed to load.
    """

    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        super().__init__(f"Cannot read {path}: {message}")

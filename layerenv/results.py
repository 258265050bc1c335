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

"""Public API return types for layerenv.

All dataclasses are frozen (immutable) to prevent accidental mutation of
return values.

Note:
    Only public API return types belong in this module. Load-time types
    (Layer, LoadContext) stay in layerenv.loader.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ValidationResult:
    """Result from checking a directory of layer files.

    Attributes:
        status: "valid" when there are no errors, otherwise "invalid".
        errors: Missing required keys and unreadable layers.
        warnings: Malformed lines, empty keys, repeated keys and a missing
            set of layer files.
        loaded_files: Layer files that were read, lowest precedence first.
        key_count: Number of keys in the merged mapping.
        base_path: Directory that was checked.
        env: Environment hint used for the middle layer.
    """

    status: str
    errors: list[str]
    warnings: list[str]
    loaded_files: list[Path]
    key_count: int
    base_path: Path
    env: str

    @property
    def is_valid(self) -> bool:
        return self.status == "valid"

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

"""Directory validation module.

This module checks a directory of layer files without building a store or
touching the process environment. It is what ``layerenv check`` runs, and
is useful as a deployment pre-check in CI/CD pipelines.

Unlike ConfigStore.require_vars(), nothing here raises for content
problems; everything is collected into a ValidationResult.

Validation Checks:

- Each existing layer file can be read and decoded (error)
- No key or value contains a NUL character (error)
- Lines that are neither comments, blank, nor KEY=VALUE (warning)
- Lines with an empty key (warning)
- Keys repeated within one file (warning)
- No layer files at all (warning)
- Required keys are present with a non-empty value (error)

Example:
    Check a deployment directory:
        ```python
        from pathlib import Path
        from layerenv.validation import validate_env_dir

        result = validate_env_dir(Path("/srv/app"), required=["DB_HOST"])
        if result.is_valid:
            print(f"{result.key_count} key(s) loaded")
        else:
            for error in result.errors:
                print(f"Error: {error}")
        ```

"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
import os
from pathlib import Path

from layerenv.exceptions import FatalIOError
from layerenv.loader import (
    Layer,
    layer_from_text,
    layer_paths,
    merge_layers,
    read_layer_text,
    resolve_env_hint,
)
from layerenv.logging import Logger, get_global_logger
from layerenv.parser import iter_entries
from layerenv.results import ValidationResult
from layerenv.sink import MemoryEnvironmentSink
from layerenv.store import find_missing

__all__ = ["validate_env_dir"]


def _lint_layer(name: str, lines: list[str]) -> list[str]:
    """Return warnings for one layer file's lines."""
    warnings: list[str] = []
    seen: dict[str, int] = {}
    for entry in iter_entries(lines):
        if entry.key is None:
            if "=" in entry.raw:
                warnings.append(f"{name}:{entry.lineno}: empty key in {entry.raw!r}")
            else:
                warnings.append(
                    f"{name}:{entry.lineno}: ignored line without '=': {entry.raw!r}"
                )
            continue
        if entry.key in seen:
            warnings.append(
                f"{name}:{entry.lineno}: {entry.key} overrides line {seen[entry.key]}"
            )
        seen[entry.key] = entry.lineno
    return warnings


def validate_env_dir(
    base_path: str | os.PathLike[str],
    required: Iterable[str] = (),
    *,
    env: str | None = None,
    environ: Mapping[str, str] | None = None,
    logger: Logger | None = None,
) -> ValidationResult:
    """Validate the layer files in a directory.

    Args:
        base_path: Directory containing the .env files.
        required: Keys that must be present with a non-empty value.
        env: Environment hint. If None, APP_ENV is read from 'environ'.
        environ: Environment used to resolve the hint. Defaults to
            os.environ. Never written to.
        logger: Logger for verbose output. Defaults to the global logger.

    Returns:
        A ValidationResult; status is "valid" when errors is empty.
    """
    if logger is None:
        logger = get_global_logger()

    base = Path(base_path).expanduser().resolve()
    if env is None:
        sink = MemoryEnvironmentSink(environ=os.environ if environ is None else environ)
        env = resolve_env_hint(sink)

    errors: list[str] = []
    warnings: list[str] = []
    layers: list[Layer] = []

    logger.verbose("CHECK", f"Validating {base} (env={env!r})")

    for name, path in layer_paths(base, env):
        try:
            text = read_layer_text(path)
        except FatalIOError as err:
            errors.append(str(err))
            continue
        if text is None:
            logger.verbose("CHECK", f"Not found, skipping: {name}")
            continue

        warnings.extend(_lint_layer(name, text.splitlines()))
        try:
            layers.append(layer_from_text(name, path, text, logger=logger))
        except FatalIOError as err:
            errors.append(str(err))
            continue
        logger.verbose("CHECK", f"Read {name}")

    if not layers and not errors:
        warnings.append(f"No layer files found in {base}")

    merged = merge_layers(layers)
    for key in find_missing(merged, required):
        errors.append(f"Missing required variable: {key}")

    return ValidationResult(
        status="invalid" if errors else "valid",
        errors=errors,
        warnings=warnings,
        loaded_files=[layer.path for layer in layers],
        key_count=len(merged),
        base_path=base,
        env=env,
    )

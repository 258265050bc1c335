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

"""The configuration store.

A ConfigStore is built once from a base directory. Construction resolves
the environment hint, loads and merges the layer files, and pushes the
result through an environment sink. After that the store is read-only.

Reads never fail: the typed accessors fall back to defaults or coerce
malformed values (see layerenv.coercion). Only require_vars() raises.

Example:
    Build the store in your composition root and pass it around:
        ```python
        from layerenv import ConfigStore

        env = ConfigStore("/srv/app")
        print(env.get_string("APP_NAME"))
        print(env.get_bool("APP_DEBUG"))
        print(f"{env.get_string('DB_HOST')}:{env.get_int('DB_PORT')}")
        env.require_vars(["DB_HOST", "DB_USERNAME", "DB_PASSWORD"])
        ```
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
import os
from pathlib import Path
from types import MappingProxyType
from typing import Any

from layerenv.coercion import to_bool, to_float, to_int, to_list
from layerenv.exceptions import MissingRequiredVariableError
from layerenv.loader import LoadContext, load_layers, resolve_env_hint
from layerenv.logging import Logger, get_global_logger
from layerenv.sink import EnvironmentSink, ProcessEnvironmentSink, propagate

__all__ = ["ConfigStore", "find_missing"]


def find_missing(values: Mapping[str, str], keys: Iterable[str]) -> list[str]:
    """Return the keys that are absent or empty, preserving their order."""
    return [key for key in keys if values.get(key, "") == ""]


class ConfigStore:
    """Immutable view of the merged layer files.

    Attributes:
        base_path: Directory the layer files were read from.
        env: Environment hint that selected the middle layer ("" if none).
        loaded_files: Layer files that existed and were read, lowest
            precedence first.
    """

    def __init__(
        self,
        base_path: str | os.PathLike[str],
        *,
        env: str | None = None,
        sink: EnvironmentSink | None = None,
        logger: Logger | None = None,
    ) -> None:
        """Load, merge and propagate the layers under base_path.

        Args:
            base_path: Directory containing the .env files.
            env: Environment hint. If None, APP_ENV is looked up through
                the sink.
            sink: Where merged values are pushed. Defaults to the real
                process environment.
            logger: Logger for load output. Defaults to the global logger.

        Raises:
            FatalIOError: An existing layer file could not be read.
        """
        if sink is None:
            sink = ProcessEnvironmentSink()
        if logger is None:
            logger = get_global_logger()

        base = Path(base_path).expanduser().resolve()
        if env is None:
            env = resolve_env_hint(sink)
            logger.verbose("HINT", f"APP_ENV resolved to {env!r}")
        else:
            logger.verbose("HINT", f"Using explicit environment {env!r}")

        values, context = load_layers(base, env, logger=logger)
        propagate(values, sink, logger=logger)

        self._vars: Mapping[str, str] = MappingProxyType(values)
        self._context: LoadContext = context

    def __repr__(self) -> str:
        return (
            f"ConfigStore(base_path={str(self.base_path)!r}, env={self.env!r}, "
            f"keys={len(self._vars)})"
        )

    def __contains__(self, key: object) -> bool:
        return key in self._vars

    def __iter__(self) -> Iterator[str]:
        return iter(self._vars)

    def __len__(self) -> int:
        return len(self._vars)

    @property
    def base_path(self) -> Path:
        return self._context.base_path

    @property
    def env(self) -> str:
        return self._context.env

    @property
    def loaded_files(self) -> tuple[Path, ...]:
        return self._context.loaded_paths

    @property
    def context(self) -> LoadContext:
        return self._context

    def as_dict(self) -> dict[str, str]:
        """Return a copy of the merged mapping."""
        return dict(self._vars)

    # -------------------------------
    # Typed accessors
    # -------------------------------

    def get(self, key: str, default: Any = None) -> Any:
        """Return the stored string, or default if the key is absent.

        A key stored with an empty value returns "" rather than default.
        """
        return self._vars.get(key, default)

    def get_string(self, key: str, default: str = "") -> str:
        return str(self.get(key, default))

    def get_int(self, key: str, default: int = 0) -> int:
        """Return the value as an int.

        The default is only used when the key is absent. A present value
        with no numeric prefix is 0, not the default. A default that is not
        an int goes through the same numeric-prefix rules.
        """
        if key not in self._vars:
            if isinstance(default, int) and not isinstance(default, bool):
                return default
            return to_int(str(default))
        return to_int(self._vars[key])

    def get_float(self, key: str, default: float = 0.0) -> float:
        """Return the value as a float; see get_int() for the fallback rules."""
        if key not in self._vars:
            if isinstance(default, (int, float)) and not isinstance(default, bool):
                return float(default)
            return to_float(str(default))
        return to_float(self._vars[key])

    def get_bool(self, key: str, default: bool = False) -> bool:
        """Return True if the value is "1", "true", "on" or "yes" (any case).

        Every other stored value, including "", is False. The default is
        only used when the key is absent.
        """
        return to_bool(self.get(key, default))

    def get_array(self, key: str, default: Sequence[str] | None = None) -> list[str]:
        """Split a comma separated value into trimmed pieces.

        Returns the default (or an empty list) when the key is absent or
        its value is "". Empty pieces between commas are kept.
        """
        value = self._vars.get(key)
        if value is None or value == "":
            return list(default) if default is not None else []
        return to_list(value)

    # -------------------------------
    # Validation
    # -------------------------------

    def require_vars(self, keys: Iterable[str]) -> None:
        """Ensure every key is present with a non-empty value.

        Values such as "false" and "0" count as present.

        Args:
            keys: Required variable names.

        Raises:
            MissingRequiredVariableError: One or more keys are absent or
                empty. Its ``missing`` attribute lists them in the order
                they were requested.
        """
        missing = find_missing(self._vars, keys)
        if missing:
            raise MissingRequiredVariableError(missing)

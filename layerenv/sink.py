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

"""Environment sinks: where merged values go after a load.

A store never touches os.environ directly. It talks to an EnvironmentSink,
which answers "is this variable already defined?", defines variables, and
mirrors every loaded value into a process-wide cache. The sink is also
where the APP_ENV hint is read from.

Two implementations are provided:

- ProcessEnvironmentSink: the real process. Variables go to os.environ,
  the cache is the module-level ENV_CACHE dict.
- MemoryEnvironmentSink: plain dicts, no side effects. Used by the test
  suite and the CLI.

Example:
    Load without touching the process environment:
        ```python
        from layerenv import ConfigStore
        from layerenv.sink import MemoryEnvironmentSink

        sink = MemoryEnvironmentSink(environ={"APP_ENV": "testing"})
        store = ConfigStore("/srv/app", sink=sink)
        sink.environ["DB_HOST"]  # value from the .env files
        ```
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
import os
from typing import Protocol

from layerenv.logging import Logger, get_global_logger

__all__ = [
    "ENV_CACHE",
    "EnvironmentSink",
    "ProcessEnvironmentSink",
    "MemoryEnvironmentSink",
    "propagate",
]

# Process-wide mirror of every value loaded by a store in this process,
# including values that were not written to os.environ because the
# variable already existed there.
ENV_CACHE: dict[str, str] = {}


class EnvironmentSink(Protocol):
    """Capability interface for reading and writing process variables."""

    def has(self, name: str) -> bool:
        """Return True if the variable is defined in the external environment."""
        ...

    def get(self, name: str) -> str | None:
        """Return the externally defined value, or None."""
        ...

    def set(self, name: str, value: str) -> None:
        """Define the variable in the external environment."""
        ...

    def mirror(self, name: str, value: str) -> None:
        """Record the value in the process-wide variable cache."""
        ...

    def cached(self, name: str) -> str | None:
        """Return the value previously mirrored into the cache, or None."""
        ...


class ProcessEnvironmentSink:
    """Sink backed by os.environ and a process-wide cache dict."""

    def __init__(self, cache: MutableMapping[str, str] | None = None) -> None:
        self.cache = ENV_CACHE if cache is None else cache

    def has(self, name: str) -> bool:
        return name in os.environ

    def get(self, name: str) -> str | None:
        return os.environ.get(name)

    def set(self, name: str, value: str) -> None:
        os.environ[name] = value

    def mirror(self, name: str, value: str) -> None:
        self.cache[name] = value

    def cached(self, name: str) -> str | None:
        return self.cache.get(name)


class MemoryEnvironmentSink:
    """In-memory sink that never touches the real process.

    Attributes:
        environ: Stand-in for the external environment.
        cache: Stand-in for the process-wide cache.
    """

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        cache: Mapping[str, str] | None = None,
    ) -> None:
        self.environ: dict[str, str] = dict(environ or {})
        self.cache: dict[str, str] = dict(cache or {})

    def has(self, name: str) -> bool:
        return name in self.environ

    def get(self, name: str) -> str | None:
        return self.environ.get(name)

    def set(self, name: str, value: str) -> None:
        self.environ[name] = value

    def mirror(self, name: str, value: str) -> None:
        self.cache[name] = value

    def cached(self, name: str) -> str | None:
        return self.cache.get(name)


def propagate(
    values: Mapping[str, str],
    sink: EnvironmentSink,
    *,
    logger: Logger | None = None,
) -> int:
    """Push merged values out through a sink.

    Variables already defined in the external environment are left alone;
    every value is mirrored into the cache regardless.

    Args:
        values: The merged mapping.
        sink: Destination for the values.
        logger: Logger for verbose output. Defaults to the global logger.

    Returns:
        Number of variables newly defined in the external environment.
    """
    if logger is None:
        logger = get_global_logger()

    defined = 0
    for name, value in values.items():
        if not sink.has(name):
            sink.set(name, value)
            defined += 1
        else:
            logger.debug("ENV", f"Keeping existing {name} from environment")
        sink.mirror(name, value)

    logger.verbose(
        "ENV",
        f"Defined {defined} of {len(values)} variable(s); "
        f"{len(values) - defined} already set",
    )
    return defined

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

"""Process-wide shared store.

Prefer constructing a ConfigStore yourself and passing it to the code that
needs it. For scripts and frameworks where that is impractical,
get_instance() hands out one shared store per process.

The first call wins. The store is built from the arguments of the first
call, and every later call returns that same object; base_path, env, sink
and logger passed to later calls are ignored. Two parts of a program that
call get_instance() with different directories therefore both see the
first directory's files.

First construction is guarded by a lock, so concurrent first calls run the
load exactly once. If construction raises, nothing is installed and the
next call tries again.

Example:
    ```python
    from layerenv import get_instance

    env = get_instance("/srv/app")
    assert get_instance("/somewhere/else") is env
    ```
"""

from __future__ import annotations

import os
from pathlib import Path
import threading

from layerenv.logging import Logger
from layerenv.sink import EnvironmentSink
from layerenv.store import ConfigStore

__all__ = ["get_instance", "reset_instance"]

_instance: ConfigStore | None = None
_lock = threading.Lock()


def get_instance(
    base_path: str | os.PathLike[str] | None = None,
    *,
    env: str | None = None,
    sink: EnvironmentSink | None = None,
    logger: Logger | None = None,
) -> ConfigStore:
    """Return the shared store, creating it on the first call.

    Args:
        base_path: Directory containing the .env files. Defaults to the
            current working directory. Only used by the first call.
        env: Explicit environment hint. Only used by the first call.
        sink: Environment sink. Only used by the first call.
        logger: Logger for load output. Only used by the first call.

    Returns:
        The process-wide ConfigStore.

    Raises:
        FatalIOError: The first construction could not read a layer file.
    """
    global _instance

    instance = _instance
    if instance is not None:
        return instance

    with _lock:
        if _instance is None:
            _instance = ConfigStore(
                Path.cwd() if base_path is None else base_path,
                env=env,
                sink=sink,
                logger=logger,
            )
        return _instance


def reset_instance() -> None:
    """Forget the shared store so the next get_instance() loads again.

    Intended for tests. Values already pushed into the environment stay
    there.
    """
    global _instance
    with _lock:
        _instance = None

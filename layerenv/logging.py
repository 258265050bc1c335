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

"""Logging interface for layerenv.

Loading a store happens at import time in most applications, so the library
must stay quiet unless asked otherwise. Library functions write through a
small Logger protocol; the default global logger is silent, and the CLI
installs a printing logger when --verbose or --debug is passed.

Output levels:

- Step: always printed (CLI progress indicators)
- Verbose: which layers were found, loaded, merged and propagated
- Debug: per-line parser decisions and YAML dumps of each layer
  (implies verbose)

Example:
    Trace a load from application code:
        ```python
        from layerenv import ConfigStore
        from layerenv.logging import get_logger

        store = ConfigStore("/srv/app", logger=get_logger(debug=True))
        ```

    Configure the global logger once:
        ```python
        from layerenv.logging import get_logger, set_global_logger

        set_global_logger(get_logger(verbose=True))
        ```
"""

from __future__ import annotations

from typing import Protocol


class Logger(Protocol):
    """Protocol for logger implementations."""

    def step(self, step: int, total: int, message: str) -> None:
        """Print a step indicator.

        Args:
            step: Current step number (1-based).
            total: Total number of steps.
            message: Step description.
        """
        ...

    def verbose(self, prefix: str, message: str) -> None:
        """Print a verbose log message.

        Args:
            prefix: Message prefix (e.g., "LOAD", "ENV").
            message: Log message.
        """
        ...

    def debug(self, prefix: str, message: str) -> None:
        """Print a debug log message.

        Args:
            prefix: Message prefix (e.g., "PARSE", "MERGE").
            message: Log message.
        """
        ...


class DefaultLogger:
    """Logger that prints to stdout in the CLI's "[PREFIX] message" format."""

    def __init__(self, verbose: bool = False, debug: bool = False) -> None:
        self._verbose = verbose or debug
        self._debug = debug

    @property
    def debug_enabled(self) -> bool:
        return self._debug

    def step(self, step: int, total: int, message: str) -> None:
        print(f"[{step}/{total}] {message}")

    def verbose(self, prefix: str, message: str) -> None:
        if self._verbose:
            print(f"[{prefix}] {message}")

    def debug(self, prefix: str, message: str) -> None:
        if self._debug:
            print(f"[{prefix}] {message}")


class SilentLogger:
    """Logger that suppresses all output."""

    debug_enabled = False

    def step(self, step: int, total: int, message: str) -> None:
        pass

    def verbose(self, prefix: str, message: str) -> None:
        pass

    def debug(self, prefix: str, message: str) -> None:
        pass


# Global logger instance (defaults to silent)
_global_logger: Logger = SilentLogger()


def get_logger(verbose: bool = False, debug: bool = False) -> Logger:
    """Return a printing logger with the given verbosity.

    Args:
        verbose: If True, print verbose messages.
        debug: If True, print debug messages (implies verbose).

    Returns:
        A DefaultLogger instance.
    """
    return DefaultLogger(verbose=verbose, debug=debug)


def get_global_logger() -> Logger:
    """Return the logger used when a function is not given one."""
    return _global_logger


def set_global_logger(logger: Logger) -> None:
    """Replace the global logger.

    Args:
        logger: Logger instance to use as the global logger.

    Note:
        Only affects calls made without an explicit logger argument.
    """
    global _global_logger
    _global_logger = logger


def debug_enabled(logger: Logger) -> bool:
    """Return True if the logger will print debug output.

    Used to skip building expensive debug dumps (YAML rendering of whole
    layers) when nobody will see them. Loggers that do not expose a
    debug_enabled attribute are assumed to want everything.
    """
    return bool(getattr(logger, "debug_enabled", True))

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

"""Parser for dotenv-style layer files.

Each line is handled on its own:

1. Whitespace is trimmed. Blank lines and lines starting with ``#`` are
   ignored.
2. Lines without ``=`` are ignored.
3. The line is split on the first ``=``; both sides are trimmed.
4. One layer of matching ``"`` or ``'`` quotes around the value is removed.
   Nothing inside the quotes is unescaped.
5. ``true``/``false`` (any case) become ``"true"``/``"false"``;
   ``null``/``empty`` (any case) become ``""``.

A key that appears twice keeps its last value. ``KEY=`` stores an empty
string, which is not the same as the key being absent.

Example:
    ```python
    from layerenv.parser import parse_lines

    parse_lines(['APP_NAME="My App"', "# comment", "APP_DEBUG=TRUE"])
    # {"APP_NAME": "My App", "APP_DEBUG": "true"}
    ```
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import NamedTuple

from layerenv.logging import Logger, get_global_logger

__all__ = ["Entry", "iter_entries", "normalize_value", "parse_lines", "parse_file"]

_QUOTES = ('"', "'")
_LITERALS = {"true": "true", "false": "false", "null": "", "empty": ""}


class Entry(NamedTuple):
    """One meaningful line of a layer file.

    Attributes:
        lineno: 1-based line number.
        key: Parsed key, or None if the line is malformed (no ``=`` or an
            empty key).
        value: Normalized value; empty for malformed lines.
        raw: The trimmed source line.
    """

    lineno: int
    key: str | None
    value: str
    raw: str


def normalize_value(raw: str) -> str:
    """Strip one layer of matching quotes and map the special literals.

    Args:
        raw: Value text to the right of the first ``=``.

    Returns:
        The stored form of the value.
    """
    value = raw.strip()
    if len(value) >= 2 and value[0] in _QUOTES and value[-1] == value[0]:
        value = value[1:-1]
    return _LITERALS.get(value.lower(), value)


def iter_entries(lines: Iterable[str]) -> Iterator[Entry]:
    """Yield an Entry for every line that is not blank or a comment."""
    for lineno, line in enumerate(lines, start=1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        name, sep, raw_value = line.partition("=")
        key = name.strip()
        if not sep or not key:
            yield Entry(lineno, None, "", line)
            continue
        yield Entry(lineno, key, normalize_value(raw_value), line)


def parse_lines(
    lines: Iterable[str],
    *,
    source: str = "<lines>",
    logger: Logger | None = None,
) -> dict[str, str]:
    """Parse layer file lines into a flat mapping.

    Args:
        lines: Lines of the file, with or without trailing newlines.
        source: Name used in debug output.
        logger: Logger for debug output. Defaults to the global logger.

    Returns:
        Mapping of key to stored string value.
    """
    if logger is None:
        logger = get_global_logger()

    result: dict[str, str] = {}
    for entry in iter_entries(lines):
        if entry.key is None:
            logger.debug("PARSE", f"{source}:{entry.lineno}: skipped {entry.raw!r}")
            continue
        result[entry.key] = entry.value
    return result


def parse_file(path: Path, *, logger: Logger | None = None) -> dict[str, str]:
    """Read and parse a single layer file.

    Errors from opening or decoding the file propagate unchanged; the
    loader decides which of them are fatal.
    """
    text = Path(path).read_text(encoding="utf-8-sig")
    return parse_lines(text.splitlines(), source=str(path), logger=logger)

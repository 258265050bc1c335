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

"""Coercion of stored string values into typed values.

Every function here is total: malformed input never raises, it falls back
to a documented value instead.

Numbers use the numeric prefix of the string. Leading whitespace is
skipped, then the longest prefix that looks like a decimal number (optional
sign, digits with an optional fraction, optional exponent) is used and the
rest of the string is ignored. A string with no such prefix is 0.

    ============  ==========  ============
    Value         to_int      to_float
    ============  ==========  ============
    "42"          42          42.0
    "  -7 "       -7          -7.0
    "12abc"       12          12.0
    "3.9"         3           3.9
    "1e3"         1000        1000.0
    ".5"          0           0.5
    "abc"         0           0.0
    ""            0           0.0
    ============  ==========  ============

Booleans are true only for "1", "true", "on" and "yes" (any case).
"""

from __future__ import annotations

import math
import re

__all__ = ["TRUTHY", "numeric_prefix", "to_int", "to_float", "to_bool", "to_list"]

TRUTHY = frozenset({"1", "true", "on", "yes"})

_NUMBER_RE = re.compile(
    r"""
    [+-]?
    (?: \d+ (?:\.\d*)? | \.\d+ )
    (?: [eE][+-]?\d+ )?
    """,
    re.VERBOSE | re.ASCII,
)


def numeric_prefix(value: str) -> str | None:
    """Return the leading number in value, or None if there is none."""
    match = _NUMBER_RE.match(value.lstrip())
    return match.group(0) if match else None


def to_int(value: str) -> int:
    """Coerce a string to int using its numeric prefix.

    Fractions and exponents are evaluated and truncated toward zero. Values
    too large to represent (e.g. "1e999") coerce to 0.
    """
    prefix = numeric_prefix(value)
    if prefix is None:
        return 0
    try:
        return int(prefix)
    except ValueError:
        pass
    number = float(prefix)
    if not math.isfinite(number):
        return 0
    return int(number)


def to_float(value: str) -> float:
    """Coerce a string to float using its numeric prefix."""
    prefix = numeric_prefix(value)
    if prefix is None:
        return 0.0
    return float(prefix)


def to_bool(value: str | bool) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).lower() in TRUTHY


def to_list(value: str) -> list[str]:
    """Split a comma separated string, trimming each piece.

    Empty pieces are kept: "a,,b" gives ["a", "", "b"].
    """
    return [piece.strip() for piece in value.split(",")]

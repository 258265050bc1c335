"""
Layer discovery, reading and merging for layerenv.

This module turns a base directory into one flat mapping by reading up to
three dotenv files and letting later files override earlier ones.

Configuration Layers
--------------------
1. **Base** (``<base>/.env``)
   - Shared defaults, usually committed
   - Always attempted

2. **Environment** (``<base>/.env.<hint>``, e.g. ``.env.production``)
   - Only attempted when the hint is non-empty
   - Overrides the base layer

3. **Local** (``<base>/.env.local``)
   - Machine-specific overrides, usually git-ignored
   - Always attempted
   - Overrides everything else

A layer file that does not exist is skipped without complaint.

Environment Hint
----------------
The hint is the value of ``APP_ENV``, looked up through the environment
sink: first the external environment, then the process-wide cache. An empty
value in either place counts as unset. Callers can bypass the lookup by
passing ``env=`` explicitly.

Merge Behavior
--------------
The merge is shallow: a key from a later layer replaces the same key from
an earlier layer, and keys unique to any layer are kept. Values are always
strings, so there is nothing to merge recursively.

Error Handling
--------------
- FileNotFoundError: the layer is absent and silently skipped
- Any other OSError, or undecodable bytes: FatalIOError, chained with
  "from err"
- A NUL character in a key or value: FatalIOError, raised before anything
  is pushed into the environment

Examples
--------
Load and merge without touching the process environment:

    >>> from pathlib import Path
    >>> from layerenv.loader import load_layers
    >>> values, context = load_layers(Path("/srv/app"), "production")
    >>> context.loaded_paths
    (PosixPath('/srv/app/.env'), PosixPath('/srv/app/.env.production'))
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path

import yaml

from layerenv.exceptions import FatalIOError
from layerenv.logging import Logger, debug_enabled, get_global_logger
from layerenv.parser import parse_lines
from layerenv.sink import EnvironmentSink

ENV_FILENAME = ".env"
LOCAL_SUFFIX = "local"
HINT_VARIABLE = "APP_ENV"

# -------------------------------
# Data types
# -------------------------------


@dataclass(frozen=True)
class Layer:
    """One parsed layer file."""

    name: str
    path: Path
    values: Mapping[str, str]


@dataclass(frozen=True)
class LoadContext:
    """
    Metadata describing how a store was resolved.
    Useful for debugging and logging.
    """

    base_path: Path
    env: str
    attempted_paths: tuple[Path, ...]
    loaded_paths: tuple[Path, ...]


# -------------------------------
# Hint resolution
# -------------------------------


def resolve_env_hint(sink: EnvironmentSink) -> str:
    """
    Return the environment hint used to pick the middle layer.

    Priority:
      1) HINT_VARIABLE in the external environment
      2) HINT_VARIABLE in the process-wide cache
      3) "" (no environment layer)
    """
    return sink.get(HINT_VARIABLE) or sink.cached(HINT_VARIABLE) or ""


# -------------------------------
# Layer discovery and reading
# -------------------------------


def layer_paths(base_path: Path, env: str) -> list[tuple[str, Path]]:
    """
    Return (name, path) for each layer to attempt, lowest precedence first.
    The environment layer is left out when 'env' is empty.
    """
    names = [ENV_FILENAME]
    if env:
        names.append(f"{ENV_FILENAME}.{env}")
    names.append(f"{ENV_FILENAME}.{LOCAL_SUFFIX}")
    return [(name, base_path / name) for name in names]


def read_layer_text(path: Path) -> str | None:
    """
    Read the text of one layer file.

    Returns None if the file does not exist.

    Raises:
      FatalIOError - the file exists but cannot be opened or decoded
    """
    try:
        return path.read_text(encoding="utf-8-sig")
    except FileNotFoundError:
        return None
    except UnicodeDecodeError as err:
        raise FatalIOError(path, f"not valid UTF-8 ({err.reason})") from err
    except OSError as err:
        raise FatalIOError(path, err.strerror or str(err)) from err


def layer_from_text(
    name: str, path: Path, text: str, *, logger: Logger | None = None
) -> Layer:
    """
    Parse layer text into a Layer.

    Raises:
      FatalIOError - a key or value contains a NUL character, which no
                     process environment can hold
    """
    values = parse_lines(text.splitlines(), source=str(path), logger=logger)
    for key, value in values.items():
        if "\0" in key or "\0" in value:
            raise FatalIOError(path, f"NUL character in entry {key!r}")
    return Layer(name=name, path=path, values=values)


def read_layer(
    name: str, path: Path, *, logger: Logger | None = None
) -> Layer | None:
    """
    Read and parse one layer file.

    Returns None if the file does not exist.

    Raises:
      FatalIOError - the file exists but cannot be opened or decoded,
                     or an entry contains a NUL character
    """
    text = read_layer_text(path)
    if text is None:
        return None
    return layer_from_text(name, path, text, logger=logger)


# -------------------------------
# Merge logic
# -------------------------------


def merge_layers(layers: Iterable[Layer]) -> dict[str, str]:
    """
    Shallow-merge layers in order; later layers win.

    Does not mutate the layers; returns a new dict.
    """
    merged: dict[str, str] = {}
    for layer in layers:
        merged.update(layer.values)
    return merged


# -------------------------------
# Debug helpers
# -------------------------------


def _dump_yaml(logger: Logger, data: Mapping[str, str]) -> None:
    """Print a mapping as YAML through the logger's debug channel."""
    if not debug_enabled(logger):
        return
    yaml_str = yaml.safe_dump(dict(data), default_flow_style=False, sort_keys=False)
    for line in yaml_str.split("\n"):
        if line.strip():
            logger.debug("MERGE", "  " + line)


# -------------------------------
# Public API
# -------------------------------


def load_layers(
    base_path: Path,
    env: str,
    *,
    logger: Logger | None = None,
) -> tuple[dict[str, str], LoadContext]:
    """
    Load and merge every layer under 'base_path'.

    Steps
      1) Work out which files to attempt for 'env'.
      2) Read each file that exists (missing files are skipped).
      3) Merge: .env -> .env.<env> -> .env.local (later wins).

    Returns
      The merged mapping and a LoadContext describing what was read.

    Raises
      FatalIOError if an existing layer cannot be read.
    """
    if logger is None:
        logger = get_global_logger()

    candidates = layer_paths(base_path, env)
    layers: list[Layer] = []

    for name, path in candidates:
        layer = read_layer(name, path, logger=logger)
        if layer is None:
            logger.verbose("LOAD", f"Not found, skipping: {name}")
            continue
        logger.verbose("LOAD", f"Loaded {name} ({len(layer.values)} key(s))")
        logger.debug("MERGE", f"--- Content from {name} ---")
        _dump_yaml(logger, layer.values)
        layers.append(layer)

    merged = merge_layers(layers)

    logger.verbose(
        "MERGE", f"Merged {len(layers)} layer(s) into {len(merged)} key(s)"
    )
    logger.debug("MERGE", "--- Final merged configuration ---")
    _dump_yaml(logger, merged)

    context = LoadContext(
        base_path=base_path,
        env=env,
        attempted_paths=tuple(path for _, path in candidates),
        loaded_paths=tuple(layer.path for layer in layers),
    )
    return merged, context

"""
layerenv - layered .env configuration for Python applications

layerenv reads key/value pairs from up to three dotenv files in a base
directory, merges them with fixed precedence, and serves typed lookups.

layerenv provides:
  - Layered loading: .env < .env.<APP_ENV> < .env.local
  - Quote stripping and true/false/null/empty literals
  - Typed accessors that never raise (string, int, float, bool, array)
  - Required-variable validation with a single, complete error
  - Propagation of loaded values into the process environment through an
    injectable sink
  - A guarded, process-wide shared instance for scripts

Quick Start
-----------
Build a store in your composition root:

    from layerenv import ConfigStore

    env = ConfigStore("/srv/app")
    env.require_vars(["DB_HOST", "DB_PASSWORD"])
    port = env.get_int("DB_PORT", 5432)

Or use the shared instance (the first call's directory wins):

    from layerenv import get_instance

    env = get_instance("/srv/app")

Inspect a directory from the shell:

    $ layerenv show /srv/app
    $ layerenv check /srv/app --require DB_HOST DB_PASSWORD

Package Structure
-----------------
store : module
    ConfigStore, typed accessors and require_vars.
instance : module
    Process-wide get_instance()/reset_instance().
loader : module
    Environment hint resolution, layer discovery and merging.
parser : module
    Line-by-line dotenv parsing.
coercion : module
    Numeric, boolean and list coercion rules.
sink : module
    EnvironmentSink protocol and implementations.
validation : module
    Non-raising directory checks.
cli : module
    Command-line interface with argparse.
"""

__version__ = "0.1.0"
__license__ = "Apache-2.0"
__description__ = "Layered .env configuration loader with typed accessors"

from layerenv.exceptions import (
    ConfigValidationError,
    FatalIOError,
    LayerEnvError,
    MissingRequiredVariableError,
)
from layerenv.instance import get_instance, reset_instance
from layerenv.sink import EnvironmentSink, MemoryEnvironmentSink, ProcessEnvironmentSink
from layerenv.store import ConfigStore
from layerenv.validation import validate_env_dir

__all__ = [
    "__version__",
    "__license__",
    "__description__",
    "ConfigStore",
    "get_instance",
    "reset_instance",
    "EnvironmentSink",
    "ProcessEnvironmentSink",
    "MemoryEnvironmentSink",
    "validate_env_dir",
    "LayerEnvError",
    "ConfigValidationError",
    "MissingRequiredVariableError",
    "FatalIOError",
]

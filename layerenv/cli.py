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

"""Command-line interface for layerenv.

This module provides the ``layerenv`` command for inspecting and checking
a directory of layer files from a shell or a deployment script.

Commands:

    show: Print the merged configuration
    get: Print one value through a typed accessor
    check: Validate layer files and required variables

Example:
    Show what an application would see in production:
        ```bash
        $ APP_ENV=production layerenv show /srv/app
        ```

    Read a typed value:
        ```bash
        $ layerenv get /srv/app DB_PORT --type int
        ```

    Fail a deployment when secrets are missing:
        ```bash
        $ layerenv check /srv/app --require DB_HOST DB_USERNAME DB_PASSWORD
        ```

    Trace which files were read:
        ```bash
        $ layerenv show /srv/app --debug
        ```

Exit Codes:

- 0: Success
- 1: Error (unreadable layer file or failed check)

Note:
    Stores built by the CLI use a MemoryEnvironmentSink seeded from the
    real environment, so APP_ENV is honoured but the CLI process itself is
    never modified.

"""

from __future__ import annotations

import argparse
from importlib.metadata import PackageNotFoundError, version
import json
import os
import sys

import yaml

from layerenv.coercion import to_bool, to_float, to_int, to_list
from layerenv.exceptions import LayerEnvError
from layerenv.logging import get_logger, set_global_logger
from layerenv.sink import MemoryEnvironmentSink
from layerenv.store import ConfigStore
from layerenv.validation import validate_env_dir


def _package_version() -> str:
    try:
        return version("layerenv")
    except PackageNotFoundError:
        from layerenv import __version__

        return __version__


def _load_store(args: argparse.Namespace) -> ConfigStore:
    return ConfigStore(
        args.base,
        env=args.env,
        sink=MemoryEnvironmentSink(environ=os.environ),
    )


def _report_error(err: LayerEnvError, args: argparse.Namespace) -> int:
    print(f"Error: {err}")
    if args.verbose or args.debug:
        import traceback

        traceback.print_exc()
    return 1


def cmd_show(args: argparse.Namespace) -> int:
    """Handler for 'layerenv show' command.

    Prints the merged mapping in precedence order, as text (KEY=value lines)
    or as YAML.

    Args:
        args: Parsed command-line arguments containing the base directory,
            environment override, output format and verbosity flags.

    Returns:
        Exit code (0 for success, 1 for failure).

    """
    logger = get_logger(verbose=args.verbose, debug=args.debug)
    set_global_logger(logger)

    try:
        store = _load_store(args)
    except LayerEnvError as err:
        return _report_error(err, args)

    logger.verbose("LOAD", f"Base directory: {store.base_path}")
    logger.verbose("LOAD", f"Environment: {store.env or '(none)'}")

    values = store.as_dict()
    if args.format == "yaml":
        sys.stdout.write(
            yaml.safe_dump(values, default_flow_style=False, sort_keys=False)
        )
    else:
        for key, value in values.items():
            print(f"{key}={value}")
    return 0


def cmd_get(args: argparse.Namespace) -> int:
    """Handler for 'layerenv get' command.

    Reads one key through the accessor matching --type. Arrays are printed
    as a JSON list, booleans as "true"/"false".

    Returns:
        Exit code (0 for success, 1 for failure).

    """
    logger = get_logger(verbose=args.verbose, debug=args.debug)
    set_global_logger(logger)

    try:
        store = _load_store(args)
    except LayerEnvError as err:
        return _report_error(err, args)

    raw_default = args.default or ""
    if args.type == "int":
        print(store.get_int(args.key, to_int(raw_default)))
    elif args.type == "float":
        print(store.get_float(args.key, to_float(raw_default)))
    elif args.type == "bool":
        print("true" if store.get_bool(args.key, to_bool(raw_default)) else "false")
    elif args.type == "array":
        fallback = to_list(raw_default) if raw_default else []
        print(json.dumps(store.get_array(args.key, fallback)))
    else:
        print(store.get_string(args.key, raw_default))
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    """Handler for 'layerenv check' command.

    Validates every layer file in the directory and the presence of the
    required variables, without modifying any environment.

    Args:
        args: Parsed command-line arguments containing the base directory,
            required keys, environment override and verbosity flags.

    Returns:
        Exit code (0 for valid, 1 for invalid).

    Note:
        Prints validation results, errors, and warnings to stdout.

    """
    logger = get_logger(verbose=args.verbose, debug=args.debug)
    set_global_logger(logger)

    logger.step(1, 2, f"Checking layer files in {args.base}")
    result = validate_env_dir(args.base, args.require, env=args.env)
    logger.step(2, 2, "Done")
    print()

    print("=" * 70)
    print("VALIDATION RESULTS")
    print("=" * 70)
    print(f"Directory:   {result.base_path}")
    print(f"Environment: {result.env or '(none)'}")
    print(f"Status:      {result.status.upper()}")
    print(f"Files:       {', '.join(p.name for p in result.loaded_files) or '(none)'}")
    print(f"Key Count:   {result.key_count}")
    print()

    if result.warnings:
        print(f"Warnings ({len(result.warnings)}):")
        for warning in result.warnings:
            print(f"  [WARNING] {warning}")
        print()

    if result.errors:
        print(f"Errors ({len(result.errors)}):")
        for error in result.errors:
            print(f"  [X] {error}")
        print()

    print("=" * 70)

    if result.is_valid:
        print()
        print("[SUCCESS] Configuration is valid!")
        return 0
    print()
    print(f"[FAILED] Validation failed with {len(result.errors)} error(s).")
    return 1


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--env",
        default=None,
        help="Environment name selecting .env.<env> (default: $APP_ENV)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show which layer files were read",
    )
    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Show per-layer contents and parser details (implies --verbose)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="layerenv",
        description="layerenv - layered .env configuration loader",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"layerenv {_package_version()}",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands",
        required=True,
    )

    # 'show' command
    parser_show = subparsers.add_parser(
        "show",
        help="Print the merged configuration",
        description="Load .env, .env.<env> and .env.local and print the merged result.",
    )
    parser_show.add_argument(
        "base",
        nargs="?",
        default=".",
        help="Directory containing the .env files (default: current directory)",
    )
    parser_show.add_argument(
        "--format",
        choices=["text", "yaml"],
        default="text",
        help="Output format (default: text)",
    )
    _add_common_arguments(parser_show)
    parser_show.set_defaults(func=cmd_show)

    # 'get' command
    parser_get = subparsers.add_parser(
        "get",
        help="Print a single value",
        description="Read one key from the merged configuration using a typed accessor.",
    )
    parser_get.add_argument(
        "base",
        help="Directory containing the .env files",
    )
    parser_get.add_argument(
        "key",
        help="Variable name",
    )
    parser_get.add_argument(
        "--type",
        choices=["string", "int", "float", "bool", "array"],
        default="string",
        help="Accessor to use (default: string)",
    )
    parser_get.add_argument(
        "--default",
        default=None,
        help="Value to use when the key is absent",
    )
    _add_common_arguments(parser_get)
    parser_get.set_defaults(func=cmd_get)

    # 'check' command
    parser_check = subparsers.add_parser(
        "check",
        help="Validate layer files and required variables",
        description="Report malformed lines and missing required variables without loading anything into the environment.",
    )
    parser_check.add_argument(
        "base",
        nargs="?",
        default=".",
        help="Directory containing the .env files (default: current directory)",
    )
    parser_check.add_argument(
        "--require",
        nargs="+",
        default=[],
        metavar="KEY",
        help="Variables that must be present with a non-empty value",
    )
    _add_common_arguments(parser_check)
    parser_check.set_defaults(func=cmd_check)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the layerenv CLI.

    This function is registered as the 'layerenv' console script in
    pyproject.toml.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    exit_code = args.func(args)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()

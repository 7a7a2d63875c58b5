"""
CLI argument parsing for opam-lock.

This module provides the main argument parsing entry point,
using the argument builders from the cli package.
"""

import argparse
import sys

import yaml

from opamlock import VERSION
from opamlock.config import LOCK_MODES
from opamlock.errors import ConfigurationError, ErrorCode
from opamlock.cli import (
    PROGRAM_DESCRIPTIONS,
    add_lock_arguments,
    add_install_arguments,
    add_verify_arguments,
)


def build_parser():
    parser = argparse.ArgumentParser(
        prog="opam-lock",
        description="Generate and replay reproducible locks for opam switches",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    sub_programs = parser.add_subparsers(dest="program", required=True)

    lock_parser = sub_programs.add_parser(
        LOCK_MODES.lock.value,
        description=PROGRAM_DESCRIPTIONS['lock'],
        help="Print a lock for the current switch",
    )
    install_parser = sub_programs.add_parser(
        LOCK_MODES.install.value,
        description=PROGRAM_DESCRIPTIONS['install'],
        help="Install packages from a lock",
    )
    verify_parser = sub_programs.add_parser(
        LOCK_MODES.verify.value,
        description=PROGRAM_DESCRIPTIONS['verify'],
        help="Verify the current switch against a lock",
    )

    add_lock_arguments(lock_parser)
    add_install_arguments(install_parser)
    add_verify_arguments(verify_parser)

    return parser


def parse_arguments(argv=None):
    """Parse command-line arguments for opam-lock.

    Args:
        argv: Argument list (default: sys.argv[1:]).

    Returns:
        argparse.Namespace: Parsed and validated arguments.

    Raises:
        ConfigurationError: If a --config-file cannot be read or parsed.
    """
    parser = build_parser()
    if argv is None:
        argv = sys.argv[1:]

    if not argv:
        parser.print_help(sys.stderr)
        sys.exit(2)

    parsed_args = parser.parse_args(argv)

    if getattr(parsed_args, 'config_file', None):
        parsed_args = apply_yaml_config_overrides(parsed_args)

    return parsed_args


def apply_yaml_config_overrides(args):
    """
    Apply overrides from a YAML config file to the parsed arguments.

    Only keys that already exist on ``args`` are applied; ``None`` values are
    skipped so they never clear a command-line value.

    Args:
        args (argparse.Namespace): The parsed command-line arguments

    Returns:
        argparse.Namespace: The updated arguments with YAML overrides applied
    """
    try:
        with open(args.config_file, 'r') as f:
            yaml_config = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigurationError(
            f"Config file not found: {args.config_file}",
            path=args.config_file,
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
        )
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Error parsing YAML config file: {e}",
            path=args.config_file,
            code=ErrorCode.CONFIG_PARSE_ERROR,
        )

    if not yaml_config:
        print(f"Warning: Config file {args.config_file} is empty", file=sys.stderr)
        return args

    if not isinstance(yaml_config, dict):
        raise ConfigurationError(
            "Config file must contain a mapping of argument names to values",
            path=args.config_file,
            code=ErrorCode.CONFIG_PARSE_ERROR,
        )

    args_dict = vars(args)
    for key, value in yaml_config.items():
        key = str(key).replace('-', '_')
        if key not in args_dict:
            print(f"Warning: Config file contains unknown parameter '{key}', skipping", file=sys.stderr)
            continue
        if value is None:
            continue
        args_dict[key] = value

    return argparse.Namespace(**args_dict)

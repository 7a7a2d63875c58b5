"""
CLI argument builders for the opam-lock commands.

Provides arguments for:
- opam-lock lock: Resolve the current switch into a lock
- opam-lock install: Replay a lock into the current switch
- opam-lock verify: Compare the current switch with a lock
"""

from opamlock.config import DEFAULT_LOCKFILE
from opamlock.cli.common_args import (
    HELP_MESSAGES,
    add_lockfile_input_argument,
    add_universal_arguments,
)


def add_lock_arguments(parser):
    """Add arguments for `opam-lock lock`.

    Args:
        parser: The lock subparser from argparse.
    """
    parser.add_argument(
        "package",
        nargs="?",
        default=None,
        help=HELP_MESSAGES['package'],
    )
    parser.add_argument(
        "-o", "--output",
        default=DEFAULT_LOCKFILE,
        help=HELP_MESSAGES['output'],
    )
    add_universal_arguments(parser)
    return parser


def add_install_arguments(parser):
    """Add arguments for `opam-lock install`."""
    add_lockfile_input_argument(parser)
    parser.add_argument(
        "--what-if",
        action="store_true",
        help=HELP_MESSAGES['what_if'],
    )
    add_universal_arguments(parser)
    return parser


def add_verify_arguments(parser):
    """Add arguments for `opam-lock verify`."""
    parser.add_argument(
        "package",
        nargs="?",
        default=None,
        help=HELP_MESSAGES['package'],
    )
    add_lockfile_input_argument(parser)
    parser.add_argument(
        "--strict",
        action="store_true",
        help=HELP_MESSAGES['strict'],
    )
    add_universal_arguments(parser)
    return parser

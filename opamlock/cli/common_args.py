"""
Common CLI arguments and help messages shared across opam-lock commands.

This module contains:
- Help message definitions
- Program descriptions
- Universal argument functions
"""

from opamlock.config import DEFAULT_LOCKFILE, OPAM_BIN


# Help messages dictionary - shared across all argument builders
HELP_MESSAGES = {
    'package': (
        "Only lock this package and everything it transitively requires. "
        "Without it, every package installed in the current switch is locked."
    ),
    'output': "Where to write the lock ('-' for standard output, the default).",
    'lockfile': "Lock file to read ('-' for standard input, the default).",
    'what_if': "Print the opam commands that would run without running them.",
    'strict': "Also fail when the switch has packages that are not in the lock file.",
    'opam_bin': f"opam executable to call (default: {OPAM_BIN}, or $OPAMLOCK_OPAM_BIN).",
    'config_file': "Path to YAML file with argument overrides.",
    'debug': "Enable debug mode: trace every opam command with its full output.",
    'verbose': "Enable verbose mode: trace every opam command and its output.",
    'stream_log_level': "Log level for messages written to stderr (default: INFO).",
}

PROGRAM_DESCRIPTIONS = {
    'lock': (
        "Resolve the packages installed in the current opam switch, and the git "
        "commits their pins point to, into a reproducible lock."
    ),
    'install': (
        "Replay a lock: pin every git package to its locked ref, then install "
        "all locked packages with a single opam install."
    ),
    'verify': "Check that the current opam switch matches a lock file.",
}


def add_universal_arguments(parser):
    """Add arguments common to all opam-lock commands.

    Args:
        parser: Argparse parser to add arguments to.
    """
    standard_args = parser.add_argument_group("Standard Arguments")
    standard_args.add_argument(
        '--opam-bin',
        type=str,
        default=None,
        help=HELP_MESSAGES['opam_bin']
    )
    standard_args.add_argument(
        '--config-file', '-c',
        type=str,
        help=HELP_MESSAGES['config_file']
    )

    output_control = parser.add_argument_group("Output Control")
    output_control.add_argument(
        "--debug",
        action="store_true",
        help=HELP_MESSAGES['debug']
    )
    output_control.add_argument(
        "--verbose",
        action="store_true",
        help=HELP_MESSAGES['verbose']
    )
    output_control.add_argument(
        "--stream-log-level",
        type=str,
        default="INFO",
        help=HELP_MESSAGES['stream_log_level']
    )


def add_lockfile_input_argument(parser):
    parser.add_argument(
        "-l", "--lockfile",
        default=DEFAULT_LOCKFILE,
        help=HELP_MESSAGES['lockfile'],
    )

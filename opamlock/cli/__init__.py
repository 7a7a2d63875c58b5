"""
CLI argument builders for opam-lock.

Modules:
    - common_args: Shared help messages and universal arguments
    - lockfile_args: lock, install and verify arguments

Usage:
    from opamlock.cli import add_lock_arguments

    lock_parser = sub_programs.add_parser("lock")
    add_lock_arguments(lock_parser)
"""

from opamlock.cli.common_args import (
    HELP_MESSAGES,
    PROGRAM_DESCRIPTIONS,
    add_universal_arguments,
    add_lockfile_input_argument,
)
from opamlock.cli.lockfile_args import (
    add_lock_arguments,
    add_install_arguments,
    add_verify_arguments,
)

__all__ = [
    # Common
    'HELP_MESSAGES',
    'PROGRAM_DESCRIPTIONS',
    'add_universal_arguments',
    'add_lockfile_input_argument',
    # Command argument builders
    'add_lock_arguments',
    'add_install_arguments',
    'add_verify_arguments',
]

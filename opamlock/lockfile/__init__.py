"""
Lock resolution, replay and validation for opam switches.

Key features:
- Resolve installed packages and git pins into a reproducible LockState
- Pin git packages to the commit currently checked out
- Replay a lock with `opam pin add` and a single `opam install`
- Read and write the `name = version` lock-file format
- Compare a switch against a lock file

Public exports:
    Fixed, GitRef, Package, PinRecord, LockState: Data model
    version_of_string: Classify a raw version string
    LockRequest: What to lock (everything, or a package's dependencies)
    state: Build the resolution pipeline
    install: Build the install pipeline
    verify: Build the validation pipeline
    read_lockfile, write_lockfile, parse_lock_text, format_lock_text: Lock-file I/O
"""

from opamlock.lockfile.models import (
    Fixed,
    GitRef,
    Package,
    PinRecord,
    LockState,
    Version,
    version_of_string,
)
from opamlock.lockfile.io import (
    read_lockfile,
    write_lockfile,
    parse_lock_text,
    format_lock_text,
    strip_comment,
)
from opamlock.lockfile.resolver import (
    LockRequest,
    state,
    choose_ref,
)
from opamlock.lockfile.installer import install
from opamlock.lockfile.validator import (
    verify,
    compare_states,
    format_validation_report,
    LockValidationResult,
    ValidationResult,
)

__all__ = [
    # Models
    "Fixed",
    "GitRef",
    "Package",
    "PinRecord",
    "LockState",
    "Version",
    "version_of_string",
    # I/O
    "read_lockfile",
    "write_lockfile",
    "parse_lock_text",
    "format_lock_text",
    "strip_comment",
    # Resolver
    "LockRequest",
    "state",
    "choose_ref",
    # Installer
    "install",
    # Validator
    "verify",
    "compare_states",
    "format_validation_report",
    "LockValidationResult",
    "ValidationResult",
]

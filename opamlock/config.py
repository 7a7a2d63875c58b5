"""
Constants, enums and environment handling for opamlock.

Everything that names an external contract with opam (binary name, sub-command
flags, magic version strings) lives here so that the resolver and installer
only ever deal with argument lists.
"""

import enum
import os
from dataclasses import dataclass


def check_env(setting, default_value=None):
    """
    Return the value of an environment variable, converting 'true'/'false'
    strings to booleans. Falls back to default_value when the variable is unset.
    """
    value = os.environ.get(setting)
    if value is None:
        return default_value
    if value.lower() == "true":
        return True
    if value.lower() == "false":
        return False
    return value


VERSION = "0.3.0"

OPAMLOCK_DEBUG = check_env("OPAMLOCK_DEBUG", False)
OPAM_BIN = check_env("OPAMLOCK_OPAM_BIN", "opam")

# Version literal opam reports for the implicit base/compiler packages
BASE_VERSION = "base"

# Second column of `opam pin` output for git-controlled pins
GIT_PIN_KIND = "git"

# Version strings starting with HTTPS_SCHEME are fetched over git, so they get
# GIT_SCHEME_PREFIX prepended to become valid opam git urls.
HTTPS_SCHEME = "https://"
GIT_SCHEME_PREFIX = "git+"

REF_SEPARATOR = "#"
LOCK_SEPARATOR = "="
COMMENT_MARKER = "#"

DEFAULT_LOCKFILE = "-"


class EXIT_CODE(enum.IntEnum):
    SUCCESS = 0
    FAILURE = 1
    INVALID_ARGUMENTS = 2
    PROCESS_FAILED = 3
    PARSE_ERROR = 4
    INTERRUPTED = 130


class LOCK_MODES(enum.Enum):
    lock = "lock"
    install = "install"
    verify = "verify"


@dataclass(frozen=True)
class TraceOptions:
    """Read-only knobs passed to the pipeline driver and the resolver."""
    verbose: bool = False
    debug: bool = False
    opam_bin: str = OPAM_BIN

    @classmethod
    def from_args(cls, args) -> "TraceOptions":
        return cls(
            verbose=bool(getattr(args, "verbose", False)),
            debug=bool(getattr(args, "debug", False)),
            opam_bin=getattr(args, "opam_bin", None) or OPAM_BIN,
        )

    @property
    def tracing(self) -> bool:
        return self.verbose or self.debug

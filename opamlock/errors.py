"""
Custom exceptions for opamlock.

Every failure the tool can hit while resolving or replaying a lock is one of
the exceptions below. Each carries the offending input verbatim (the listing
line, the lock-file line, the `opam show` output or the failed command) so
the operator can tell which query or which line went wrong.

All exceptions follow a consistent pattern of providing both machine-readable
error codes and human-readable messages with suggestions.
"""

from dataclasses import dataclass, field
from typing import Optional, Sequence, Union
from enum import Enum

# Conventional shell status for "command not found"
COMMAND_NOT_FOUND = 127


class ErrorCode(Enum):
    """Machine-readable error codes for opamlock errors."""
    # Parse errors (1xx)
    INVALID_PACKAGE = "E101"
    INVALID_LOCK_LINE = "E102"
    INVALID_GIT_HASH = "E103"

    # External process errors (2xx)
    PROCESS_FAILED = "E201"
    PROCESS_NOT_FOUND = "E202"

    # Configuration errors (3xx)
    CONFIG_FILE_NOT_FOUND = "E301"
    CONFIG_PARSE_ERROR = "E302"
    CONFIG_INVALID_VALUE = "E303"

    # Internal errors (9xx)
    INTERNAL_ERROR = "E901"


@dataclass
class LockError:
    """
    Structured error information for opamlock.

    Attributes:
        code: Machine-readable error code.
        message: User-facing error message.
        details: Technical details for debugging.
        suggestion: How to fix the issue.
        context: Additional context information.
    """
    code: ErrorCode
    message: str
    details: str = ""
    suggestion: str = ""
    context: dict = field(default_factory=dict)

    def __str__(self) -> str:
        lines = [f"[{self.code.value}] {self.message}"]
        if self.details:
            lines.append(f"  Details: {self.details}")
        if self.suggestion:
            lines.append(f"  Suggestion: {self.suggestion}")
        return "\n".join(lines)


class OpamLockException(Exception):
    """
    Base exception class for opamlock.

    All custom exceptions inherit from this class and provide
    structured error information.
    """

    def __init__(self, message: str, code: ErrorCode = ErrorCode.INTERNAL_ERROR,
                 details: str = "", suggestion: str = "", **context):
        self.error = LockError(
            code=code,
            message=message,
            details=details,
            suggestion=suggestion,
            context=context
        )
        super().__init__(str(self.error))

    @property
    def code(self) -> ErrorCode:
        return self.error.code

    @property
    def suggestion(self) -> str:
        return self.error.suggestion


class InvalidPackage(OpamLockException):
    """
    Raised when a line of `opam list` or `opam pin` output cannot be parsed.

    The listing grammar needs at least a name and a version token.
    """

    def __init__(self, line: str, suggestion: str = None):
        self.line = line
        super().__init__(
            message=f"Invalid package line: {line!r}",
            code=ErrorCode.INVALID_PACKAGE,
            details=f"Line: {line}",
            suggestion=suggestion or "Check the output of the opam command with --debug",
            line=line,
        )


class InvalidLockLine(OpamLockException):
    """Raised when a lock-file line is not of the form `name = version`."""

    def __init__(self, line: str, suggestion: str = None):
        self.line = line
        super().__init__(
            message=f"Invalid lock line: {line!r}",
            code=ErrorCode.INVALID_LOCK_LINE,
            details=f"Line: {line}",
            suggestion=suggestion or "Each lock line must look like 'name = version'",
            line=line,
        )


class InvalidGitHash(OpamLockException):
    """Raised when `opam show -f pinned` does not print a single `git (<hash>)` line."""

    def __init__(self, output: str):
        self.output = output
        super().__init__(
            message="Could not read the pinned git commit",
            code=ErrorCode.INVALID_GIT_HASH,
            details=f"Output: {output!r}",
            suggestion="Make sure the package is pinned to a git repository (opam pin list)",
            output=output,
        )


class ProcessFailure(OpamLockException):
    """
    Raised when an external command exits with a non-zero status.

    Examples:
        - opam is not installed (exit status 127)
        - the requested package is unknown to opam
        - a git pin cannot be fetched
    """

    def __init__(self, command: Union[str, Sequence[str]], exit_status: int,
                 stderr: str = None, suggestion: str = None):
        if not isinstance(command, str):
            command = " ".join(command)
        self.command = command
        self.exit_status = exit_status
        self.stderr = stderr

        details_parts = [f"Command: {command}", f"Exit status: {exit_status}"]
        if stderr:
            # Truncate long error output
            stderr_display = stderr[:500] + "..." if len(stderr) > 500 else stderr
            details_parts.append(f"Error output: {stderr_display}")

        super().__init__(
            message=f"Command failed with exit status {exit_status}: {command}",
            code=ErrorCode.PROCESS_NOT_FOUND if exit_status == COMMAND_NOT_FOUND else ErrorCode.PROCESS_FAILED,
            details="; ".join(details_parts),
            suggestion=suggestion or self._default_suggestion(exit_status),
            command=command,
            exit_status=exit_status,
            stderr=stderr,
        )

    @staticmethod
    def _default_suggestion(exit_status: int) -> str:
        if exit_status == COMMAND_NOT_FOUND:
            return "Command not found - check that opam is installed and in PATH (or use --opam-bin)"
        return "Re-run with --debug to see the full command output"


class ConfigurationError(OpamLockException):
    """
    Raised when the YAML config file or a CLI value is unusable.
    """

    def __init__(self, message: str, parameter: str = None,
                 path: Optional[str] = None, suggestion: str = None,
                 code: ErrorCode = ErrorCode.CONFIG_INVALID_VALUE):
        details_parts = []
        if parameter:
            details_parts.append(f"Parameter: {parameter}")
        if path:
            details_parts.append(f"Path: {path}")

        super().__init__(
            message=message,
            code=code,
            details="; ".join(details_parts) if details_parts else "",
            suggestion=suggestion or self._default_suggestion(code),
            parameter=parameter,
            path=path,
        )

    @staticmethod
    def _default_suggestion(code: ErrorCode) -> str:
        suggestions = {
            ErrorCode.CONFIG_FILE_NOT_FOUND: "Verify the config file path exists",
            ErrorCode.CONFIG_PARSE_ERROR: "Check config file syntax (YAML format)",
            ErrorCode.CONFIG_INVALID_VALUE: "Check the parameter value and correct it",
        }
        return suggestions.get(code, "Check the configuration and try again")

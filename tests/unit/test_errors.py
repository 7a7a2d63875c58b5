"""
Tests for custom exceptions in opamlock.errors.

Tests cover:
- Error codes and structured messages
- The offending input carried by each parse error
- ProcessFailure command and exit status
- ConfigurationError default suggestions
"""

import pytest

from opamlock.errors import (
    ConfigurationError,
    ErrorCode,
    InvalidGitHash,
    InvalidLockLine,
    InvalidPackage,
    LockError,
    OpamLockException,
    ProcessFailure,
)


class TestLockError:
    """Tests for LockError formatting."""

    def test_message_only(self):
        assert str(LockError(ErrorCode.INTERNAL_ERROR, "boom")) == "[E901] boom"

    def test_with_details_and_suggestion(self):
        error = LockError(ErrorCode.INVALID_LOCK_LINE, "bad", details="d", suggestion="s")
        assert str(error) == "[E102] bad\n  Details: d\n  Suggestion: s"


class TestParseErrors:
    """Tests for InvalidPackage, InvalidLockLine and InvalidGitHash."""

    def test_invalid_package(self):
        e = InvalidPackage("lonely")
        assert e.line == "lonely"
        assert e.code == ErrorCode.INVALID_PACKAGE
        assert "'lonely'" in str(e)
        assert isinstance(e, OpamLockException)

    def test_invalid_package_custom_suggestion(self):
        assert InvalidPackage("x", suggestion="try again").suggestion == "try again"

    def test_invalid_lock_line(self):
        e = InvalidLockLine("foo 1.0")
        assert e.line == "foo 1.0"
        assert e.code == ErrorCode.INVALID_LOCK_LINE

    def test_invalid_lock_line_custom_suggestion(self):
        e = InvalidLockLine("foo = 2.0", suggestion="foo is locked more than once")
        assert e.suggestion == "foo is locked more than once"

    def test_invalid_git_hash(self):
        e = InvalidGitHash("rsync (x)")
        assert e.output == "rsync (x)"
        assert e.code == ErrorCode.INVALID_GIT_HASH
        assert e.error.context["output"] == "rsync (x)"


class TestProcessFailure:
    """Tests for ProcessFailure."""

    def test_command_from_list(self):
        e = ProcessFailure(["opam", "pin"], 1)
        assert e.command == "opam pin"
        assert e.exit_status == 1
        assert "Command failed with exit status 1: opam pin" in str(e)

    def test_stderr_in_details(self):
        e = ProcessFailure("opam pin", 2, stderr="oops")
        assert "Error output: oops" in e.error.details

    def test_long_stderr_truncated(self):
        e = ProcessFailure("opam pin", 2, stderr="x" * 1000)
        assert e.stderr == "x" * 1000
        assert len(e.error.details) < 600

    def test_command_not_found_suggestion(self):
        assert "not found" in ProcessFailure("opam pin", 127).suggestion

    def test_command_not_found_code(self):
        assert ProcessFailure("opam pin", 127).code == ErrorCode.PROCESS_NOT_FOUND
        assert ProcessFailure("opam pin", 1).code == ErrorCode.PROCESS_FAILED

    def test_generic_suggestion(self):
        assert "--debug" in ProcessFailure("opam pin", 1).suggestion

    def test_catchable_as_base(self):
        with pytest.raises(OpamLockException):
            raise ProcessFailure("opam pin", 1)


class TestConfigurationError:
    """Tests for ConfigurationError."""

    def test_default_code(self):
        assert ConfigurationError("bad value").code == ErrorCode.CONFIG_INVALID_VALUE

    def test_details(self):
        e = ConfigurationError("bad", parameter="opam_bin", path="/x.yaml")
        assert e.error.details == "Parameter: opam_bin; Path: /x.yaml"

    @pytest.mark.parametrize("code,fragment", [
        (ErrorCode.CONFIG_FILE_NOT_FOUND, "path exists"),
        (ErrorCode.CONFIG_PARSE_ERROR, "YAML"),
    ])
    def test_default_suggestions(self, code, fragment):
        assert fragment in ConfigurationError("bad", code=code).suggestion

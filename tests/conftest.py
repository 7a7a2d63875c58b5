"""
Shared pytest fixtures for opamlock tests.

These fixtures provide mock loggers, executors and sample lock states that
can be used across all test modules without requiring opam to be installed.
"""

from argparse import Namespace
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from opamlock.lockfile.models import Fixed, GitRef, LockState, Package
from tests.fixtures import (
    MockCommandExecutor,
    MockLogger,
    SAMPLE_LOCK_TEXT,
    create_sample_cli_args,
    create_sample_responses,
)


# =============================================================================
# Logger Fixtures
# =============================================================================

@pytest.fixture
def mock_logger():
    """
    Create a mock logger that records all log calls.

    Usage:
        def test_something(mock_logger):
            some_function(logger=mock_logger)
            mock_logger.verbose.assert_called_with("expected message")
    """
    logger = MagicMock()
    for level in ['debug', 'info', 'warning', 'error', 'critical',
                  'status', 'verbose', 'verboser', 'ridiculous', 'result']:
        setattr(logger, level, MagicMock())
    return logger


@pytest.fixture
def capturing_logger():
    """A MockLogger whose messages can be inspected per level."""
    return MockLogger()


# =============================================================================
# Executor Fixtures
# =============================================================================

@pytest.fixture
def sample_executor():
    """Executor answering a full resolution of the libA/libB example switch."""
    return MockCommandExecutor(create_sample_responses())


@pytest.fixture
def failing_executor():
    """Executor on which every command exits with status 1."""
    return MockCommandExecutor(default_response=('', 'opam: error\n', 1))


# =============================================================================
# Lock State Fixtures
# =============================================================================

@pytest.fixture
def sample_lock_state() -> LockState:
    """The lock resolved from the libA/libB example switch."""
    return LockState(
        pins=[Package("libB", GitRef("git+https://h/r#dev"))],
        installs=[Package("libA", Fixed("1.0"))],
    )


@pytest.fixture
def sample_lockfile(tmp_path) -> Path:
    """A lock file on disk with the libA/libB example lock."""
    path = tmp_path / "opam.lock"
    path.write_text(SAMPLE_LOCK_TEXT)
    return path


# =============================================================================
# Args Fixtures (Namespace objects for CLI simulation)
# =============================================================================

@pytest.fixture
def base_args() -> Namespace:
    """Args shared by all opam-lock commands."""
    return create_sample_cli_args()


@pytest.fixture
def install_args(base_args, sample_lockfile) -> Namespace:
    base_args.program = 'install'
    base_args.lockfile = str(sample_lockfile)
    return base_args


# =============================================================================
# Environment Variable Fixtures
# =============================================================================

@pytest.fixture
def clean_env(monkeypatch):
    """
    Remove opamlock-related environment variables.

    Ensures tests don't pick up settings from the developer's shell.
    """
    for var in ['OPAMLOCK_DEBUG', 'OPAMLOCK_OPAM_BIN']:
        monkeypatch.delenv(var, raising=False)
    return monkeypatch

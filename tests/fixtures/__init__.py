"""
Test fixtures package for opamlock tests.

This package provides reusable mock classes and sample opam output
for testing resolution, installation and validation.
"""

from tests.fixtures.mock_logger import MockLogger
from tests.fixtures.mock_executor import MockCommandExecutor
from tests.fixtures.sample_data import (
    SAMPLE_OPAM_LIST,
    SAMPLE_OPAM_LIST_SIMPLE,
    SAMPLE_OPAM_PIN,
    SAMPLE_OPAM_PIN_SIMPLE,
    SAMPLE_PINNED_PREFIX,
    SAMPLE_PINNED_OTHER,
    SAMPLE_LOCK_TEXT,
    SAMPLE_LOCK_WITH_COMMENTS,
    create_sample_responses,
    create_sample_cli_args,
)

__all__ = [
    # Mock classes
    'MockLogger',
    'MockCommandExecutor',
    # Sample data
    'SAMPLE_OPAM_LIST',
    'SAMPLE_OPAM_LIST_SIMPLE',
    'SAMPLE_OPAM_PIN',
    'SAMPLE_OPAM_PIN_SIMPLE',
    'SAMPLE_PINNED_PREFIX',
    'SAMPLE_PINNED_OTHER',
    'SAMPLE_LOCK_TEXT',
    'SAMPLE_LOCK_WITH_COMMENTS',
    'create_sample_responses',
    'create_sample_cli_args',
]

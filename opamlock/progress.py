"""Progress indication using the Rich library.

Interactive terminals get a spinner showing the opam command currently
running. Non-interactive runs (CI, pipes) log a status line instead.
Everything is drawn on stderr so the lock written to stdout stays clean.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Callable, Iterator, Optional

from rich.console import Console
from rich.markup import escape
from rich.progress import (
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)

if TYPE_CHECKING:
    from logging import Logger

SetDescriptionFunc = Callable[[str], None]


def _console() -> Console:
    return Console(stderr=True)


def is_interactive_terminal() -> bool:
    """Detect if stderr is an interactive terminal."""
    return _console().is_terminal


@contextmanager
def progress_context(
    description: str,
    logger: Optional["Logger"] = None,
    transient: bool = True,
) -> Iterator[SetDescriptionFunc]:
    """Context manager showing an indeterminate spinner while work runs.

    Args:
        description: Initial description text.
        logger: Logger for the non-interactive status message. If None in
            non-interactive mode, no output is produced.
        transient: If True, the spinner is cleared when done (default True).

    Yields:
        set_description(desc): Updates the description text.

    Example:
        >>> with progress_context("Resolving lock") as set_desc:
        ...     run(pipeline, executor, on_command=set_desc)
    """
    if not is_interactive_terminal():
        if logger is not None:
            logger.status(f"{description}...")

        def noop_set_description(desc: str) -> None:
            pass

        yield noop_set_description
        return

    columns = [
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
    ]
    progress = Progress(*columns, console=_console(), transient=transient)

    try:
        progress.start()
        task_id = progress.add_task(description, total=None)

        def set_description_func(desc: str) -> None:
            progress.update(task_id, description=escape(f"{description}: {desc}"))

        yield set_description_func
    finally:
        progress.stop()


__all__ = [
    "is_interactive_terminal",
    "progress_context",
]

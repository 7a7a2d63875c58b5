"""
Deferred, composable descriptions of external command invocations.

A pipeline is plain data: either ``Done(value)`` when the result is already
known, or ``Pending(args, continuation)`` when ``args`` still has to be run and
``continuation`` turns the captured stdout lines into the next pipeline.
Building a pipeline never starts a process; only :func:`run` does, one
command at a time.

Example:
    >>> listing = map_result(len, command(["opam", "list", "--installed"]))
    >>> run(listing, executor)   # runs opam once, returns the line count
"""

from __future__ import annotations

import logging
import signal
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple, Union

from opamlock.config import TraceOptions
from opamlock.errors import ProcessFailure
from opamlock.lock_logging import OpamLockLogger
from opamlock.utils import format_command

Lines = List[str]


@dataclass(frozen=True)
class Done:
    """A pipeline whose value is known; running it touches no process."""
    value: Any


@dataclass(frozen=True)
class Pending:
    """A command still to run and what to do with its stdout lines."""
    args: Tuple[str, ...]
    continuation: Callable[[Lines], "Pipeline"]


Pipeline = Union[Done, Pending]

_fallback_logger = OpamLockLogger(__name__)


def pure(value: Any) -> Pipeline:
    return Done(value)


def command(args: Sequence[str]) -> Pipeline:
    """Run ``args`` and resolve to its stdout as a list of lines."""
    return Pending(tuple(args), pure)


def bind(pipeline: Pipeline, f: Callable[[Any], Pipeline]) -> Pipeline:
    """Chain ``f`` after ``pipeline``; ``f`` picks the next commands from the value."""
    if isinstance(pipeline, Done):
        return f(pipeline.value)
    continuation = pipeline.continuation
    return Pending(pipeline.args, lambda lines: bind(continuation(lines), f))


def map_result(f: Callable[[Any], Any], pipeline: Pipeline) -> Pipeline:
    return bind(pipeline, lambda value: pure(f(value)))


def sequence(pipelines: Iterable[Pipeline]) -> Pipeline:
    """Run every pipeline to completion, in order, collecting the values in a list."""
    return _collect(list(pipelines), 0, [])


def _collect(pipelines: List[Pipeline], index: int, results: list) -> Pipeline:
    # Each step binds onto the next pipeline only once the previous one is done,
    # so continuations never nest deeper than a single pipeline's own chain.
    if index == len(pipelines):
        return pure(results)
    return bind(pipelines[index],
                lambda value: _collect(pipelines, index + 1, results + [value]))


def sequence_unit(pipelines: Iterable[Pipeline]) -> Pipeline:
    """Like :func:`sequence` for side-effect-only chains; resolves to None."""
    return map_result(lambda _: None, sequence(pipelines))


def run(pipeline: Pipeline, executor, options: Optional[TraceOptions] = None,
        logger: Optional[logging.Logger] = None,
        on_command: Optional[Callable[[str], None]] = None) -> Any:
    """
    Drive ``pipeline`` to completion and return its value.

    Commands run strictly one after the other; each one's full stdout is
    captured before its continuation is called.

    Args:
        pipeline: The pipeline to execute.
        executor: Object with ``execute(args) -> (stdout, stderr, exit_status)``,
            normally a :class:`opamlock.utils.CommandExecutor`.
        options: Tracing flags. ``verbose`` echoes each command line and its
            captured stdout, ``debug`` also echoes stderr. Neither changes the
            result.
        logger: Where tracing goes. Defaults to the executor's logger.
        on_command: Called with each command line just before it runs
            (progress display).

    Raises:
        ProcessFailure: As soon as a command exits non-zero. Nothing after it
            runs and no partial value is returned.
    """
    options = options or TraceOptions()
    logger = logger or getattr(executor, "logger", None) or _fallback_logger

    while isinstance(pipeline, Pending):
        cmd_line = format_command(pipeline.args)
        if options.tracing:
            logger.verbose(f"+ {cmd_line}")
        if on_command is not None:
            on_command(cmd_line)

        stdout, stderr, exit_status = executor.execute(
            list(pipeline.args),
            watch_signals={signal.SIGINT, signal.SIGTERM},
        )
        lines = stdout.splitlines()

        if options.tracing:
            for line in lines:
                logger.verbose(f"  {line}")
        if options.debug and stderr:
            logger.debug(f"  (stderr) {stderr.rstrip()}")

        if exit_status != 0:
            raise ProcessFailure(cmd_line, exit_status, stderr=stderr)

        pipeline = pipeline.continuation(lines)

    return pipeline.value


def describe(pipeline: Pipeline) -> List[Tuple[str, ...]]:
    """
    List the commands a pipeline would run, without running any of them.

    Every continuation is fed an empty output, so the listing is only exact
    for pipelines that do not branch on output (such as the installer).
    """
    commands = []
    while isinstance(pipeline, Pending):
        commands.append(pipeline.args)
        pipeline = pipeline.continuation([])
    return commands

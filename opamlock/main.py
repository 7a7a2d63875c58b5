#!/usr/bin/env python3
"""
opam-lock - Main Entry Point

Resolves, replays and verifies opam locks, with error handling that turns
every failure into a diagnostic message and a non-zero exit code.
"""

import signal
import sys
import traceback

from opamlock.cli_parser import parse_arguments
from opamlock.config import EXIT_CODE, OPAMLOCK_DEBUG, TraceOptions
from opamlock.errors import (
    OpamLockException,
    ConfigurationError,
    InvalidGitHash,
    InvalidLockLine,
    InvalidPackage,
    ProcessFailure,
)
from opamlock.lock_logging import setup_logging, apply_logging_options
from opamlock.lockfile import (
    LockRequest,
    format_validation_report,
    install,
    read_lockfile,
    state,
    verify,
    write_lockfile,
)
from opamlock.pipeline import describe, run
from opamlock.progress import progress_context
from opamlock.utils import CommandExecutor, format_command

logger = setup_logging("opamlock")


def signal_handler(sig, frame):
    """Handle SIGINT (Ctrl+C) and SIGTERM."""
    signal_name = signal.Signals(sig).name
    logger.warning(f"Received signal {signal_name} ({sig})")
    logger.info("Exiting due to signal")
    sys.exit(EXIT_CODE.INTERRUPTED)


def _request(args) -> LockRequest:
    if getattr(args, "package", None):
        return LockRequest.dependencies_of(args.package)
    return LockRequest.everything()


def _run(pipeline, description, options, executor):
    with progress_context(description, logger=logger) as set_description:
        return run(pipeline, executor, options, logger=logger, on_command=set_description)


def handle_lock_command(args, executor=None) -> int:
    """Resolve the switch and write the lock.

    The lock is only written once resolution fully succeeded.
    """
    options = TraceOptions.from_args(args)
    executor = executor or CommandExecutor(logger, debug=options.debug)
    request = _request(args)

    pipeline = state(request, options, logger=logger)
    lock_state = _run(pipeline, f"Resolving {request}", options, executor)

    write_lockfile(lock_state, args.output)
    logger.status(
        f"Locked {len(lock_state.packages)} packages "
        f"({len(lock_state.pins)} git pins, {len(lock_state.installs)} fixed versions)"
    )
    return EXIT_CODE.SUCCESS


def handle_install_command(args, executor=None) -> int:
    """Replay a lock, or print the commands that would replay it with --what-if."""
    options = TraceOptions.from_args(args)
    try:
        lock_state = read_lockfile(args.lockfile)
    except FileNotFoundError:
        logger.error(f"Lockfile not found: {args.lockfile}")
        logger.info("Generate a lockfile with: opam-lock lock -o <file>")
        return EXIT_CODE.FAILURE

    pipeline = install(lock_state, options)

    if args.what_if:
        for cmd in describe(pipeline):
            print(format_command(cmd))
        return EXIT_CODE.SUCCESS

    executor = executor or CommandExecutor(logger, debug=options.debug)
    _run(pipeline, f"Installing {len(lock_state.packages)} packages", options, executor)
    logger.status(f"Installed {len(lock_state.packages)} packages from lock")
    return EXIT_CODE.SUCCESS


def handle_verify_command(args, executor=None) -> int:
    """Compare the switch against a lock and print a report."""
    options = TraceOptions.from_args(args)
    try:
        locked = read_lockfile(args.lockfile)
    except FileNotFoundError:
        logger.error(f"Lockfile not found: {args.lockfile}")
        logger.info("Generate a lockfile with: opam-lock lock -o <file>")
        return EXIT_CODE.FAILURE

    executor = executor or CommandExecutor(logger, debug=options.debug)
    request = _request(args)
    pipeline = verify(locked, request, options, strict=args.strict, logger=logger)
    result = _run(pipeline, f"Verifying {request}", options, executor)

    report = format_validation_report(result, args.lockfile)
    if result.valid:
        logger.status(report)
        return EXIT_CODE.SUCCESS
    logger.error(report)
    return EXIT_CODE.FAILURE


COMMAND_HANDLERS = {
    "lock": handle_lock_command,
    "install": handle_install_command,
    "verify": handle_verify_command,
}


def _main_impl(argv=None, executor=None):
    """
    Main implementation with error handling.

    This is the actual implementation of main(), separated out
    so that main() can wrap it with exception handling.
    """
    signal.signal(signal.SIGTERM, signal_handler)

    args = parse_arguments(argv)
    apply_logging_options(logger, args)

    handler = COMMAND_HANDLERS[args.program]
    return handler(args, executor=executor)


def _report(e: OpamLockException):
    # str(e) already carries the details and suggestion lines
    logger.error(str(e))


def main(argv=None, executor=None):
    """
    Main entry point with comprehensive error handling.

    This function wraps _main_impl() to catch and handle all
    exceptions with user-friendly error messages.
    """
    try:
        return _main_impl(argv, executor)

    except ProcessFailure as e:
        _report(e)
        return EXIT_CODE.PROCESS_FAILED

    except (InvalidPackage, InvalidLockLine, InvalidGitHash) as e:
        _report(e)
        return EXIT_CODE.PARSE_ERROR

    except ConfigurationError as e:
        _report(e)
        return EXIT_CODE.INVALID_ARGUMENTS

    except OpamLockException as e:
        # Catch-all for any other custom exceptions
        _report(e)
        return EXIT_CODE.FAILURE

    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return EXIT_CODE.INTERRUPTED

    except SystemExit:
        # Re-raise SystemExit to allow clean exits
        raise

    except Exception as e:
        # Unexpected exceptions - show full traceback in debug mode
        logger.error(f"Unexpected error: {str(e)}")
        if OPAMLOCK_DEBUG or "--debug" in (argv if argv is not None else sys.argv):
            logger.debug("Stack trace:")
            traceback.print_exc()
        else:
            logger.info("Run with --debug for full stack trace")
        return EXIT_CODE.FAILURE


def entry_point():
    sys.exit(main())


if __name__ == "__main__":
    entry_point()

"""
Process execution for opamlock.

Classes:
    CommandExecutor: Run an external command synchronously, capturing stdout,
        stderr and the exit status, with optional signal handling.

Functions:
    format_command: Render an argument list as a copy-pasteable shell line.
"""

import io
import logging
import select
import shlex
import signal
import subprocess
import threading
from typing import List, Optional, Sequence, Set, Tuple, Union

from opamlock.errors import COMMAND_NOT_FOUND


def format_command(args: Sequence[str]) -> str:
    """Quote an argument list so it can be pasted into a shell.

    Example:
        >>> format_command(["opam", "show", "-f", "pinned", "my lib"])
        "opam show -f pinned 'my lib'"
    """
    return " ".join(shlex.quote(arg) for arg in args)


class CommandExecutor:
    """
    Execute a command in a subprocess and wait for it to finish.

    Stdout and stderr are drained as the process runs so a chatty command can
    never dead-lock on a full pipe. The call blocks until both streams reach
    EOF and the exit status is known; there is no timeout.
    """

    def __init__(self, logger: logging.Logger, debug: bool = False):
        self.logger = logger
        self.debug = debug
        self.process = None
        self.terminated_by_signal = False
        self.signal_received = None
        self._original_handlers = {}
        self._stop_event = threading.Event()

    def execute(self,
                command: Union[str, List[str]],
                watch_signals: Optional[Set[int]] = None) -> Tuple[str, str, int]:
        """
        Execute a command and return its stdout, stderr, and return code.

        Args:
            command: The command to execute (string or list of strings)
            watch_signals: Signals that terminate the child when received.
                Ignored off the main thread, where Python cannot install
                signal handlers.

        Returns:
            Tuple of (stdout_content, stderr_content, return_code). A missing
            executable is reported as return code 127 rather than raised.
        """
        if isinstance(command, str):
            cmd_args = shlex.split(command)
        else:
            cmd_args = list(command)

        self.logger.ridiculous(f"Executing command: {cmd_args}")

        if watch_signals and threading.current_thread() is threading.main_thread():
            self._setup_signal_handlers(watch_signals)

        self._stop_event.clear()
        self.terminated_by_signal = False
        self.signal_received = None

        stdout_buffer = io.StringIO()
        stderr_buffer = io.StringIO()

        try:
            try:
                self.process = subprocess.Popen(
                    cmd_args,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.PIPE,
                    text=True,
                    bufsize=1  # Line buffered
                )
            except FileNotFoundError as e:
                self.process = None
                return "", str(e), COMMAND_NOT_FOUND

            buffers = {
                self.process.stdout.fileno(): stdout_buffer,
                self.process.stderr.fileno(): stderr_buffer,
            }

            while self.process.poll() is None and not self._stop_event.is_set():
                readable, _, _ = select.select(
                    [self.process.stdout, self.process.stderr],
                    [],
                    [],
                    0.1
                )
                for stream in readable:
                    line = stream.readline()
                    if not line:  # EOF
                        continue
                    buffers[stream.fileno()].write(line)

            # Whatever is still buffered after the process exited
            stdout_buffer.write(self.process.stdout.read())
            stderr_buffer.write(self.process.stderr.read())

            return_code = self.process.wait()

            if self.terminated_by_signal:
                self.logger.debug(f"Process terminated by signal: {self.signal_received}")

            return stdout_buffer.getvalue(), stderr_buffer.getvalue(), return_code

        finally:
            if self.process and self.process.poll() is None:
                self.process.terminate()
                try:
                    self.process.wait(timeout=5)
                except subprocess.TimeoutExpired:
                    self.process.kill()

            self._restore_signal_handlers()

    def _setup_signal_handlers(self, signals: Set[int]):
        self._original_handlers = {}

        def signal_handler(sig, frame):
            self.logger.debug(f"Received signal: {sig}")
            self.terminated_by_signal = True
            self.signal_received = sig
            self._stop_event.set()

            if self.process and self.process.poll() is None:
                self.process.terminate()

            for handler in self._original_handlers.values():
                if callable(handler):
                    handler(sig, frame)

        for sig in signals:
            self._original_handlers[sig] = signal.getsignal(sig)
            signal.signal(sig, signal_handler)

    def _restore_signal_handlers(self):
        for sig, handler in self._original_handlers.items():
            signal.signal(sig, handler)
        self._original_handlers = {}

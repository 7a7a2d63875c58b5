"""
Reading and writing lock files.

Format: one ``name = version`` per line. A ``#`` at the start of a line or
after whitespace starts a comment; a ``#`` glued to a url
(``git+https://host/repo#main``) belongs to the version. Blank lines are
ignored.
"""

import re
import sys
from pathlib import Path
from typing import Iterable, List, TextIO, Union

from opamlock.config import COMMENT_MARKER
from opamlock.errors import InvalidLockLine
from opamlock.lockfile.models import LockState, Package

_COMMENT_RE = re.compile(r"(^|\s)" + re.escape(COMMENT_MARKER) + r".*$")


def strip_comment(line: str) -> str:
    """Drop a trailing comment and surrounding whitespace from a lock-file line."""
    return _COMMENT_RE.sub("", line).strip()


def parse_lock_lines(lines: Iterable[str]) -> List[Package]:
    """Parse lock-file lines into packages, in file order.

    Raises:
        InvalidLockLine: On the first line that is not ``name = version``, or
            that names a package already locked above it.
    """
    packages = []
    seen = set()
    for line in lines:
        content = strip_comment(line)
        if not content:
            continue
        package = Package.from_lock_line(content)
        if package.name in seen:
            raise InvalidLockLine(line, suggestion=f"{package.name} is locked more than once")
        seen.add(package.name)
        packages.append(package)
    return packages


def parse_lock_text(text: str) -> LockState:
    return LockState.from_packages(parse_lock_lines(text.splitlines()))


def read_lockfile(path: Union[str, Path] = "-", stdin: TextIO = None) -> LockState:
    """Read a lock file; ``-`` reads from standard input.

    Raises:
        FileNotFoundError: If the lock file doesn't exist.
        InvalidLockLine: If a line is malformed.
    """
    if str(path) == "-":
        return parse_lock_text((stdin or sys.stdin).read())
    with open(path, "r") as f:
        return parse_lock_text(f.read())


def format_lock_text(state: LockState) -> str:
    """Render a lock state, pins first, one package per line."""
    return "".join(f"{package.to_lock_line()}\n" for package in state.packages)


def write_lockfile(state: LockState, path: Union[str, Path] = "-", stdout: TextIO = None) -> None:
    """Write a lock state to ``path``; ``-`` writes to standard output."""
    text = format_lock_text(state)
    if str(path) == "-":
        out = stdout or sys.stdout
        out.write(text)
        out.flush()
        return
    with open(path, "w") as f:
        f.write(text)

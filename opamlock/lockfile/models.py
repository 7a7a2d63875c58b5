"""
Data model for opam lock states.

A lock is a set of packages, each either installed at a fixed published
version or pinned to a git url and ref. Two line grammars feed this model:

- the listing grammar of ``opam list`` output (``name version ...``)
- the lock-file grammar (``name = version``)

and two printers render it back: lock-file lines and ``opam install``
arguments.
"""

from dataclasses import dataclass, field
from typing import Iterable, Tuple, Union

from opamlock.config import (
    GIT_SCHEME_PREFIX,
    HTTPS_SCHEME,
    LOCK_SEPARATOR,
    REF_SEPARATOR,
)
from opamlock.errors import InvalidLockLine, InvalidPackage


@dataclass(frozen=True)
class Fixed:
    """A published version, compared by string equality."""
    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class GitRef:
    """A git source: a bare url, or ``url#ref`` once resolved to a branch or commit."""
    value: str

    def __str__(self) -> str:
        return self.value

    def split(self) -> Tuple[str, str]:
        """Split into ``(url, ref)`` on the last ``#``; ref is empty when absent."""
        url, sep, ref = self.value.rpartition(REF_SEPARATOR)
        if not sep:
            return self.value, ""
        return url, ref


Version = Union[Fixed, GitRef]


def version_of_string(raw: str) -> Version:
    """Classify a raw version string.

    Example:
        >>> version_of_string("https://example.com/x.git")
        GitRef(value='git+https://example.com/x.git')
        >>> version_of_string("1.2.3")
        Fixed(value='1.2.3')
    """
    if raw.startswith(HTTPS_SCHEME):
        return GitRef(GIT_SCHEME_PREFIX + raw)
    if raw.startswith(GIT_SCHEME_PREFIX):
        return GitRef(raw)
    return Fixed(raw)


@dataclass(frozen=True)
class Package:
    """A single locked package; ``name`` is unique within any collection."""
    name: str
    version: Version

    @property
    def is_pinned(self) -> bool:
        return isinstance(self.version, GitRef)

    @classmethod
    def from_listing_line(cls, line: str) -> "Package":
        """Parse a line of ``opam list`` output.

        Installed versions are always concrete, so the version is stored as
        Fixed without classification. Tokens after the version are ignored.

        Raises:
            InvalidPackage: If the line has fewer than two tokens.
        """
        tokens = line.split()
        if len(tokens) < 2:
            raise InvalidPackage(line)
        return cls(name=tokens[0], version=Fixed(tokens[1]))

    @classmethod
    def from_lock_line(cls, line: str) -> "Package":
        """Parse a ``name = version`` lock-file line.

        Raises:
            InvalidLockLine: If the line is not exactly two non-empty parts around a single '='.
        """
        parts = [part.strip() for part in line.split(LOCK_SEPARATOR)]
        if len(parts) != 2 or not all(parts):
            raise InvalidLockLine(line)
        name, raw_version = parts
        return cls(name=name, version=version_of_string(raw_version))

    def to_lock_line(self) -> str:
        return f"{self.name} {LOCK_SEPARATOR} {self.version}"

    def to_install_arg(self) -> str:
        # Pinned packages get their source from `opam pin add`, so only the name is installed
        if self.is_pinned:
            return self.name
        return f"{self.name}.{self.version}"


@dataclass(frozen=True)
class PinRecord:
    """A git pin as reported by ``opam pin``; ``url`` still ends in ``#branch``."""
    name: str
    url: str


@dataclass(frozen=True)
class LockState:
    """A resolved lock: git pins plus fixed-version installs, disjoint by name."""
    pins: Tuple[Package, ...] = field(default_factory=tuple)
    installs: Tuple[Package, ...] = field(default_factory=tuple)

    def __post_init__(self):
        # Accept any iterable but always store tuples so the state stays immutable
        object.__setattr__(self, "pins", tuple(self.pins))
        object.__setattr__(self, "installs", tuple(self.installs))

    @classmethod
    def from_packages(cls, packages: Iterable[Package]) -> "LockState":
        """Partition packages by version kind: GitRef ones are pins, the rest installs."""
        packages = list(packages)
        return cls(
            pins=tuple(p for p in packages if p.is_pinned),
            installs=tuple(p for p in packages if not p.is_pinned),
        )

    @property
    def packages(self) -> Tuple[Package, ...]:
        return self.pins + self.installs

    def by_name(self) -> dict:
        return {package.name: package for package in self.packages}

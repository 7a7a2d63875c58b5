"""
Lock resolution against the current opam switch.

Builds a pipeline that asks opam three things, strictly in this order:

1. which packages are installed (``opam list --installed``), optionally only
   the ones a given package transitively requires;
2. which packages are pinned to git (``opam pin``);
3. for every installed pinned package, which commit is checked out
   (``opam show -f pinned <name>``).

Installed and pinned packages are matched by name. Pinned ones get a
``GitRef`` pointing at their url plus either the pinned branch (when it
already names the checked-out commit) or the commit hash itself.
"""

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from opamlock.config import BASE_VERSION, GIT_PIN_KIND, REF_SEPARATOR, TraceOptions
from opamlock.errors import InvalidGitHash, InvalidPackage
from opamlock.lockfile.models import GitRef, LockState, Package, PinRecord
from opamlock.pipeline import Pipeline, bind, command, map_result, sequence

_PINNED_RE = re.compile(r"^git \((\S+)\)$")


@dataclass(frozen=True)
class LockRequest:
    """What to lock: everything installed, or what ``package`` transitively requires."""
    package: Optional[str] = None

    @classmethod
    def everything(cls) -> "LockRequest":
        return cls()

    @classmethod
    def dependencies_of(cls, package: str) -> "LockRequest":
        return cls(package=package)

    def __str__(self) -> str:
        if self.package is None:
            return "all installed packages"
        return f"dependencies of {self.package}"


# -----------------------------------------------------------------------------
# opam command lines
# -----------------------------------------------------------------------------

def list_command(request: LockRequest, opam_bin: str = "opam") -> List[str]:
    cmd = [opam_bin, "list", "--installed"]
    if request.package is not None:
        cmd.extend(["--recursive", "--required-by", request.package])
    return cmd


def pin_list_command(opam_bin: str = "opam") -> List[str]:
    return [opam_bin, "pin"]


def show_pinned_command(name: str, opam_bin: str = "opam") -> List[str]:
    return [opam_bin, "show", "-f", "pinned", name]


# -----------------------------------------------------------------------------
# Output grammars
# -----------------------------------------------------------------------------

def parse_installed(lines: Sequence[str]) -> List[Package]:
    """Parse ``opam list`` output: skip the header line, drop ``base`` packages."""
    packages = []
    for line in lines[1:]:
        if not line.strip():
            continue
        package = Package.from_listing_line(line)
        if str(package.version) == BASE_VERSION:
            continue
        packages.append(package)
    return packages


def parse_pins(lines: Sequence[str], options: Optional[TraceOptions] = None,
               logger=None) -> List[PinRecord]:
    """Parse ``opam pin`` output (``name.version kind url``) into git pin records.

    Pins of any other kind are skipped; with tracing enabled they are reported.

    Raises:
        InvalidPackage: For a git pin line without a url.
    """
    options = options or TraceOptions()
    pins = []
    for line in lines:
        tokens = line.split()
        if not tokens:
            continue
        if len(tokens) < 2 or tokens[1] != GIT_PIN_KIND:
            if options.tracing and logger is not None:
                logger.verbose(f"Ignoring non-git pin: {line.strip()}")
            continue
        if len(tokens) < 3:
            raise InvalidPackage(line, suggestion="Expected 'name.version git url' in opam pin output")
        name = tokens[0].split(".", 1)[0]
        pins.append(PinRecord(name=name, url=tokens[2]))
    return pins


def parse_pinned_hash(lines: Sequence[str]) -> str:
    """Extract the commit from ``opam show -f pinned`` output (``git (<hash>)``).

    Raises:
        InvalidGitHash: If the output is not exactly one matching line.
    """
    output = "\n".join(lines)
    if len(lines) != 1:
        raise InvalidGitHash(output)
    match = _PINNED_RE.match(lines[0].strip())
    if match is None:
        raise InvalidGitHash(output)
    return match.group(1)


# -----------------------------------------------------------------------------
# Resolution
# -----------------------------------------------------------------------------

def choose_ref(branch: str, commit: str) -> str:
    """Pick the ref to lock a git pin to.

    A branch that is a prefix of the checked-out commit already names that
    commit, so it is kept. Anything else is a moving branch and gets replaced
    by the commit.

    Example:
        >>> choose_ref("main", "main123abc")
        'main'
        >>> choose_ref("main", "deadbeef")
        'deadbeef'
    """
    if branch and commit.startswith(branch):
        return branch
    return commit


def resolve_pin(package: Package, commit: str, pins: Dict[str, PinRecord]) -> Package:
    pin = pins[package.name]
    base_url, branch = GitRef(pin.url).split()
    ref = choose_ref(branch, commit)
    return Package(name=package.name, version=GitRef(f"{base_url}{REF_SEPARATOR}{ref}"))


def partition(installed: Sequence[Package],
              pins: Sequence[PinRecord]) -> Tuple[List[Package], List[Package]]:
    """Split installed packages into (pinned, plain) by name."""
    pinned_names = {pin.name for pin in pins}
    needs_hash = [p for p in installed if p.name in pinned_names]
    plain_installs = [p for p in installed if p.name not in pinned_names]
    return needs_hash, plain_installs


def hash_query(package: Package, opam_bin: str = "opam") -> Pipeline:
    return map_result(
        lambda commit: (package, commit),
        map_result(parse_pinned_hash, command(show_pinned_command(package.name, opam_bin))),
    )


def state(request: LockRequest = None, options: Optional[TraceOptions] = None,
          logger=None) -> Pipeline:
    """
    Build the pipeline resolving the lock state for ``request``.

    Args:
        request: What to lock (default: everything installed).
        options: Tracing flags and the opam binary to call.
        logger: Receives notes about ignored pins when tracing.

    Returns:
        A pipeline resolving to a LockState. Nothing runs until it is passed
        to :func:`opamlock.pipeline.run`.
    """
    request = request or LockRequest.everything()
    options = options or TraceOptions()
    opam = options.opam_bin

    installed_query = map_result(parse_installed, command(list_command(request, opam)))
    pin_query = map_result(lambda lines: parse_pins(lines, options, logger),
                           command(pin_list_command(opam)))

    def with_pins(installed: List[Package]) -> Pipeline:
        return bind(pin_query, lambda pins: resolve(installed, pins))

    def resolve(installed: List[Package], pins: List[PinRecord]) -> Pipeline:
        needs_hash, plain_installs = partition(installed, pins)
        pins_by_name = {pin.name: pin for pin in pins}
        hashes = sequence(hash_query(package, opam) for package in needs_hash)
        return map_result(
            lambda resolved: LockState(
                pins=[resolve_pin(package, commit, pins_by_name) for package, commit in resolved],
                installs=plain_installs,
            ),
            hashes,
        )

    return bind(installed_query, with_pins)

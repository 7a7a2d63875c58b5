"""
Replay a lock state into the current opam switch.

Every git pin is registered first with ``opam pin add`` (without building),
then a single ``opam install`` brings in all pinned and fixed packages so
opam solves them together.
"""

from typing import List, Optional

from opamlock.config import GIT_PIN_KIND, TraceOptions
from opamlock.lockfile.models import LockState, Package
from opamlock.pipeline import Pipeline, bind, command, sequence_unit


def pin_add_command(package: Package, opam_bin: str = "opam") -> List[str]:
    return [opam_bin, "pin", "add", "-y", "-n", "-k", GIT_PIN_KIND, package.name, str(package.version)]


def install_command(lock_state: LockState, opam_bin: str = "opam") -> List[str]:
    return [opam_bin, "install", "-y"] + [package.to_install_arg() for package in lock_state.packages]


def install(lock_state: LockState, options: Optional[TraceOptions] = None) -> Pipeline:
    """
    Build the pipeline installing ``lock_state``.

    Pins are added in list order; the bulk install only runs once every pin
    command has succeeded.

    Returns:
        A pipeline resolving to the (ignored) output lines of ``opam install``.
    """
    opam = (options or TraceOptions()).opam_bin
    pins = sequence_unit(command(pin_add_command(package, opam)) for package in lock_state.pins)
    return bind(pins, lambda _: command(install_command(lock_state, opam)))

"""
Tests for lock replay in opamlock.lockfile.installer.

Tests cover:
- pin add and install command lines
- Ordering: all pins first, then one install
- Failure of a pin command stops the install
"""

import pytest

from opamlock.config import TraceOptions
from opamlock.errors import ProcessFailure
from opamlock.lockfile.installer import install, install_command, pin_add_command
from opamlock.lockfile.models import Fixed, GitRef, LockState, Package
from opamlock.pipeline import describe, run
from tests.fixtures import MockCommandExecutor


class TestCommands:
    """Tests for the command builders."""

    def test_pin_add(self):
        package = Package("libB", GitRef("git+https://h/r#dev"))
        assert pin_add_command(package) == [
            "opam", "pin", "add", "-y", "-n", "-k", "git", "libB", "git+https://h/r#dev",
        ]

    def test_install_renders_pins_bare_and_fixed_with_version(self, sample_lock_state):
        assert install_command(sample_lock_state) == ["opam", "install", "-y", "libB", "libA.1.0"]

    def test_install_empty_lock(self):
        assert install_command(LockState()) == ["opam", "install", "-y"]


class TestInstall:
    """Tests for the install pipeline."""

    def test_commands_in_order(self, sample_lock_state):
        executor = MockCommandExecutor()

        run(install(sample_lock_state), executor)

        assert executor.executed_commands == [
            "opam pin add -y -n -k git libB git+https://h/r#dev",
            "opam install -y libB libA.1.0",
        ]

    def test_pins_in_list_order(self):
        lock_state = LockState(pins=[
            Package("b", GitRef("git+https://h/b#1")),
            Package("a", GitRef("git+https://h/a#2")),
        ])

        commands = [" ".join(c) for c in describe(install(lock_state))]

        assert commands == [
            "opam pin add -y -n -k git b git+https://h/b#1",
            "opam pin add -y -n -k git a git+https://h/a#2",
            "opam install -y b a",
        ]

    def test_empty_lock_still_installs_once(self):
        executor = MockCommandExecutor()
        run(install(LockState()), executor)
        assert executor.executed_commands == ["opam install -y"]

    def test_no_pins_single_command(self):
        lock_state = LockState(installs=[Package("libA", Fixed("1.0"))])
        assert describe(install(lock_state)) == [("opam", "install", "-y", "libA.1.0")]

    def test_pin_failure_skips_install(self, sample_lock_state):
        executor = MockCommandExecutor({r'^opam pin add': ('', 'cannot fetch', 1)})

        with pytest.raises(ProcessFailure) as exc_info:
            run(install(sample_lock_state), executor)

        assert exc_info.value.command == "opam pin add -y -n -k git libB 'git+https://h/r#dev'"
        executor.assert_command_not_executed(r'^opam install')

    def test_install_failure(self, sample_lock_state):
        executor = MockCommandExecutor({r'^opam install': ('', 'conflict', 20)})

        with pytest.raises(ProcessFailure) as exc_info:
            run(install(sample_lock_state), executor)

        assert exc_info.value.exit_status == 20

    def test_custom_opam_binary(self, sample_lock_state):
        commands = describe(install(sample_lock_state, TraceOptions(opam_bin="opam-2.1")))
        assert all(c[0] == "opam-2.1" for c in commands)

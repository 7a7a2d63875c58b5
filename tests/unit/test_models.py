"""
Tests for the lock data model in opamlock.lockfile.models.

Tests cover:
- Version classification
- GitRef url/ref splitting
- Listing and lock-file line grammars
- Lock-file and install-argument printers
- LockState partitioning
"""

import pytest

from opamlock.errors import InvalidLockLine, InvalidPackage
from opamlock.lockfile.models import (
    Fixed,
    GitRef,
    LockState,
    Package,
    version_of_string,
)


class TestVersionOfString:
    """Tests for version_of_string."""

    def test_https_url_gets_git_prefix(self):
        assert version_of_string("https://example.com/x.git") == GitRef("git+https://example.com/x.git")

    def test_git_url_unchanged(self):
        assert version_of_string("git+ssh://host/x") == GitRef("git+ssh://host/x")

    def test_plain_version_is_fixed(self):
        assert version_of_string("1.2.3") == Fixed("1.2.3")

    def test_http_is_not_git(self):
        """Only https:// is classified as a git source."""
        assert version_of_string("http://example.com/x") == Fixed("http://example.com/x")

    def test_url_with_ref_keeps_ref(self):
        assert version_of_string("https://h/r#dev") == GitRef("git+https://h/r#dev")


class TestGitRef:
    """Tests for GitRef.split."""

    def test_split_on_last_hash(self):
        assert GitRef("git+https://h/r#dev").split() == ("git+https://h/r", "dev")

    def test_split_uses_last_separator(self):
        assert GitRef("git+https://h/r#a#b").split() == ("git+https://h/r#a", "b")

    def test_split_without_ref(self):
        assert GitRef("git+https://h/r").split() == ("git+https://h/r", "")

    def test_str(self):
        assert str(GitRef("git+https://h/r#dev")) == "git+https://h/r#dev"

    def test_fixed_and_gitref_never_equal(self):
        assert Fixed("x") != GitRef("x")


class TestListingLine:
    """Tests for Package.from_listing_line."""

    def test_name_and_version(self):
        assert Package.from_listing_line("foo 1.0") == Package("foo", Fixed("1.0"))

    def test_extra_tokens_ignored(self):
        p = Package.from_listing_line("dune    3.11.1   Fast, portable build system")
        assert p == Package("dune", Fixed("3.11.1"))

    def test_listing_version_is_not_classified(self):
        """Installed versions are always Fixed, even if they look like urls."""
        p = Package.from_listing_line("foo https://h/r")
        assert p.version == Fixed("https://h/r")

    @pytest.mark.parametrize("line", ["", "foo", "   "])
    def test_too_few_tokens(self, line):
        with pytest.raises(InvalidPackage) as exc_info:
            Package.from_listing_line(line)
        assert exc_info.value.line == line


class TestLockLine:
    """Tests for Package.from_lock_line."""

    def test_fixed(self):
        assert Package.from_lock_line("foo = 1.0") == Package("foo", Fixed("1.0"))

    def test_git(self):
        p = Package.from_lock_line("libB = git+https://h/r#dev")
        assert p == Package("libB", GitRef("git+https://h/r#dev"))
        assert p.is_pinned

    def test_whitespace_is_trimmed(self):
        assert Package.from_lock_line("  foo=1.0  ") == Package("foo", Fixed("1.0"))

    @pytest.mark.parametrize("line", [
        "foo 1.0",
        "foo = 1.0 = 2.0",
        "= 1.0",
        "foo =",
        "foo = ",
    ])
    def test_malformed(self, line):
        with pytest.raises(InvalidLockLine) as exc_info:
            Package.from_lock_line(line)
        assert exc_info.value.line == line


class TestPrinters:
    """Tests for to_lock_line and to_install_arg."""

    def test_lock_line_fixed(self):
        assert Package("foo", Fixed("1.0")).to_lock_line() == "foo = 1.0"

    def test_lock_line_git(self):
        assert Package("libB", GitRef("git+https://h/r#dev")).to_lock_line() == "libB = git+https://h/r#dev"

    def test_lock_line_round_trips(self):
        p = Package("libB", GitRef("git+https://h/r#dev"))
        assert Package.from_lock_line(p.to_lock_line()) == p

    def test_install_arg_fixed(self):
        assert Package("foo", Fixed("1.0")).to_install_arg() == "foo.1.0"

    def test_install_arg_pinned_is_bare_name(self):
        assert Package("libB", GitRef("git+https://h/r#dev")).to_install_arg() == "libB"


class TestLockState:
    """Tests for LockState."""

    def test_from_packages_partitions_by_kind(self):
        a = Package("libA", Fixed("1.0"))
        b = Package("libB", GitRef("git+https://h/r#dev"))

        state = LockState.from_packages([a, b])

        assert state.pins == (b,)
        assert state.installs == (a,)

    def test_packages_lists_pins_first(self):
        a = Package("libA", Fixed("1.0"))
        b = Package("libB", GitRef("git+https://h/r#dev"))
        assert LockState(pins=[b], installs=[a]).packages == (b, a)

    def test_lists_are_stored_as_tuples(self):
        state = LockState(pins=[], installs=[Package("a", Fixed("1"))])
        assert isinstance(state.installs, tuple)

    def test_empty_state(self):
        state = LockState()
        assert state.packages == ()
        assert state.by_name() == {}

    def test_by_name(self, sample_lock_state):
        assert set(sample_lock_state.by_name()) == {"libA", "libB"}

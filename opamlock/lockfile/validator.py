"""
Compare the live opam switch against a lock file.

Resolves the live state with the same pipeline as ``opam-lock lock`` and
matches it against the lock by package name.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from opamlock.config import TraceOptions
from opamlock.lockfile.models import LockState, Package
from opamlock.lockfile.resolver import LockRequest, state
from opamlock.pipeline import Pipeline, map_result


@dataclass
class ValidationResult:
    """Result of checking a single package."""
    package: str
    expected: Optional[str]     # Version from the lock, None when not locked
    actual: Optional[str]       # Version in the switch, None when not installed
    valid: bool
    message: str


@dataclass
class LockValidationResult:
    """Overall result of lock validation."""
    valid: bool                              # True if the switch matches the lock
    total_packages: int                      # Packages in the lock
    matched: int                             # Same version in lock and switch
    mismatched: int                          # Version differs
    missing: int                             # Locked but not installed
    extra: int                               # Installed but not locked
    strict: bool = False                     # Extra packages fail validation
    results: List[ValidationResult] = field(default_factory=list)

    @property
    def summary(self) -> str:
        """Human-readable summary of validation results."""
        if self.valid:
            return f"All {self.matched} packages match lockfile"
        issues = []
        if self.mismatched:
            issues.append(f"{self.mismatched} version mismatch(es)")
        if self.missing:
            issues.append(f"{self.missing} missing package(s)")
        if self.strict and self.extra:
            issues.append(f"{self.extra} unlocked package(s)")
        return f"Validation failed: {', '.join(issues)}"


def validate_package(name: str, expected: Optional[Package], actual: Optional[Package]) -> ValidationResult:
    expected_version = str(expected.version) if expected else None
    actual_version = str(actual.version) if actual else None

    if expected is None:
        return ValidationResult(
            package=name,
            expected=None,
            actual=actual_version,
            valid=False,
            message=f"{name}: {actual_version} installed but not in lockfile",
        )
    if actual is None:
        return ValidationResult(
            package=name,
            expected=expected_version,
            actual=None,
            valid=False,
            message=f"{name}: not installed (expected {expected_version})",
        )
    if expected.version == actual.version:
        return ValidationResult(
            package=name,
            expected=expected_version,
            actual=actual_version,
            valid=True,
            message=f"{name}: {actual_version} matches lockfile",
        )
    return ValidationResult(
        package=name,
        expected=expected_version,
        actual=actual_version,
        valid=False,
        message=f"{name}: expected {expected_version}, found {actual_version}",
    )


def compare_states(locked: LockState, live: LockState, strict: bool = False) -> LockValidationResult:
    """Match two lock states by name. Versions are compared by kind and string."""
    locked_by_name = locked.by_name()
    live_by_name = live.by_name()

    results = []
    matched = mismatched = missing = extra = 0

    for name, expected in locked_by_name.items():
        result = validate_package(name, expected, live_by_name.get(name))
        results.append(result)
        if result.valid:
            matched += 1
        elif result.actual is None:
            missing += 1
        else:
            mismatched += 1

    for name, actual in live_by_name.items():
        if name not in locked_by_name:
            results.append(validate_package(name, None, actual))
            extra += 1

    valid = mismatched == 0 and missing == 0 and (not strict or extra == 0)

    return LockValidationResult(
        valid=valid,
        total_packages=len(locked_by_name),
        matched=matched,
        mismatched=mismatched,
        missing=missing,
        extra=extra,
        strict=strict,
        results=results,
    )


def verify(locked: LockState, request: LockRequest = None,
           options: Optional[TraceOptions] = None, strict: bool = False, logger=None) -> Pipeline:
    """Build the pipeline resolving the live state and comparing it with ``locked``."""
    return map_result(
        lambda live: compare_states(locked, live, strict=strict),
        state(request, options, logger=logger),
    )


def format_validation_report(result: LockValidationResult, lockfile_path: str = "-") -> str:
    """Format validation result as a human-readable report."""
    lines = [
        "Lockfile Validation Report",
        "==========================",
        f"Lockfile: {'<stdin>' if lockfile_path == '-' else lockfile_path}",
        f"Status: {'PASSED' if result.valid else 'FAILED'}",
        "",
        f"Summary: {result.total_packages} packages",
        f"  Matched:    {result.matched}",
        f"  Mismatched: {result.mismatched}",
        f"  Missing:    {result.missing}",
        f"  Unlocked:   {result.extra}",
    ]

    issues = [r for r in result.results if not r.valid]
    if issues:
        lines.append("")
        lines.append("Issues:")
        for issue in issues:
            lines.append(f"  - {issue.message}")

    return "\n".join(lines)

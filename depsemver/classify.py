"""Dependency map diffing and severity resolution."""

from collections.abc import Iterable, Mapping

from .compare import compare_versions
from .models import Severity


def resolve_severity(severities: Iterable[Severity]) -> Severity:
    """Pick the winning severity, Major > Minor > Patch > None."""
    return max(severities, default=Severity.NONE)


def added_dependencies(old: Mapping[str, str], new: Mapping[str, str]) -> list[str]:
    """Names present in ``new`` but not in ``old``."""
    return [name for name in new if name not in old]


def classify_dependencies(old: Mapping[str, str], new: Mapping[str, str]) -> Severity:
    """Classify the change between two dependency maps of one group.

    Any added dependency makes the change Major. Otherwise every dependency
    present on both sides is compared and the highest severity wins.
    Removed dependencies are not a change.
    """
    if added_dependencies(old, new):
        return Severity.MAJOR

    return resolve_severity(
        compare_versions(old[name], new[name]) for name in new if name in old
    )

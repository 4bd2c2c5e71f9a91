"""Advancing a version by one severity step."""

from .models import Severity, Version


def advance(current: Version, severity: Severity) -> Version:
    """Bump ``current`` according to ``severity``; NONE leaves it unchanged."""
    if severity is Severity.MAJOR:
        return Version(current.major + 1, 0, 0)
    if severity is Severity.MINOR:
        return Version(current.major, current.minor + 1, 0)
    if severity is Severity.PATCH:
        return Version(current.major, current.minor, current.patch + 1)
    return current

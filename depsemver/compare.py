"""Semantic version comparison of dependency range specifiers."""

import re

from .errors import VersionParseError
from .models import Severity, Version

# Leading range operators and other non-numeric noise: ^, ~, >=, =, v, ...
_RANGE_PREFIX = re.compile(r"^[^0-9]+")


def clean_version(spec: str) -> str:
    """Strip any leading non-numeric range prefix from a version specifier."""
    return _RANGE_PREFIX.sub("", spec)


def parse_version(text: str) -> Version:
    """Parse a ``major.minor.patch`` string; see ``Version.parse``."""
    return Version.parse(text)


def normalize_version(spec: str | None) -> Version | None:
    """Clean a range specifier and parse it, or return None if that fails."""
    if not spec:
        return None
    try:
        return Version.parse(clean_version(spec))
    except VersionParseError:
        return None


def compare_versions(old: str | None, new: str | None) -> Severity:
    """Return the highest-order component that differs between two specifiers.

    Specifiers that do not normalize to a valid version can't prove a semantic
    change, so the comparison yields ``Severity.NONE``.
    """
    old_version = normalize_version(old)
    new_version = normalize_version(new)
    if old_version is None or new_version is None:
        return Severity.NONE

    if old_version.major != new_version.major:
        return Severity.MAJOR
    if old_version.minor != new_version.minor:
        return Severity.MINOR
    if old_version.patch != new_version.patch:
        return Severity.PATCH
    return Severity.NONE

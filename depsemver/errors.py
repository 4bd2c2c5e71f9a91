"""Exceptions raised by depsemver."""


class DepSemverError(Exception):
    """Base class for all depsemver errors."""


class ManifestNotFoundError(DepSemverError):
    """The manifest file does not exist."""

    def __init__(self, path):
        self.path = path
        super().__init__(f"Manifest file not found at {path}")


class HistoryEnumerationError(DepSemverError):
    """The commit history of the manifest could not be listed."""


class ManifestParseError(DepSemverError):
    """Manifest content is not a valid package manifest."""


class VersionParseError(DepSemverError, ValueError):
    """A string is not a valid major.minor.patch version."""


class StaleManifestError(DepSemverError):
    """The manifest version lags behind the inferred version."""

    def __init__(self, path, current: str | None, expected: str):
        self.path = path
        self.current = current
        self.expected = expected
        recorded = current if current is not None else "<none>"
        super().__init__(
            f"{path} is stale: version {recorded} should be {expected}"
        )

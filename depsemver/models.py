"""Core data models for depsemver."""

from dataclasses import dataclass, field
from enum import IntEnum

import semver

from .errors import VersionParseError

DependencyMap = dict[str, str]

DEPENDENCY_GROUPS = ("dependencies", "devDependencies", "optionalDependencies")


class Severity(IntEnum):
    """Semantic-versioning severity of a change, ordered by precedence."""

    NONE = 0
    PATCH = 1
    MINOR = 2
    MAJOR = 3

    @property
    def label(self) -> str:
        return self.name.lower()


@dataclass(frozen=True, order=True)
class Version:
    """A major.minor.patch version triple."""

    major: int
    minor: int
    patch: int

    def __post_init__(self):
        if min(self.major, self.minor, self.patch) < 0:
            raise ValueError(f"Version components must be non-negative: {self!r}")

    @classmethod
    def parse(cls, text: str) -> "Version":
        """Parse a semver string, ignoring any pre-release or build suffix.

        Args:
            text: Version string such as ``"1.4.2"`` or ``"5.0.0-canary.1"``

        Returns:
            The parsed Version

        Raises:
            VersionParseError: If the text is not a valid semver version
        """
        try:
            parsed = semver.Version.parse(text.strip())
        except (TypeError, ValueError):
            raise VersionParseError(f"Invalid version: {text!r}") from None
        return cls(parsed.major, parsed.minor, parsed.patch)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


DEFAULT_SEED = Version(1, 0, 0)


@dataclass
class Manifest:
    """A parsed package manifest."""

    raw: str
    version: str | None
    groups: dict[str, DependencyMap]


@dataclass(frozen=True)
class Snapshot:
    """The manifest text at one commit (``None`` when it could not be read)."""

    commit: str
    text: str | None


@dataclass
class StepRecord:
    """A snapshot that moved the inferred version."""

    commit: str
    severity: Severity
    groups: dict[str, Severity]
    version: Version

    def to_dict(self) -> dict:
        return {
            "commit": self.commit,
            "severity": self.severity.label,
            "groups": {name: sev.label for name, sev in self.groups.items()},
            "version": str(self.version),
        }


@dataclass
class WalkResult:
    """Outcome of walking a manifest's history."""

    version: Version
    updated: bool = False
    steps: list[StepRecord] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "version": str(self.version),
            "updated": self.updated,
            "steps": [step.to_dict() for step in self.steps],
            "skipped": list(self.skipped),
        }

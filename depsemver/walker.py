"""History walker: folds manifest snapshots into an inferred version.

Each snapshot's dependency groups are diffed against the maps retained from
earlier snapshots. Only the groups with a detected change are replaced, so a
snapshot without a detectable change never loses prior state. The resolved
severity of each snapshot advances the version, in commit order.
"""

import logging
from collections.abc import Callable, Iterable
from typing import Protocol

from .bump import advance
from .classify import classify_dependencies, resolve_severity
from .errors import ManifestParseError, VersionParseError
from .manifest import parse_manifest
from .models import (
    DEFAULT_SEED,
    DEPENDENCY_GROUPS,
    DependencyMap,
    Manifest,
    Severity,
    Snapshot,
    StepRecord,
    Version,
    WalkResult,
)

ProgressCallback = Callable[[int, int, str], None]


class History(Protocol):
    """What the walker needs from a version-control history provider."""

    def list_commits_touching(self) -> list[str]: ...

    def touches_manifest(self, commit: str) -> bool: ...

    def read_file_at_commit(self, commit: str) -> str | None: ...


class HistoryWalker:
    """Sequential fold of manifest snapshots into a version."""

    def __init__(
        self,
        baseline: Version = DEFAULT_SEED,
        logger: logging.Logger | None = None,
    ):
        self.version = baseline
        self.updated = False
        self.groups: dict[str, DependencyMap] = {group: {} for group in DEPENDENCY_GROUPS}
        self.steps: list[StepRecord] = []
        self.skipped: list[str] = []
        self.logger = logger or logging.getLogger(__name__)

    def seed(self, manifest: Manifest) -> None:
        """Retain ``manifest``'s dependency maps as the starting state."""
        self.groups = {group: dict(manifest.groups[group]) for group in DEPENDENCY_GROUPS}

    def step(self, snapshot: Snapshot) -> StepRecord | None:
        """Process one snapshot; returns a record if it moved the version."""
        if snapshot.text is None:
            self.logger.warning("Skipping %s: manifest could not be read", snapshot.commit)
            self.skipped.append(snapshot.commit)
            return None

        try:
            manifest = parse_manifest(snapshot.text)
        except ManifestParseError as e:
            self.logger.warning("Skipping %s: %s", snapshot.commit, e)
            self.skipped.append(snapshot.commit)
            return None

        changes = {
            group: classify_dependencies(self.groups[group], manifest.groups[group])
            for group in DEPENDENCY_GROUPS
        }
        severity = resolve_severity(changes.values())
        if severity is Severity.NONE:
            self.logger.debug("%s: no dependency change", snapshot.commit)
            return None

        for group, change in changes.items():
            if change is not Severity.NONE:
                self.groups[group] = dict(manifest.groups[group])

        previous = self.version
        self.version = advance(self.version, severity)
        self.updated = True

        record = StepRecord(
            commit=snapshot.commit,
            severity=severity,
            groups={
                group: change
                for group, change in changes.items()
                if change is not Severity.NONE
            },
            version=self.version,
        )
        self.steps.append(record)
        self.logger.info(
            "%s: %s change, %s -> %s", snapshot.commit, severity.label, previous, self.version
        )
        return record

    def walk(
        self,
        snapshots: Iterable[Snapshot],
        progress: ProgressCallback | None = None,
    ) -> WalkResult:
        """Process ``snapshots`` in order and return the final result."""
        if progress:
            snapshots = list(snapshots)
        for done, snapshot in enumerate(snapshots, start=1):
            self.step(snapshot)
            if progress:
                progress(done, len(snapshots), snapshot.commit)
        return self.result()

    def result(self) -> WalkResult:
        return WalkResult(
            version=self.version,
            updated=self.updated,
            steps=list(self.steps),
            skipped=list(self.skipped),
        )


def _baseline_from(
    text: str | None, seed: Version, logger: logging.Logger
) -> tuple[Version, Manifest | None]:
    if text is None:
        return seed, None
    try:
        manifest = parse_manifest(text)
    except ManifestParseError as e:
        logger.warning("Baseline snapshot is unparseable, using %s: %s", seed, e)
        return seed, None

    if manifest.version is None:
        return seed, manifest
    try:
        return Version.parse(manifest.version), manifest
    except VersionParseError:
        logger.warning("Baseline version %r is invalid, using %s", manifest.version, seed)
        return seed, manifest


def infer_from_history(
    history: History,
    *,
    latest_only: bool = False,
    seed: Version = DEFAULT_SEED,
    logger: logging.Logger | None = None,
    progress: ProgressCallback | None = None,
) -> WalkResult:
    """Infer a manifest version from its commit history.

    Args:
        history: Provider of commits and file snapshots
        latest_only: Only inspect the most recent commit touching the manifest,
            starting from the version and dependencies recorded just before it
        seed: Baseline version for a full-history walk
        logger: Log sink for this run
        progress: Called as ``progress(done, total, commit)`` after each commit

    Returns:
        The walk result

    Raises:
        HistoryEnumerationError: If the commit list cannot be obtained
    """
    logger = logger or logging.getLogger(__name__)
    commits = history.list_commits_touching()

    baseline, seed_manifest = seed, None
    if latest_only and len(commits) > 1:
        previous = commits[-2]
        baseline, seed_manifest = _baseline_from(
            history.read_file_at_commit(previous), seed, logger
        )
        logger.debug("Latest-only walk from %s at %s", baseline, previous)
        commits = commits[-1:]
    elif latest_only:
        commits = commits[-1:]

    walker = HistoryWalker(baseline=baseline, logger=logger)
    if seed_manifest is not None:
        walker.seed(seed_manifest)

    for done, commit in enumerate(commits, start=1):
        if history.touches_manifest(commit):
            walker.step(Snapshot(commit=commit, text=history.read_file_at_commit(commit)))
        else:
            logger.debug("%s does not touch the manifest", commit)
        if progress:
            progress(done, len(commits), commit)

    return walker.result()

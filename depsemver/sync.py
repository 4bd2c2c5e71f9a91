"""Applying an inferred version to the manifest."""

import logging
from enum import Enum
from pathlib import Path

from .errors import StaleManifestError
from .manifest import read_manifest, write_version
from .models import WalkResult

logger = logging.getLogger(__name__)


class SyncOutcome(str, Enum):
    """What syncing did to the manifest."""

    UNCHANGED = "unchanged"  # no dependency change in history
    UP_TO_DATE = "up_to_date"  # manifest already records the inferred version
    WRITTEN = "written"


def sync_manifest(path: Path, result: WalkResult, strict: bool = False) -> SyncOutcome:
    """Bring the manifest's version in line with a walk result.

    Args:
        path: Manifest file path
        result: Result of walking the manifest history
        strict: Raise instead of writing when the manifest is stale

    Returns:
        The outcome of the sync

    Raises:
        StaleManifestError: In strict mode, if the recorded version differs
        ManifestNotFoundError: If the manifest does not exist
    """
    if not result.updated:
        return SyncOutcome.UNCHANGED

    manifest = read_manifest(path)
    expected = str(result.version)
    if manifest.version == expected:
        logger.debug("%s already at %s", path, expected)
        return SyncOutcome.UP_TO_DATE

    if strict:
        raise StaleManifestError(path, manifest.version, expected)

    write_version(path, result.version)
    return SyncOutcome.WRITTEN

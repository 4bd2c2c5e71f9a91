"""package.json parsing and version write-back."""

import json
import logging
import re
from pathlib import Path

from .errors import ManifestNotFoundError, ManifestParseError
from .models import DEPENDENCY_GROUPS, DependencyMap, Manifest, Version

logger = logging.getLogger(__name__)

_INDENT = re.compile(r"^([ \t]+)\S", re.MULTILINE)


def _parse_group(document: dict, group: str) -> DependencyMap:
    entries = document.get(group)
    if entries is None:
        return {}
    if not isinstance(entries, dict):
        raise ManifestParseError(f"'{group}' must be an object")

    for name, spec in entries.items():
        if not isinstance(spec, str):
            raise ManifestParseError(f"'{group}.{name}' must be a string")
    return dict(entries)


def parse_manifest(content: str) -> Manifest:
    """Parse package.json content into a Manifest.

    Args:
        content: The package.json file content

    Returns:
        Parsed Manifest; absent dependency groups are empty maps

    Raises:
        ManifestParseError: If the content is not a valid manifest
    """
    try:
        document = json.loads(content)
    except json.JSONDecodeError as e:
        raise ManifestParseError(f"Invalid JSON: {e}") from e

    if not isinstance(document, dict):
        raise ManifestParseError("Manifest must be a JSON object")

    version = document.get("version")
    if version is not None and not isinstance(version, str):
        raise ManifestParseError("'version' must be a string")

    groups = {group: _parse_group(document, group) for group in DEPENDENCY_GROUPS}
    return Manifest(raw=content, version=version, groups=groups)


def read_manifest(path: Path) -> Manifest:
    """Read and parse the manifest at ``path``."""
    path = Path(path)
    if not path.is_file():
        raise ManifestNotFoundError(path)
    return parse_manifest(path.read_text(encoding="utf-8"))


def detect_indent(content: str) -> str | int:
    """Indentation used by a JSON document, defaulting to two spaces."""
    match = _INDENT.search(content)
    if not match:
        return 2
    indent = match.group(1)
    return indent if "\t" in indent else len(indent)


def set_version(content: str, version: Version) -> str:
    """Return ``content`` re-serialized with its ``version`` field replaced.

    Key order is preserved. A missing ``version`` is inserted right after
    ``name`` (or first when there is no name). The result ends with a newline.
    """
    try:
        document = json.loads(content)
    except json.JSONDecodeError as e:
        raise ManifestParseError(f"Invalid JSON: {e}") from e
    if not isinstance(document, dict):
        raise ManifestParseError("Manifest must be a JSON object")

    if "version" in document:
        document["version"] = str(version)
    else:
        updated = {}
        if "name" not in document:
            updated["version"] = str(version)
        for key, value in document.items():
            updated[key] = value
            if key == "name":
                updated["version"] = str(version)
        document = updated

    return json.dumps(document, indent=detect_indent(content), ensure_ascii=False) + "\n"


def write_version(path: Path, version: Version) -> None:
    """Write ``version`` into the manifest file at ``path``."""
    path = Path(path)
    if not path.is_file():
        raise ManifestNotFoundError(path)

    content = path.read_text(encoding="utf-8")
    path.write_text(set_version(content, version), encoding="utf-8")
    logger.debug("Wrote version %s to %s", version, path)

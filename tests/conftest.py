"""Pytest configuration and fixtures."""

import json

import pytest


def package_json(version=None, dependencies=None, dev=None, optional=None, **extra) -> str:
    """Render a package.json document."""
    document = {"name": "test-project"}
    if version is not None:
        document["version"] = version
    if dependencies is not None:
        document["dependencies"] = dependencies
    if dev is not None:
        document["devDependencies"] = dev
    if optional is not None:
        document["optionalDependencies"] = optional
    document.update(extra)
    return json.dumps(document, indent=2) + "\n"


class FakeHistory:
    """In-memory history: a list of (commit, content) pairs, oldest first."""

    def __init__(self, commits, untouched=()):
        self.commits = list(commits)
        self.untouched = set(untouched)

    def list_commits_touching(self):
        return [commit for commit, _ in self.commits]

    def touches_manifest(self, commit):
        return commit not in self.untouched

    def read_file_at_commit(self, commit):
        return dict(self.commits)[commit]


@pytest.fixture
def sample_package_json():
    """Sample package.json content for testing."""
    return """
{
  "name": "test-project",
  "version": "1.0.0",
  "dependencies": {
    "express": "^4.18.0",
    "lodash": "~4.17.21"
  }
}
"""


@pytest.fixture
def three_commit_history():
    """Add a, bump a's minor, remove a."""
    return FakeHistory([
        ("c1", package_json(version="1.0.0", dependencies={"a": "^1.0.0"})),
        ("c2", package_json(version="1.0.0", dependencies={"a": "^1.1.0"})),
        ("c3", package_json(version="1.0.0", dependencies={})),
    ])


@pytest.fixture
def manifest_file(tmp_path):
    """Create a temporary package.json for testing."""
    manifest = tmp_path / "package.json"
    manifest.write_text(package_json(version="1.0.0", dependencies={"a": "^1.0.0"}))
    return manifest

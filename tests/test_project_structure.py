"""Test that project structure is correct and modules can be imported."""

import depsemver.classify
import depsemver.compare
import depsemver.history
import depsemver.models
import depsemver.walker
from depsemver.models import DEPENDENCY_GROUPS, Manifest, Version


def test_core_modules_importable():
    """Ensure core modules can be imported."""
    # This will fail if modules have syntax errors or missing dependencies

    # Basic smoke test - ensure key names exist
    assert hasattr(depsemver.models, "Severity")
    assert hasattr(depsemver.models, "WalkResult")
    assert hasattr(depsemver.compare, "compare_versions")
    assert hasattr(depsemver.classify, "classify_dependencies")
    assert hasattr(depsemver.history, "GitHistory")
    assert hasattr(depsemver.walker, "HistoryWalker")


def test_model_creation():
    """Test that basic models can be instantiated."""
    version = Version(1, 2, 3)
    assert str(version) == "1.2.3"

    manifest = Manifest(raw="{}", version=None, groups={group: {} for group in DEPENDENCY_GROUPS})
    assert manifest.version is None
    assert len(manifest.groups) == 3

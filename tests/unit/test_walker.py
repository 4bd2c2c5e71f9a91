"""Tests for the history walker."""

import logging

import pytest

from conftest import FakeHistory, package_json
from depsemver.errors import HistoryEnumerationError
from depsemver.models import Severity, Snapshot, Version
from depsemver.walker import HistoryWalker, infer_from_history


class TestHistoryWalker:
    """Test the snapshot fold."""

    def test_add_bump_remove(self, three_commit_history):
        """Addition is major, the bump is minor, the removal changes nothing."""
        result = infer_from_history(three_commit_history)

        assert result.updated is True
        assert result.version == Version(2, 1, 0)
        assert [step.commit for step in result.steps] == ["c1", "c2"]
        assert [step.severity for step in result.steps] == [Severity.MAJOR, Severity.MINOR]
        assert [str(step.version) for step in result.steps] == ["2.0.0", "2.1.0"]

    def test_walk_is_repeatable(self, three_commit_history):
        first = infer_from_history(three_commit_history)
        second = infer_from_history(three_commit_history)
        assert first.version == second.version

    def test_no_dependencies_is_unchanged(self):
        history = FakeHistory([
            ("c1", package_json(version="1.0.0")),
            ("c2", package_json(version="1.0.1", description="docs")),
        ])
        result = infer_from_history(history)

        assert result.updated is False
        assert result.version == Version(1, 0, 0)
        assert result.steps == []

    def test_empty_history(self):
        result = infer_from_history(FakeHistory([]))
        assert result.updated is False
        assert result.version == Version(1, 0, 0)

    def test_custom_seed(self, three_commit_history):
        result = infer_from_history(three_commit_history, seed=Version(0, 1, 0))
        assert result.version == Version(1, 1, 0)

    def test_groups_resolved_by_precedence(self):
        """A patch in dependencies and a minor in devDependencies resolve to minor."""
        history = FakeHistory([
            ("c1", package_json(dependencies={"a": "1.0.0"}, dev={"t": "1.0.0"})),
            ("c2", package_json(dependencies={"a": "1.0.1"}, dev={"t": "1.1.0"})),
        ])
        result = infer_from_history(history)

        assert result.version == Version(2, 1, 0)
        assert result.steps[-1].groups == {
            "dependencies": Severity.PATCH,
            "devDependencies": Severity.MINOR,
        }

    def test_optional_dependencies_are_tracked(self):
        history = FakeHistory([
            ("c1", package_json(dependencies={"a": "1.0.0"})),
            ("c2", package_json(dependencies={"a": "1.0.0"}, optional={"fsevents": "^2.3.0"})),
        ])
        result = infer_from_history(history)
        assert result.version == Version(3, 0, 0)

    def test_unchanged_groups_keep_their_retained_map(self):
        """Only groups with a detected change are replaced."""
        walker = HistoryWalker()
        walker.step(Snapshot("c1", package_json(dependencies={"a": "1.0.0"}, dev={"t": "1.0.0"})))
        # dev drops t (not a change) while dependencies gets a patch bump
        walker.step(Snapshot("c2", package_json(dependencies={"a": "1.0.1"}, dev={})))

        assert walker.groups["dependencies"] == {"a": "1.0.1"}
        assert walker.groups["devDependencies"] == {"t": "1.0.0"}

        # t reappears: still present in the retained map, so not an addition
        record = walker.step(
            Snapshot("c3", package_json(dependencies={"a": "1.0.1"}, dev={"t": "1.0.0"}))
        )
        assert record is None
        assert walker.version == Version(2, 0, 1)

    def test_removal_then_readd_is_not_an_addition(self, three_commit_history):
        history = FakeHistory(three_commit_history.commits + [
            ("c4", package_json(dependencies={"a": "^1.1.0"})),
        ])
        result = infer_from_history(history)
        assert result.version == Version(2, 1, 0)

    def test_corrupt_snapshot_is_skipped(self, caplog):
        """An unparseable snapshot does not abort the walk."""
        history = FakeHistory([
            ("c1", package_json(dependencies={"a": "1.0.0"})),
            ("c2", "{ not json"),
            ("c3", package_json(dependencies={"a": "1.1.0"})),
        ])
        with caplog.at_level(logging.WARNING):
            result = infer_from_history(history)

        assert result.version == Version(2, 1, 0)
        assert result.skipped == ["c2"]
        assert "c2" in caplog.text

    def test_unreadable_snapshot_is_skipped(self):
        history = FakeHistory([
            ("c1", package_json(dependencies={"a": "1.0.0"})),
            ("c2", None),
        ])
        result = infer_from_history(history)
        assert result.version == Version(2, 0, 0)
        assert result.skipped == ["c2"]

    def test_invalid_group_shape_is_skipped(self):
        history = FakeHistory([
            ("c1", package_json(dependencies=["a"])),
            ("c2", package_json(dependencies={"a": "1.0.0"})),
        ])
        result = infer_from_history(history)
        assert result.skipped == ["c1"]
        assert result.version == Version(2, 0, 0)

    def test_commits_not_touching_manifest_are_ignored(self):
        history = FakeHistory(
            [
                ("c1", package_json(dependencies={"a": "1.0.0"})),
                ("merge", package_json(dependencies={"a": "1.0.0", "b": "1.0.0"})),
            ],
            untouched={"merge"},
        )
        result = infer_from_history(history)
        assert result.version == Version(2, 0, 0)

    def test_progress_reports_every_commit(self, three_commit_history):
        calls = []
        infer_from_history(three_commit_history, progress=lambda *args: calls.append(args))
        assert calls == [(1, 3, "c1"), (2, 3, "c2"), (3, 3, "c3")]

    def test_walk_progress_counts_snapshots(self):
        """Progress totals come from the snapshots themselves, even for generators."""
        calls = []
        snapshots = (
            Snapshot(str(index), package_json(dependencies={"a": f"1.{index}.0"}))
            for index in range(3)
        )
        result = HistoryWalker().walk(snapshots, progress=lambda *args: calls.append(args))

        assert calls == [(1, 3, "0"), (2, 3, "1"), (3, 3, "2")]
        assert result.version == Version(2, 2, 0)

    def test_uses_given_logger(self, three_commit_history, caplog):
        logger = logging.getLogger("depsemver.test-run")
        with caplog.at_level(logging.INFO, logger="depsemver.test-run"):
            infer_from_history(three_commit_history, logger=logger)
        assert any(r.name == "depsemver.test-run" for r in caplog.records)

    def test_enumeration_failure_propagates(self):
        class BrokenHistory(FakeHistory):
            def list_commits_touching(self):
                raise HistoryEnumerationError("not a git repository")

        with pytest.raises(HistoryEnumerationError):
            infer_from_history(BrokenHistory([]))


class TestLatestOnly:
    """Test walking only the most recent commit."""

    def test_latest_starts_from_previous_snapshot(self):
        history = FakeHistory([
            ("c1", package_json(version="3.2.0", dependencies={"a": "^1.0.0"})),
            ("c2", package_json(version="3.2.0", dependencies={"a": "^1.0.1"})),
        ])
        result = infer_from_history(history, latest_only=True)

        assert result.updated is True
        assert result.version == Version(3, 2, 1)
        assert [step.commit for step in result.steps] == ["c2"]

    def test_latest_without_dependency_change(self):
        history = FakeHistory([
            ("c1", package_json(version="3.2.0", dependencies={"a": "^1.0.0"})),
            ("c2", package_json(version="3.2.0", dependencies={"a": "^1.0.0"}, private=True)),
        ])
        result = infer_from_history(history, latest_only=True)
        assert result.updated is False
        assert result.version == Version(3, 2, 0)

    def test_latest_with_invalid_previous_version_uses_seed(self):
        history = FakeHistory([
            ("c1", package_json(version="next", dependencies={"a": "1.0.0"})),
            ("c2", package_json(version="next", dependencies={"a": "1.1.0"})),
        ])
        result = infer_from_history(history, latest_only=True)
        assert result.version == Version(1, 1, 0)

    def test_latest_with_single_commit(self):
        history = FakeHistory([("c1", package_json(dependencies={"a": "1.0.0"}))])
        result = infer_from_history(history, latest_only=True)
        assert result.version == Version(2, 0, 0)

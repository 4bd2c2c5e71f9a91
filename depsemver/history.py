"""Git-backed access to a manifest's commit history."""

import logging
import subprocess
from pathlib import Path

from .errors import HistoryEnumerationError

logger = logging.getLogger(__name__)


class GitHistory:
    """History provider for one file tracked in a git repository."""

    def __init__(self, manifest_path: Path, git: str = "git"):
        """Initialize the history provider.

        Args:
            manifest_path: Path to the manifest inside a git work tree
            git: Git executable to invoke
        """
        self.manifest_path = Path(manifest_path).resolve()
        self.git = git
        self._root: Path | None = None

    def _run(self, *args: str, cwd: Path | None = None) -> str:
        result = subprocess.run(
            [self.git, *args],
            cwd=cwd or self.root,
            capture_output=True,
            text=True,
            check=True,
        )
        return result.stdout

    @property
    def root(self) -> Path:
        """Top-level directory of the repository containing the manifest."""
        if self._root is None:
            try:
                toplevel = self._run(
                    "rev-parse", "--show-toplevel", cwd=self.manifest_path.parent
                )
            except (OSError, subprocess.CalledProcessError) as e:
                raise HistoryEnumerationError(
                    f"{self.manifest_path.parent} is not inside a git repository"
                ) from e
            self._root = Path(toplevel.strip()).resolve()
        return self._root

    @property
    def relative_path(self) -> str:
        """Manifest path relative to the repository root, as git spells it."""
        return self.manifest_path.relative_to(self.root).as_posix()

    def list_commits_touching(self) -> list[str]:
        """Commits that touched the manifest, oldest first.

        Raises:
            HistoryEnumerationError: If git cannot list the history
        """
        try:
            output = self._run("rev-list", "--reverse", "HEAD", "--", self.relative_path)
        except (OSError, subprocess.CalledProcessError) as e:
            stderr = getattr(e, "stderr", "") or str(e)
            raise HistoryEnumerationError(
                f"Could not list commits for {self.relative_path}: {stderr.strip()}"
            ) from e

        commits = [line.strip() for line in output.splitlines() if line.strip()]
        logger.debug("Found %d commits touching %s", len(commits), self.relative_path)
        return commits

    def list_changed_paths_at_commit(self, commit: str) -> set[str]:
        """Paths changed by ``commit``; empty when git cannot tell."""
        try:
            output = self._run("show", "--format=", "--name-only", commit)
        except (OSError, subprocess.CalledProcessError) as e:
            logger.warning("Could not list changed paths at %s: %s", commit, e)
            return set()
        return {line.strip() for line in output.splitlines() if line.strip()}

    def touches_manifest(self, commit: str) -> bool:
        return self.relative_path in self.list_changed_paths_at_commit(commit)

    def read_file_at_commit(self, commit: str) -> str | None:
        """Manifest content at ``commit``, or None if it did not exist there."""
        try:
            return self._run("show", f"{commit}:{self.relative_path}")
        except (OSError, subprocess.CalledProcessError) as e:
            logger.warning("Could not read %s at %s: %s", self.relative_path, commit, e)
            return None

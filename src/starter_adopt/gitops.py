"""Git operations for hook installation."""

from __future__ import annotations

import logging
from pathlib import Path

from git import Repo
from git.exc import InvalidGitRepositoryError, NoSuchPathError

from starter_adopt.errors import NotAGitRepository

logger = logging.getLogger(__name__)


class GitOps:
    """Locates the hooks directory of a target repository."""

    @classmethod
    def create(cls) -> GitOps:
        """Create a git operations instance.

        Returns:
            Configured GitOps instance.
        """
        return cls()

    def open_repo(self, project_root: Path) -> Repo:
        """Open the repository whose working tree root is project_root.

        Parent directories are not searched: adopting into a subdirectory of
        a repository is not the same as adopting into the repository.

        Raises:
            NotAGitRepository: If project_root has no .git entry.
        """
        try:
            return Repo(project_root)
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            logger.debug("No repository at %s: %s", project_root, e)
            raise NotAGitRepository(project_root) from e

    def find_hooks_dir(self, project_root: Path) -> Path:
        """Get the hooks directory for the repository at project_root.

        Honours core.hooksPath (relative values resolve against the working
        tree); otherwise uses the hooks directory of the common git dir, so
        linked worktrees share the main repository's hooks.

        Args:
            project_root: Working tree root of the repository.

        Returns:
            Path to the hooks directory (it may not exist yet).

        Raises:
            NotAGitRepository: If project_root is not a repository root.
        """
        repo = self.open_repo(project_root)
        with repo.config_reader() as config:
            hooks_path = config.get_value("core", "hooksPath", default="")
        if hooks_path:
            configured = Path(str(hooks_path)).expanduser()
            if not configured.is_absolute():
                configured = project_root / configured
            logger.debug("Using core.hooksPath %s", configured)
            return configured
        return Path(repo.common_dir) / "hooks"

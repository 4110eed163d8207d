"""Existence checks for worktrees, re-derived from disk and git on every call."""

import os
from typing import TYPE_CHECKING, Optional

from git_phantom.core.naming import validate_name, worktree_path
from git_phantom.logging_config import get_logger
from git_phantom.models.errors import WorktreeAlreadyExists, WorktreeNotFound
from git_phantom.models.result import Err, Ok, Result
from git_phantom.models.worktree import Worktree

if TYPE_CHECKING:
    from git_phantom.services.git_backend import GitBackend

logger = get_logger(__name__)


class ValidationService:
    """Answers "does this worktree exist?" against the filesystem and the VCS."""

    def __init__(self, vcs: "GitBackend"):
        self.vcs = vcs

    def exists(self, git_root: str, name: str) -> bool:
        """True iff the directory exists AND git knows it as an attached worktree.

        An orphaned directory (no git record) or a dangling record (no
        directory) both count as absent.
        """
        if isinstance(validate_name(name), Err):
            return False

        path = worktree_path(git_root, name)
        if not os.path.isdir(path):
            return False

        attached = self.vcs.is_attached(git_root, path)
        if isinstance(attached, Err):
            logger.warning(f"Could not verify worktree '{name}': {attached.error.message}")
            return False
        if not attached.value:
            logger.debug(f"Directory {path} exists but is not a registered worktree")
        return attached.value

    def assert_exists(self, git_root: str, name: str) -> Result:
        """Ok(Worktree(name, path)) or Err(WorktreeNotFound)."""
        if not self.exists(git_root, name):
            return Err(WorktreeNotFound(name))
        return Ok(Worktree(name=name, path=worktree_path(git_root, name)))

    def assert_absent(self, git_root: str, name: str) -> Result:
        """Ok(None) when nothing occupies the target path.

        Stricter than ``not exists``: a leftover directory also blocks
        creation so it is never silently overwritten.
        """
        if os.path.lexists(worktree_path(git_root, name)):
            return Err(WorktreeAlreadyExists(name))
        return Ok(None)

    def current_worktree(self, git_root: str, cwd: str) -> Optional[str]:
        """Name of the worktree containing ``cwd``, or None outside any worktree."""
        name = self.vcs.current_worktree_name(git_root, cwd)
        if name is None or not self.exists(git_root, name):
            return None
        return name

"""Create, attach, delete and list managed worktrees."""

import os
import shutil
from typing import TYPE_CHECKING, Optional

from git_phantom.core.naming import validate_name, worktree_path, worktrees_directory
from git_phantom.core.validation import ValidationService
from git_phantom.logging_config import get_logger
from git_phantom.models.errors import (
    BranchAlreadyExists,
    BranchNotFound,
    UncommittedChanges,
    WorktreeBusy,
)
from git_phantom.models.result import Err, Ok, Result
from git_phantom.models.worktree import Worktree
from git_phantom.services.locking import worktree_lock

if TYPE_CHECKING:
    from git_phantom.services.git_backend import GitBackend

logger = get_logger(__name__)


class WorktreeLifecycle:
    """Worktree lifecycle operations.

    Every call starts from what is on disk and in git; no state is kept
    between calls. Mutations run under a per-name advisory lock, and the
    preconditions are checked again once the lock is held.
    """

    def __init__(self, vcs: "GitBackend", validation: Optional[ValidationService] = None):
        self.vcs = vcs
        self.validation = validation or ValidationService(vcs)

    def attach(self, git_root: str, name: str) -> Result:
        """Check out the existing branch ``name`` as worktree ``name``.

        Returns:
            Ok(path) or Err(InvalidName | WorktreeAlreadyExists | BranchNotFound
            | WorktreeBusy | VcsFailure)
        """
        checked = self._check_new_worktree(git_root, name, branch_must_exist=True)
        if isinstance(checked, Err):
            return checked

        path = worktree_path(git_root, name)
        with worktree_lock(git_root, name) as acquired:
            if not acquired:
                return Err(WorktreeBusy(name))
            absent = self.validation.assert_absent(git_root, name)
            if isinstance(absent, Err):
                return absent

            result = self.vcs.attach_worktree(git_root, path, name)
            if isinstance(result, Err):
                self._rollback(git_root, path)
                return result

        logger.info(f"Attached worktree '{name}' at {path}")
        return Ok(path)

    def create(self, git_root: str, name: str, base: Optional[str] = None) -> Result:
        """Create branch ``name`` from ``base`` (HEAD by default) in a new worktree.

        Returns:
            Ok(path) or Err(InvalidName | WorktreeAlreadyExists | BranchAlreadyExists
            | WorktreeBusy | VcsFailure)
        """
        checked = self._check_new_worktree(git_root, name, branch_must_exist=False)
        if isinstance(checked, Err):
            return checked

        path = worktree_path(git_root, name)
        with worktree_lock(git_root, name) as acquired:
            if not acquired:
                return Err(WorktreeBusy(name))
            absent = self.validation.assert_absent(git_root, name)
            if isinstance(absent, Err):
                return absent

            result = self.vcs.add_worktree(git_root, path, name, base or "HEAD")
            if isinstance(result, Err):
                self._rollback(git_root, path)
                return result

        logger.info(f"Created worktree '{name}' at {path}")
        return Ok(path)

    def delete(self, git_root: str, name: str, force: bool = False) -> Result:
        """Remove worktree ``name``; refuses a dirty worktree unless ``force``.

        Does not look at the caller's working directory; resolving "the
        current worktree" is the caller's job.

        Returns:
            Ok(confirmation message) or Err(WorktreeNotFound | UncommittedChanges
            | WorktreeBusy | VcsFailure)
        """
        found = self.validation.assert_exists(git_root, name)
        if isinstance(found, Err):
            return found

        with worktree_lock(git_root, name) as acquired:
            if not acquired:
                return Err(WorktreeBusy(name))
            found = self.validation.assert_exists(git_root, name)
            if isinstance(found, Err):
                return found
            path = found.value.path

            if not force:
                changes = self.vcs.changed_files(git_root, path)
                if isinstance(changes, Err):
                    return changes
                if changes.value:
                    logger.debug(f"Refusing to delete '{name}': {len(changes.value)} changed files")
                    return Err(UncommittedChanges(name, len(changes.value)))

            removed = self.vcs.detach_worktree(git_root, path, force=force)
            if isinstance(removed, Err):
                return removed

        logger.info(f"Deleted worktree '{name}'")
        return Ok(f"Deleted worktree '{name}'")

    def where(self, git_root: str, name: str) -> Result:
        """Ok(path) of an existing worktree, or Err(WorktreeNotFound)."""
        found = self.validation.assert_exists(git_root, name)
        if isinstance(found, Err):
            return found
        return Ok(found.value.path)

    def list_worktrees(self, git_root: str) -> Result:
        """All managed worktrees, sorted by name, with branch and clean status."""
        records = self.vcs.list_worktrees(git_root)
        if isinstance(records, Err):
            return records

        base = os.path.realpath(worktrees_directory(git_root))
        worktrees = []
        for record in records.value:
            path = os.path.realpath(record.path)
            if record.is_prunable or os.path.dirname(path) != base or not os.path.isdir(path):
                continue

            clean = self.vcs.is_clean(git_root, path)
            if isinstance(clean, Err):
                return clean
            name = os.path.basename(path)
            worktrees.append(Worktree(
                name=name,
                path=worktree_path(git_root, name),
                branch=record.branch_name,
                is_clean=clean.value,
            ))

        worktrees.sort(key=lambda wt: wt.name)
        return Ok(worktrees)

    def _check_new_worktree(self, git_root: str, name: str, branch_must_exist: bool) -> Result:
        """Read-only preconditions shared by attach and create."""
        valid = validate_name(name)
        if isinstance(valid, Err):
            return valid

        absent = self.validation.assert_absent(git_root, name)
        if isinstance(absent, Err):
            return absent

        exists = self.vcs.branch_exists(git_root, name)
        if isinstance(exists, Err):
            return exists
        if branch_must_exist and not exists.value:
            return Err(BranchNotFound(name))
        if not branch_must_exist and exists.value:
            return Err(BranchAlreadyExists(name))
        return Ok(None)

    def _rollback(self, git_root: str, path: str) -> None:
        """Undo a half-finished worktree add.

        The target was verified absent under the lock, so anything there now
        was left behind by the failed git call. Only that path is touched.
        """
        if not os.path.isdir(path):
            return

        logger.warning(f"Removing partially created worktree directory {path}")
        shutil.rmtree(path, ignore_errors=True)
        forgotten = self.vcs.forget_worktree(git_root, path)
        if isinstance(forgotten, Err):
            logger.warning(f"Could not remove worktree record for {path}: {forgotten.error.message}")

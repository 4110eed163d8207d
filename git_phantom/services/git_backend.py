"""Git backend for git-phantom, built on GitPython."""

import os
import re
import shutil
from typing import Any, Dict, List, Optional

import git

from git_phantom.constants import WORKTREES_SUBDIR
from git_phantom.exceptions import NotAGitRepositoryError
from git_phantom.logging_config import get_logger
from git_phantom.models.errors import VcsFailure
from git_phantom.models.result import Err, Ok, Result
from git_phantom.models.worktree import WorktreeRecord

logger = get_logger(__name__)

# GitCommandError.stderr arrives as "\n  stderr: '<text>'"
_STDERR_WRAPPER = re.compile(r"^\s*stderr: '(.*)'\s*$", re.DOTALL)


def git_stderr(error: git.exc.GitCommandError) -> str:
    """git's own stderr text, without GitPython's decoration."""
    stderr = (error.stderr if hasattr(error, "stderr") else str(error)) or ""
    match = _STDERR_WRAPPER.match(stderr)
    if match:
        stderr = match.group(1)
    return stderr.strip()


def _vcs_failure(operation: str, error: git.exc.GitCommandError) -> VcsFailure:
    """Build a VcsFailure that keeps git's stderr as-is."""
    stderr = git_stderr(error)
    status = error.status if hasattr(error, "status") else "unknown"

    if stderr:
        detail = stderr
    else:
        detail = f"exit code {status}"

    logger.error(f"git {operation} failed (exit {status}): {detail}")
    return VcsFailure(operation, detail)


def parse_worktree_porcelain(output: str) -> List[WorktreeRecord]:
    """Parse ``git worktree list --porcelain``.

    Entries are separated by blank lines:
    worktree /path/to/worktree
    HEAD commit_sha
    branch refs/heads/branch-name  (or "detached")
    prunable gitdir file points to non-existent location  (optional)
    """
    records: List[WorktreeRecord] = []
    current: Dict[str, Any] = {}

    def flush():
        if current.get("path"):
            records.append(
                WorktreeRecord(
                    path=current["path"],
                    branch_name=current.get("branch", ""),
                    is_prunable=current.get("prunable", False),
                )
            )

    for line in output.split("\n"):
        line = line.strip()
        if not line:
            flush()
            current = {}
            continue

        if line.startswith("worktree "):
            current["path"] = line.split(" ", 1)[1]
        elif line.startswith("branch "):
            branch_ref = line.split(" ", 1)[1]
            if branch_ref.startswith("refs/heads/"):
                current["branch"] = branch_ref[len("refs/heads/"):]
            else:
                current["branch"] = ""
        elif line == "detached":
            current["branch"] = ""
        elif line.startswith("prunable"):
            current["prunable"] = True

    # Last entry when there is no trailing blank line
    flush()
    return records


class GitBackend:
    """Version-control capability used by the worktree core.

    Every method opens a fresh ``git.Repo``; nothing about worktrees is cached.
    """

    def _get_repo(self, path: str) -> git.Repo:
        return git.Repo(path)

    def find_git_root(self, cwd: str) -> str:
        """Return the main worktree's top level for any directory inside the repository.

        Works from inside linked worktrees too, by way of the common git dir.

        Raises:
            NotAGitRepositoryError: cwd is not inside a git repository
        """
        try:
            repo = git.Repo(cwd, search_parent_directories=True)
        except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError) as e:
            raise NotAGitRepositoryError(cwd) from e

        common_dir = os.path.realpath(repo.common_dir)
        if os.path.basename(common_dir) != ".git":
            raise NotAGitRepositoryError(cwd, "bare repositories are not supported")
        root = os.path.dirname(common_dir)
        logger.debug(f"Resolved git root {root} from {cwd}")
        return root

    def branch_exists(self, git_root: str, branch: str) -> Result:
        try:
            repo = self._get_repo(git_root)
            repo.git.show_ref("--verify", "--quiet", f"refs/heads/{branch}")
            return Ok(True)
        except git.exc.GitCommandError as e:
            if e.status == 1:
                return Ok(False)
            return Err(_vcs_failure("show-ref", e))

    def attach_worktree(self, git_root: str, path: str, branch: str) -> Result:
        """Check out an existing branch at ``path``."""
        try:
            repo = self._get_repo(git_root)
            repo.git.worktree("add", path, branch)
            logger.info(f"Attached worktree at {path} to branch {branch}")
            return Ok(None)
        except git.exc.GitCommandError as e:
            return Err(_vcs_failure("worktree add", e))

    def add_worktree(self, git_root: str, path: str, branch: str, base: str = "HEAD") -> Result:
        """Create ``branch`` from ``base`` and check it out at ``path``."""
        try:
            repo = self._get_repo(git_root)
            repo.git.worktree("add", "-b", branch, path, base)
            logger.info(f"Created worktree at {path} on new branch {branch} from {base}")
            return Ok(None)
        except git.exc.GitCommandError as e:
            return Err(_vcs_failure("worktree add", e))

    def detach_worktree(self, git_root: str, path: str, force: bool = False) -> Result:
        """Remove the worktree directory and its administrative record."""
        try:
            repo = self._get_repo(git_root)
            args = ["remove", path]
            if force:
                args.append("--force")
            repo.git.worktree(*args)
            logger.info(f"Removed worktree at {path}")
            return Ok(None)
        except git.exc.GitCommandError as e:
            return Err(_vcs_failure("worktree remove", e))

    def forget_worktree(self, git_root: str, path: str) -> Result:
        """Drop git's administrative record for ``path`` only.

        Used after the directory has been removed by hand. Records of other
        worktrees are left alone even when their directories are missing.

        Returns:
            Ok(True) if a record was removed, Ok(False) if there was none
        """
        try:
            repo = self._get_repo(git_root)
            admin_root = os.path.join(repo.common_dir, "worktrees")
        except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError) as e:
            return Err(VcsFailure("worktree record lookup", str(e)))

        if not os.path.isdir(admin_root):
            return Ok(False)

        target = os.path.realpath(path)
        for entry in sorted(os.listdir(admin_root)):
            admin_dir = os.path.join(admin_root, entry)
            try:
                with open(os.path.join(admin_dir, "gitdir"), encoding="utf-8") as f:
                    recorded = f.read().strip()
            except OSError:
                continue
            if os.path.realpath(os.path.dirname(recorded)) != target:
                continue

            try:
                shutil.rmtree(admin_dir)
            except OSError as e:
                return Err(VcsFailure("worktree record removal", e.strerror or str(e)))
            logger.info(f"Removed worktree record {entry} for {path}")
            return Ok(True)

        return Ok(False)

    def changed_files(self, git_root: str, path: str) -> Result:
        """List the porcelain status lines of a worktree (untracked files included)."""
        try:
            repo = self._get_repo(git_root)
            status = repo.git.execute(["git", "-C", path, "status", "--porcelain"])
            return Ok([line for line in status.split("\n") if line.strip()])
        except git.exc.GitCommandError as e:
            return Err(_vcs_failure("status", e))

    def is_clean(self, git_root: str, path: str) -> Result:
        result = self.changed_files(git_root, path)
        if isinstance(result, Err):
            return result
        return Ok(not result.value)

    def list_worktrees(self, git_root: str) -> Result:
        try:
            repo = self._get_repo(git_root)
            output = repo.git.worktree("list", "--porcelain")
        except git.exc.GitCommandError as e:
            return Err(_vcs_failure("worktree list", e))

        records = parse_worktree_porcelain(output)
        logger.debug(f"Found {len(records)} worktree records")
        return Ok(records)

    def is_attached(self, git_root: str, path: str) -> Result:
        """True when git has a (non-prunable) worktree record for ``path``."""
        result = self.list_worktrees(git_root)
        if isinstance(result, Err):
            return result
        target = os.path.realpath(path)
        return Ok(any(
            os.path.realpath(record.path) == target and not record.is_prunable
            for record in result.value
        ))

    def current_worktree_name(self, git_root: str, cwd: str) -> Optional[str]:
        """Name of the managed worktree containing ``cwd``, if any."""
        try:
            toplevel = git.Repo(cwd, search_parent_directories=True).working_tree_dir
        except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError):
            return None
        if not toplevel:
            return None

        worktrees_dir = os.path.realpath(os.path.join(git_root, WORKTREES_SUBDIR))
        toplevel = os.path.realpath(toplevel)
        if os.path.dirname(toplevel) != worktrees_dir:
            return None
        return os.path.basename(toplevel)

"""Post-create and post-delete hooks."""

import os
import shutil
from typing import TYPE_CHECKING, Mapping, Optional, Sequence

from git_phantom.config import HookSet
from git_phantom.core.execution import phantom_env, user_shell
from git_phantom.core.naming import worktree_path
from git_phantom.logging_config import get_logger
from git_phantom.models.errors import HookCommandFailed, HookCopyFailed
from git_phantom.models.execution import ExecutionRequest
from git_phantom.models.result import Err, Ok, Result

if TYPE_CHECKING:
    from git_phantom.services.process_backend import SubprocessBackend

logger = get_logger(__name__)


class HookRunner:
    """Runs a HookSet: file copies first, then commands in order.

    The first failure stops the sequence. Nothing can be interrupted in the
    middle of a command; a command that dies from Ctrl-C simply fails.
    """

    def __init__(self, process: "SubprocessBackend"):
        self.process = process

    def run_hooks(
        self,
        git_root: str,
        worktree_name: str,
        hook_set: HookSet,
        env: Mapping[str, str],
        cwd: Optional[str] = None,
    ) -> Result:
        """Run ``hook_set`` for ``worktree_name``.

        Args:
            git_root: Repository root, source of copied files
            worktree_name: Worktree the hooks belong to
            hook_set: Files to copy and commands to run
            env: Caller's environment snapshot
            cwd: Working directory for commands; the worktree by default.
                Post-delete hooks pass the repository root since the
                worktree is gone.

        Returns:
            Ok(None), or Err(HookCopyFailed | HookCommandFailed | ProcessSpawnError)
        """
        path = worktree_path(git_root, worktree_name)

        copied = self.copy_files(git_root, path, hook_set.copy_files)
        if isinstance(copied, Err):
            return copied

        shell = user_shell(env)
        child_env = {**env, **phantom_env(worktree_name, path)}
        for command in hook_set.commands:
            logger.info(f"Running hook command: {command}")
            result = self.process.spawn(ExecutionRequest(
                command=shell,
                args=("-c", command),
                cwd=cwd or path,
                env=child_env,
                interactive=False,
            ))
            if isinstance(result, Err):
                return result
            if result.value != 0:
                logger.error(f"Hook command exited with code {result.value}: {command}")
                return Err(HookCommandFailed(command, result.value))

        return Ok(None)

    def copy_files(self, git_root: str, target: str, files: Sequence[str]) -> Result:
        """Copy repository-relative paths into ``target``.

        A missing source aborts the hook run.
        """
        for relative in files:
            source = os.path.join(git_root, relative)
            destination = os.path.join(target, relative)
            if not os.path.exists(source):
                return Err(HookCopyFailed(relative, "source does not exist"))

            try:
                os.makedirs(os.path.dirname(destination), exist_ok=True)
                if os.path.isdir(source):
                    shutil.copytree(source, destination, dirs_exist_ok=True)
                else:
                    shutil.copy2(source, destination)
            except OSError as e:
                return Err(HookCopyFailed(relative, e.strerror or str(e)))
            logger.info(f"Copied {relative}")

        return Ok(None)

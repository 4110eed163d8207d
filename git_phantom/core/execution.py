"""Run shells and commands inside a worktree."""

from typing import TYPE_CHECKING, Dict, Mapping, Optional, Sequence

from git_phantom.constants import DEFAULT_SHELL, ENV_ACTIVE, ENV_NAME, ENV_PATH, PaneDirection
from git_phantom.core.validation import ValidationService
from git_phantom.logging_config import get_logger
from git_phantom.models.execution import ExecutionRequest
from git_phantom.models.result import Err, Result

if TYPE_CHECKING:
    from git_phantom.services.process_backend import SubprocessBackend
    from git_phantom.services.tmux_backend import TmuxBackend

logger = get_logger(__name__)


def phantom_env(name: str, path: str) -> Dict[str, str]:
    """Variables that tell a child process which worktree it runs in."""
    return {
        ENV_ACTIVE: "1",
        ENV_NAME: name,
        ENV_PATH: path,
    }


def user_shell(env: Mapping[str, str]) -> str:
    return env.get("SHELL") or DEFAULT_SHELL


class ExecutionBridge:
    """Spawns processes with a worktree as working directory.

    A child's exit code, zero or not, comes back as Ok(code). Err is only
    for a missing worktree or a process that could not be started.
    """

    def __init__(
        self,
        validation: ValidationService,
        process: "SubprocessBackend",
        multiplexer: Optional["TmuxBackend"] = None,
    ):
        self.validation = validation
        self.process = process
        self.multiplexer = multiplexer

    def enter_shell(self, git_root: str, name: str, env: Mapping[str, str]) -> Result:
        """Start the user's interactive shell in worktree ``name``.

        Args:
            git_root: Repository root
            name: Worktree name
            env: Snapshot of the caller's environment
        """
        found = self.validation.assert_exists(git_root, name)
        if isinstance(found, Err):
            return found
        path = found.value.path

        request = ExecutionRequest(
            command=user_shell(env),
            cwd=path,
            env={**env, **phantom_env(name, path)},
            interactive=True,
        )
        logger.info(f"Entering shell {request.command} in {path}")
        return self.process.spawn(request)

    def exec_in(
        self,
        git_root: str,
        name: str,
        command: Sequence[str],
        env: Mapping[str, str],
        interactive: bool = False,
    ) -> Result:
        """Run ``command`` (argv form) in worktree ``name``.

        Non-interactive runs get no stdin; stdout and stderr go to the
        caller's terminal either way.
        """
        if not command:
            raise ValueError("command cannot be empty")

        found = self.validation.assert_exists(git_root, name)
        if isinstance(found, Err):
            return found
        path = found.value.path

        request = ExecutionRequest(
            command=command[0],
            args=tuple(command[1:]),
            cwd=path,
            env={**env, **phantom_env(name, path)},
            interactive=interactive,
        )
        logger.info(f"Executing {request.argv} in {path}")
        return self.process.spawn(request)

    def open_in_multiplexer(
        self,
        git_root: str,
        name: str,
        direction: str,
        env: Mapping[str, str],
        command: Optional[str] = None,
    ) -> Result:
        """Open the worktree in a new tmux window or pane.

        ``command`` is a shell command line; the user's shell when omitted.
        """
        if self.multiplexer is None:
            raise ValueError("no multiplexer backend configured")

        found = self.validation.assert_exists(git_root, name)
        if isinstance(found, Err):
            return found
        path = found.value.path

        window_name = name if direction == PaneDirection.NEW else None
        return self.multiplexer.open_pane(
            direction,
            command or user_shell(env),
            path,
            phantom_env(name, path),
            window_name,
        )

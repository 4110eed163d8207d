"""tmux integration for opening worktrees in new windows or panes."""

import subprocess
from typing import Mapping, Optional

from git_phantom.constants import PaneDirection, TMUX_DIRECTION_ARGS
from git_phantom.logging_config import get_logger
from git_phantom.models.errors import ProcessSpawnError
from git_phantom.models.result import Err, Ok, Result

logger = get_logger(__name__)


class TmuxBackend:
    """Multiplexer capability backed by the tmux CLI."""

    def is_available(self, env: Mapping[str, str]) -> bool:
        """True when the caller runs inside a tmux session."""
        return bool(env.get("TMUX"))

    def build_command(
        self,
        direction: str,
        command: str,
        cwd: str,
        env: Mapping[str, str],
        window_name: Optional[str] = None,
    ) -> list:
        if direction not in TMUX_DIRECTION_ARGS:
            raise ValueError(f"Unknown pane direction: {direction}")

        argv = ["tmux", *TMUX_DIRECTION_ARGS[direction], "-c", cwd]
        for key, value in env.items():
            argv.extend(["-e", f"{key}={value}"])
        if window_name and direction == PaneDirection.NEW:
            argv.extend(["-n", window_name])
        argv.append(command)
        return argv

    def open_pane(
        self,
        direction: str,
        command: str,
        cwd: str,
        env: Mapping[str, str],
        window_name: Optional[str] = None,
    ) -> Result:
        """Open ``command`` in a new tmux window/pane.

        Args:
            direction: One of PaneDirection
            command: Shell command line tmux runs in the pane
            cwd: Working directory of the pane
            env: Variables to set in the pane (only the overrides, tmux
                provides the rest of the session environment)
            window_name: Name for a new window

        Returns:
            Ok(0), or Err(ProcessSpawnError) carrying tmux's exit code if any
        """
        argv = self.build_command(direction, command, cwd, env, window_name)
        logger.debug(f"Running {argv}")
        try:
            completed = subprocess.run(argv, capture_output=True, text=True)
        except OSError as e:
            return Err(ProcessSpawnError("tmux", e.strerror or str(e)))

        if completed.returncode != 0:
            detail = completed.stderr.strip() or f"tmux exited with code {completed.returncode}"
            logger.error(f"tmux failed: {detail}")
            return Err(ProcessSpawnError("tmux", detail, exit_code=completed.returncode))
        return Ok(0)

"""Backends the worktree core delegates to."""

from .git_backend import GitBackend
from .process_backend import SubprocessBackend
from .tmux_backend import TmuxBackend

__all__ = [
    "GitBackend",
    "SubprocessBackend",
    "TmuxBackend",
]

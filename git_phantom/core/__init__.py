"""Worktree lifecycle core for git-phantom."""

from .naming import validate_name, worktree_path, worktrees_directory
from .validation import ValidationService
from .lifecycle import WorktreeLifecycle
from .execution import ExecutionBridge, phantom_env
from .hooks import HookRunner

__all__ = [
    "validate_name",
    "worktree_path",
    "worktrees_directory",
    "ValidationService",
    "WorktreeLifecycle",
    "ExecutionBridge",
    "phantom_env",
    "HookRunner",
]

"""
git-phantom - named git worktrees you can create, enter and throw away
"""

from .__version__ import __version__
from .core import ExecutionBridge, HookRunner, ValidationService, WorktreeLifecycle

__all__ = [
    "ExecutionBridge",
    "HookRunner",
    "ValidationService",
    "WorktreeLifecycle",
    "__version__",
]

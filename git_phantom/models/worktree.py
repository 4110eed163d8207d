"""Worktree data models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Worktree:
    """A managed worktree as found on disk at the time of the query."""

    name: str
    path: str
    branch: str = ""  # Empty for detached HEAD or when not looked up
    is_clean: bool = True


@dataclass(frozen=True)
class WorktreeRecord:
    """One entry of ``git worktree list --porcelain``."""

    path: str
    branch_name: str
    is_prunable: bool = False  # Directory missing?

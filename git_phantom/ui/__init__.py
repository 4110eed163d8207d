"""Terminal UI components for git-phantom."""

from .selector import WorktreeSelectorApp, fuzzy_match, select_worktree

__all__ = ["WorktreeSelectorApp", "fuzzy_match", "select_worktree"]

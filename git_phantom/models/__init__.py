"""Data models for git-phantom."""

from .result import Ok, Err, Result, is_ok, is_err
from .worktree import Worktree, WorktreeRecord
from .execution import ExecutionRequest
from .errors import ErrorKind, WorktreeFailure

__all__ = [
    "Ok",
    "Err",
    "Result",
    "is_ok",
    "is_err",
    "Worktree",
    "WorktreeRecord",
    "ExecutionRequest",
    "ErrorKind",
    "WorktreeFailure",
]

"""Typed failure values for worktree operations.

``WorktreeFailure`` is a closed union: each variant is a small frozen
dataclass tagged with its ``ErrorKind`` and carrying only what its message
needs. Callers dispatch on ``error.kind``.
"""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional, Union


class ErrorKind(Enum):
    """Every way a worktree operation can fail."""
    INVALID_NAME = "invalid-name"
    WORKTREE_NOT_FOUND = "worktree-not-found"
    WORKTREE_ALREADY_EXISTS = "worktree-already-exists"
    WORKTREE_BUSY = "worktree-busy"
    BRANCH_NOT_FOUND = "branch-not-found"
    BRANCH_ALREADY_EXISTS = "branch-already-exists"
    UNCOMMITTED_CHANGES = "uncommitted-changes"
    VCS_FAILURE = "vcs-failure"
    PROCESS_SPAWN_ERROR = "process-spawn-error"
    HOOK_COMMAND_FAILED = "hook-command-failed"
    HOOK_COPY_FAILED = "hook-copy-failed"


@dataclass(frozen=True)
class InvalidName:
    name: str
    reason: str
    kind: ClassVar[ErrorKind] = ErrorKind.INVALID_NAME

    @property
    def message(self) -> str:
        return f"Invalid worktree name: '{self.name}' ({self.reason})"


@dataclass(frozen=True)
class WorktreeNotFound:
    name: str
    kind: ClassVar[ErrorKind] = ErrorKind.WORKTREE_NOT_FOUND

    @property
    def message(self) -> str:
        return f"Worktree '{self.name}' not found"


@dataclass(frozen=True)
class WorktreeAlreadyExists:
    name: str
    kind: ClassVar[ErrorKind] = ErrorKind.WORKTREE_ALREADY_EXISTS

    @property
    def message(self) -> str:
        return f"Worktree '{self.name}' already exists"


@dataclass(frozen=True)
class WorktreeBusy:
    """Another invocation holds the lock for this worktree name."""
    name: str
    kind: ClassVar[ErrorKind] = ErrorKind.WORKTREE_BUSY

    @property
    def message(self) -> str:
        return f"Worktree '{self.name}' is being modified by another phantom process"


@dataclass(frozen=True)
class BranchNotFound:
    branch: str
    kind: ClassVar[ErrorKind] = ErrorKind.BRANCH_NOT_FOUND

    @property
    def message(self) -> str:
        return f"Branch '{self.branch}' not found"


@dataclass(frozen=True)
class BranchAlreadyExists:
    branch: str
    kind: ClassVar[ErrorKind] = ErrorKind.BRANCH_ALREADY_EXISTS

    @property
    def message(self) -> str:
        return f"Branch '{self.branch}' already exists (use 'phantom attach' to use it)"


@dataclass(frozen=True)
class UncommittedChanges:
    name: str
    changed_files: int
    kind: ClassVar[ErrorKind] = ErrorKind.UNCOMMITTED_CHANGES

    @property
    def message(self) -> str:
        return (
            f"Worktree '{self.name}' has uncommitted changes ({self.changed_files} files). "
            "Use --force to delete anyway."
        )


@dataclass(frozen=True)
class VcsFailure:
    """The git backend failed; ``detail`` is git's own diagnostic, unaltered."""
    operation: str
    detail: str
    kind: ClassVar[ErrorKind] = ErrorKind.VCS_FAILURE

    @property
    def message(self) -> str:
        return f"git {self.operation} failed: {self.detail}"


@dataclass(frozen=True)
class ProcessSpawnError:
    command: str
    detail: str
    exit_code: Optional[int] = None
    kind: ClassVar[ErrorKind] = ErrorKind.PROCESS_SPAWN_ERROR

    @property
    def message(self) -> str:
        return f"Error executing command '{self.command}': {self.detail}"


@dataclass(frozen=True)
class HookCommandFailed:
    command: str
    exit_code: int
    kind: ClassVar[ErrorKind] = ErrorKind.HOOK_COMMAND_FAILED

    @property
    def message(self) -> str:
        return f"Hook command failed with exit code {self.exit_code}: {self.command}"


@dataclass(frozen=True)
class HookCopyFailed:
    file: str
    reason: str
    kind: ClassVar[ErrorKind] = ErrorKind.HOOK_COPY_FAILED

    @property
    def message(self) -> str:
        return f"Failed to copy '{self.file}': {self.reason}"


WorktreeFailure = Union[
    InvalidName,
    WorktreeNotFound,
    WorktreeAlreadyExists,
    WorktreeBusy,
    BranchNotFound,
    BranchAlreadyExists,
    UncommittedChanges,
    VcsFailure,
    ProcessSpawnError,
    HookCommandFailed,
    HookCopyFailed,
]

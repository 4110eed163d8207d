"""Shared constants for git-phantom."""

from typing import Dict, FrozenSet

# Layout under the repository root
PHANTOM_DIR = ".git/phantom"
WORKTREES_SUBDIR = f"{PHANTOM_DIR}/worktrees"
LOCKS_SUBDIR = f"{PHANTOM_DIR}/locks"

CONFIG_FILENAME = "phantom.config.json"

# Environment overrides injected into every spawned shell/command
ENV_ACTIVE = "PHANTOM"
ENV_NAME = "PHANTOM_NAME"
ENV_PATH = "PHANTOM_PATH"

DEFAULT_SHELL = "/bin/sh"

# Tokens that can never be used as a worktree name
RESERVED_NAMES: FrozenSet[str] = frozenset({".", "..", "HEAD", "@"})
FORBIDDEN_NAME_CHARS = set('/\\:*?"<>|')
MAX_NAME_BYTES = 255


class ExitCode:
    """Process exit codes used by the CLI."""

    SUCCESS = 0
    GENERAL_ERROR = 1
    NOT_FOUND = 2
    VALIDATION_ERROR = 3


class PaneDirection:
    """Where the multiplexer opens the worktree."""

    NEW = "new"
    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"


TMUX_DIRECTION_ARGS: Dict[str, list] = {
    PaneDirection.NEW: ["new-window"],
    PaneDirection.VERTICAL: ["split-window", "-v"],
    PaneDirection.HORIZONTAL: ["split-window", "-h"],
}

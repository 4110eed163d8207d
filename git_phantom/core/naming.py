"""Worktree name validation and name-to-path mapping."""

import os

from git_phantom.constants import FORBIDDEN_NAME_CHARS, MAX_NAME_BYTES, RESERVED_NAMES, WORKTREES_SUBDIR
from git_phantom.models.errors import InvalidName
from git_phantom.models.result import Err, Ok, Result


def validate_name(name: str) -> Result:
    """Return Ok(name) if ``name`` can be used as a worktree directory name."""
    if not name or not name.strip():
        return Err(InvalidName(name, "name cannot be empty"))
    if name != name.strip():
        return Err(InvalidName(name, "name cannot start or end with whitespace"))
    if name in RESERVED_NAMES:
        return Err(InvalidName(name, "name is reserved"))
    if ".." in name:
        return Err(InvalidName(name, "name cannot contain '..'"))
    bad = sorted(c for c in set(name) if c in FORBIDDEN_NAME_CHARS)
    if bad:
        return Err(InvalidName(name, f"name cannot contain {' '.join(repr(c) for c in bad)}"))
    if any(ord(c) < 32 or ord(c) == 127 for c in name):
        return Err(InvalidName(name, "name cannot contain control characters"))
    if name.startswith("-"):
        return Err(InvalidName(name, "name cannot start with '-'"))
    if len(name.encode("utf-8")) > MAX_NAME_BYTES:
        return Err(InvalidName(name, f"name is longer than {MAX_NAME_BYTES} bytes"))
    return Ok(name)


def worktrees_directory(git_root: str) -> str:
    return os.path.join(git_root, WORKTREES_SUBDIR)


def worktree_path(git_root: str, name: str) -> str:
    """Deterministic location of worktree ``name``: <root>/.git/phantom/worktrees/<name>."""
    return os.path.join(worktrees_directory(git_root), name)

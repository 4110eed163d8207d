"""Custom exceptions for git-phantom.

Expected worktree failures are returned as values (see ``models.errors``).
Exceptions are left for repository discovery and the configuration loader.
"""

from typing import Optional


class PhantomError(Exception):
    """Base exception for all git-phantom errors."""
    pass


class NotAGitRepositoryError(PhantomError):
    """Exception raised when the working directory is not inside a git repository."""

    def __init__(self, path: str, message: Optional[str] = None):
        self.path = path
        self.message = message

        error_msg = f"Not a git repository: '{path}'"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class ConfigError(PhantomError):
    """Base exception for configuration loading problems."""
    pass


class ConfigNotFoundError(ConfigError):
    """Exception raised when the configuration file does not exist."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Configuration file not found: {path}")


class ConfigParseError(ConfigError):
    """Exception raised when the configuration file is not valid JSON."""

    def __init__(self, path: str, message: str):
        self.path = path
        self.message = message
        super().__init__(f"Failed to parse {path}: {message}")


class ConfigValidationError(ConfigError):
    """Exception raised when the configuration has the wrong shape."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(f"Invalid phantom.config.json: {message}")

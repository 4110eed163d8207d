"""Configuration handling for git-phantom"""

import json
import os
from dataclasses import dataclass, field
from pathlib import PurePath
from typing import Any, Tuple

from git_phantom.constants import CONFIG_FILENAME
from git_phantom.exceptions import ConfigNotFoundError, ConfigParseError, ConfigValidationError
from git_phantom.logging_config import get_logger

logger = get_logger(__name__)


def _string_tuple(value: Any, key: str) -> Tuple[str, ...]:
    if not isinstance(value, list):
        raise ConfigValidationError(f"{key} must be an array")
    if not all(isinstance(item, str) for item in value):
        raise ConfigValidationError(f"{key} must contain only strings")
    return tuple(value)


@dataclass(frozen=True)
class HookSet:
    """Hooks to run after a lifecycle operation, in declared order."""

    copy_files: Tuple[str, ...] = ()
    commands: Tuple[str, ...] = ()

    def __post_init__(self):
        """Validate copy paths stay inside the repository."""
        for path in self.copy_files:
            if not path.strip():
                raise ConfigValidationError("copyFiles entries cannot be empty")
            pure = PurePath(path)
            if pure.is_absolute() or os.path.isabs(path):
                raise ConfigValidationError(f"copyFiles entry must be relative: '{path}'")
            if ".." in pure.parts:
                raise ConfigValidationError(f"copyFiles entry cannot leave the repository: '{path}'")

    @property
    def is_empty(self) -> bool:
        return not self.copy_files and not self.commands


@dataclass(frozen=True)
class PhantomConfig:
    """Parsed contents of phantom.config.json."""

    post_create: HookSet = field(default_factory=HookSet)
    post_delete: HookSet = field(default_factory=HookSet)

    @classmethod
    def from_dict(cls, config_dict: Any) -> "PhantomConfig":
        """Create PhantomConfig from the decoded JSON document.

        Unknown keys are ignored.
        """
        if not isinstance(config_dict, dict):
            raise ConfigValidationError("Configuration must be an object")

        post_create = HookSet()
        if config_dict.get("postCreate") is not None:
            section = config_dict["postCreate"]
            if not isinstance(section, dict):
                raise ConfigValidationError("postCreate must be an object")
            post_create = HookSet(
                copy_files=_string_tuple(section.get("copyFiles", []), "postCreate.copyFiles"),
                commands=_string_tuple(section.get("commands", []), "postCreate.commands"),
            )

        post_delete = HookSet()
        if config_dict.get("postDelete") is not None:
            section = config_dict["postDelete"]
            if not isinstance(section, dict):
                raise ConfigValidationError("postDelete must be an object")
            post_delete = HookSet(
                commands=_string_tuple(section.get("commands", []), "postDelete.commands"),
            )

        return cls(post_create=post_create, post_delete=post_delete)


def load_config(git_root: str) -> PhantomConfig:
    """Load phantom.config.json from the repository root.

    Raises:
        ConfigNotFoundError: The file does not exist
        ConfigParseError: The file is not valid JSON
        ConfigValidationError: The JSON does not match the expected schema
    """
    config_path = os.path.join(git_root, CONFIG_FILENAME)
    try:
        with open(config_path, encoding="utf-8") as f:
            raw = f.read()
    except FileNotFoundError:
        raise ConfigNotFoundError(config_path) from None

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigParseError(config_path, str(e)) from e

    config = PhantomConfig.from_dict(data)
    logger.debug(
        f"Loaded config from {config_path}: {len(config.post_create.commands)} post-create "
        f"commands, {len(config.post_delete.commands)} post-delete commands"
    )
    return config

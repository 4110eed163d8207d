"""Tests for configuration loading and validation"""
import json

import pytest

from git_phantom.config import HookSet, PhantomConfig, load_config
from git_phantom.exceptions import ConfigNotFoundError, ConfigParseError, ConfigValidationError


def _write(root, data):
    path = root / "phantom.config.json"
    path.write_text(data if isinstance(data, str) else json.dumps(data))
    return path


class TestLoadConfig:
    """Test reading phantom.config.json."""

    def test_missing_file(self, temp_dir):
        with pytest.raises(ConfigNotFoundError):
            load_config(str(temp_dir))

    def test_invalid_json(self, temp_dir):
        _write(temp_dir, "{not json")
        with pytest.raises(ConfigParseError, match="Failed to parse"):
            load_config(str(temp_dir))

    def test_full_config(self, temp_dir):
        _write(temp_dir, {
            "postCreate": {"copyFiles": [".env", "config/local.json"], "commands": ["npm install"]},
            "postDelete": {"commands": ["echo bye"]},
        })

        config = load_config(str(temp_dir))

        assert config.post_create == HookSet(copy_files=(".env", "config/local.json"), commands=("npm install",))
        assert config.post_delete == HookSet(commands=("echo bye",))

    def test_empty_object(self, temp_dir):
        _write(temp_dir, {})
        config = load_config(str(temp_dir))
        assert config == PhantomConfig()
        assert config.post_create.is_empty
        assert config.post_delete.is_empty

    def test_unknown_keys_ignored(self, temp_dir):
        _write(temp_dir, {"postCreate": {"commands": ["make"]}, "somethingElse": True})
        assert load_config(str(temp_dir)).post_create.commands == ("make",)


class TestValidation:
    """Test shape validation."""

    @pytest.mark.parametrize("data, message", [
        ([], "Configuration must be an object"),
        ("text", "Configuration must be an object"),
        ({"postCreate": []}, "postCreate must be an object"),
        ({"postDelete": "x"}, "postDelete must be an object"),
        ({"postCreate": {"copyFiles": ".env"}}, "postCreate.copyFiles must be an array"),
        ({"postCreate": {"copyFiles": [1]}}, "postCreate.copyFiles must contain only strings"),
        ({"postCreate": {"commands": "make"}}, "postCreate.commands must be an array"),
        ({"postCreate": {"commands": [None]}}, "postCreate.commands must contain only strings"),
        ({"postDelete": {"commands": [["a"]]}}, "postDelete.commands must contain only strings"),
    ])
    def test_invalid_shapes(self, data, message):
        with pytest.raises(ConfigValidationError) as exc_info:
            PhantomConfig.from_dict(data)
        assert exc_info.value.message == message
        assert str(exc_info.value) == f"Invalid phantom.config.json: {message}"

    @pytest.mark.parametrize("path", ["/etc/passwd", "../outside", "a/../../b", ""])
    def test_copy_paths_must_stay_in_repository(self, path):
        with pytest.raises(ConfigValidationError):
            HookSet(copy_files=(path,))

    def test_invalid_file_raises_validation_error(self, temp_dir):
        _write(temp_dir, {"postCreate": {"commands": "make"}})
        with pytest.raises(ConfigValidationError):
            load_config(str(temp_dir))

    def test_null_sections_mean_absent(self):
        assert PhantomConfig.from_dict({"postCreate": None, "postDelete": None}) == PhantomConfig()

"""Tests for HookRunner"""
import os
from pathlib import Path

import pytest

from git_phantom.config import HookSet
from git_phantom.core import HookRunner
from git_phantom.core.naming import worktree_path
from git_phantom.models.errors import HookCommandFailed, HookCopyFailed, ProcessSpawnError
from git_phantom.models.result import Err, Ok


@pytest.fixture
def fake_root(temp_dir):
    """A repository-shaped directory with one worktree directory in place."""
    root = temp_dir / "repo"
    os.makedirs(worktree_path(str(root), "feature"))
    return root


class TestCommandOrdering:
    """Test sequential execution and short-circuiting."""

    def test_stops_at_first_failure(self, mock_process):
        mock_process.spawn.side_effect = [Ok(0), Ok(1), Ok(0)]
        runner = HookRunner(mock_process)
        hooks = HookSet(commands=("true", "false", "true"))

        result = runner.run_hooks("/repo", "feature", hooks, {"SHELL": "/bin/sh"})

        assert result == Err(HookCommandFailed("false", 1))
        assert mock_process.spawn.call_count == 2
        issued = [call[0][0].args for call in mock_process.spawn.call_args_list]
        assert issued == [("-c", "true"), ("-c", "false")]

    def test_real_commands_stop_after_failure(self, fake_root, hook_runner, base_env):
        hooks = HookSet(commands=("touch one", "exit 3", "touch three"))

        result = hook_runner.run_hooks(str(fake_root), "feature", hooks, base_env)

        assert result == Err(HookCommandFailed("exit 3", 3))
        assert result.error.message == "Hook command failed with exit code 3: exit 3"
        wt = Path(worktree_path(str(fake_root), "feature"))
        assert (wt / "one").exists()
        assert not (wt / "three").exists()

    def test_all_succeed(self, fake_root, hook_runner, base_env):
        hooks = HookSet(commands=("echo a >> log", "echo b >> log"))

        assert hook_runner.run_hooks(str(fake_root), "feature", hooks, base_env) == Ok(None)

        log = Path(worktree_path(str(fake_root), "feature"), "log").read_text()
        assert log == "a\nb\n"

    def test_commands_see_worktree_env(self, fake_root, hook_runner, base_env):
        hooks = HookSet(commands=('printf "%s %s" "$PHANTOM" "$PHANTOM_NAME" > env.txt',))

        hook_runner.run_hooks(str(fake_root), "feature", hooks, base_env)

        assert Path(worktree_path(str(fake_root), "feature"), "env.txt").read_text() == "1 feature"

    def test_custom_cwd(self, fake_root, hook_runner, base_env):
        hooks = HookSet(commands=("touch ran-here",))

        hook_runner.run_hooks(str(fake_root), "feature", hooks, base_env, cwd=str(fake_root))

        assert (fake_root / "ran-here").exists()

    def test_spawn_error_stops_sequence(self, mock_process):
        error = ProcessSpawnError("/bin/zsh", "No such file or directory")
        mock_process.spawn.return_value = Err(error)
        runner = HookRunner(mock_process)

        result = runner.run_hooks("/repo", "feature", HookSet(commands=("a", "b")), {"SHELL": "/bin/zsh"})

        assert result.error is error
        assert mock_process.spawn.call_count == 1

    def test_uses_user_shell(self, mock_process):
        runner = HookRunner(mock_process)
        runner.run_hooks("/repo", "feature", HookSet(commands=("ls",)), {"SHELL": "/bin/bash"})

        request = mock_process.spawn.call_args[0][0]
        assert request.command == "/bin/bash"
        assert request.interactive is False
        assert request.cwd == worktree_path("/repo", "feature")

    def test_empty_hook_set(self, mock_process):
        runner = HookRunner(mock_process)
        assert runner.run_hooks("/repo", "feature", HookSet(), {}) == Ok(None)
        mock_process.spawn.assert_not_called()


class TestCopyFiles:
    """Test file copy instructions."""

    def test_copies_before_commands(self, fake_root, hook_runner, base_env):
        (fake_root / ".env").write_text("SECRET=1\n")
        hooks = HookSet(copy_files=(".env",), commands=("cat .env > seen.txt",))

        assert hook_runner.run_hooks(str(fake_root), "feature", hooks, base_env) == Ok(None)

        wt = Path(worktree_path(str(fake_root), "feature"))
        assert (wt / ".env").read_text() == "SECRET=1\n"
        assert (wt / "seen.txt").read_text() == "SECRET=1\n"

    def test_nested_file_and_directory(self, fake_root, hook_runner, base_env):
        (fake_root / "config" / "local").mkdir(parents=True)
        (fake_root / "config" / "local" / "settings.json").write_text("{}")
        (fake_root / "assets").mkdir()
        (fake_root / "assets" / "logo.txt").write_text("logo")
        hooks = HookSet(copy_files=("config/local/settings.json", "assets"))

        assert hook_runner.run_hooks(str(fake_root), "feature", hooks, base_env) == Ok(None)

        wt = Path(worktree_path(str(fake_root), "feature"))
        assert (wt / "config" / "local" / "settings.json").read_text() == "{}"
        assert (wt / "assets" / "logo.txt").read_text() == "logo"

    def test_missing_source_aborts(self, fake_root, mock_process):
        runner = HookRunner(mock_process)
        hooks = HookSet(copy_files=("missing.txt",), commands=("echo never",))

        result = runner.run_hooks(str(fake_root), "feature", hooks, {})

        assert result == Err(HookCopyFailed("missing.txt", "source does not exist"))
        mock_process.spawn.assert_not_called()

    def test_copy_error_reported(self, fake_root, mock_process):
        (fake_root / "blocked").mkdir()
        (fake_root / "blocked" / "inner.txt").write_text("x")
        # Destination parent is a file, so the copy cannot succeed
        Path(worktree_path(str(fake_root), "feature"), "blocked").write_text("")
        runner = HookRunner(mock_process)

        result = runner.run_hooks(
            str(fake_root), "feature", HookSet(copy_files=("blocked/inner.txt",), commands=("ls",)), {}
        )

        assert isinstance(result, Err)
        assert isinstance(result.error, HookCopyFailed)
        assert result.error.file == "blocked/inner.txt"
        mock_process.spawn.assert_not_called()

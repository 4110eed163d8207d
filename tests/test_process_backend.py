"""Tests for SubprocessBackend with real child processes"""
import os
import signal
import threading
import time

from git_phantom.models.errors import ErrorKind
from git_phantom.models.execution import ExecutionRequest
from git_phantom.models.result import Err, Ok
from git_phantom.services import SubprocessBackend
from git_phantom.services.process_backend import forwarded_signals


def _sh(script, cwd, env, interactive=False):
    return ExecutionRequest(
        command="/bin/sh", args=("-c", script), cwd=str(cwd), env=env, interactive=interactive
    )


class TestSpawn:
    """Test spawning commands."""

    def test_exit_code_returned(self, temp_dir, base_env):
        result = SubprocessBackend().spawn(_sh("exit 7", temp_dir, base_env))
        assert result == Ok(7)

    def test_success(self, temp_dir, base_env):
        assert SubprocessBackend().spawn(_sh("true", temp_dir, base_env)) == Ok(0)

    def test_cwd_and_env(self, temp_dir, base_env):
        env = {**base_env, "PHANTOM_NAME": "demo"}
        script = 'pwd > where.txt; printf "%s" "$PHANTOM_NAME" > name.txt'

        SubprocessBackend().spawn(_sh(script, temp_dir, env))

        assert (temp_dir / "where.txt").read_text().strip() == str(temp_dir)
        assert (temp_dir / "name.txt").read_text() == "demo"

    def test_non_interactive_has_no_stdin(self, temp_dir, base_env):
        result = SubprocessBackend().spawn(_sh("cat > copied.txt", temp_dir, base_env))

        assert result == Ok(0)
        assert (temp_dir / "copied.txt").read_text() == ""

    def test_killed_by_signal(self, temp_dir, base_env):
        result = SubprocessBackend().spawn(_sh("kill -TERM $$", temp_dir, base_env))
        assert result == Ok(128 + 15)

    def test_missing_program(self, temp_dir, base_env):
        request = ExecutionRequest(command="/nonexistent/program", cwd=str(temp_dir), env=base_env)

        result = SubprocessBackend().spawn(request)

        assert isinstance(result, Err)
        assert result.error.kind == ErrorKind.PROCESS_SPAWN_ERROR
        assert result.error.command == "/nonexistent/program"
        assert result.error.exit_code is None

    def test_missing_working_directory(self, temp_dir, base_env):
        result = SubprocessBackend().spawn(_sh("true", temp_dir / "missing", base_env))
        assert isinstance(result, Err)
        assert result.error.kind == ErrorKind.PROCESS_SPAWN_ERROR


def _signal_parent_when_ready(marker, signum):
    """Send ``signum`` to this process once the child has created ``marker``."""
    def _wait_then_signal():
        deadline = time.monotonic() + 10
        while not marker.exists() and time.monotonic() < deadline:
            time.sleep(0.02)
        os.kill(os.getpid(), signum)

    thread = threading.Thread(target=_wait_then_signal, daemon=True)
    thread.start()
    return thread


class TestSignals:
    """Test signal handling while a child runs."""

    def test_sigterm_forwarded_to_child(self, temp_dir, base_env):
        script = 'trap "exit 42" TERM; touch ready; sleep 5 & wait'
        thread = _signal_parent_when_ready(temp_dir / "ready", signal.SIGTERM)

        result = SubprocessBackend().spawn(_sh(script, temp_dir, base_env))
        thread.join()

        assert result == Ok(42)

    def test_sigint_ignored_by_parent(self, temp_dir, base_env):
        script = "touch ready; sleep 1; exit 5"
        thread = _signal_parent_when_ready(temp_dir / "ready", signal.SIGINT)

        result = SubprocessBackend().spawn(_sh(script, temp_dir, base_env))
        thread.join()

        assert result == Ok(5)

    def test_handlers_restored(self, temp_dir, base_env):
        before = {signum: signal.getsignal(signum) for signum in (signal.SIGINT, *forwarded_signals())}

        SubprocessBackend().spawn(_sh("true", temp_dir, base_env))

        after = {signum: signal.getsignal(signum) for signum in before}
        assert after == before

    def test_platform_without_sighup(self, monkeypatch):
        monkeypatch.delattr(signal, "SIGHUP")
        assert forwarded_signals() == (signal.SIGTERM,)

"""Child process spawning for git-phantom."""

import signal
import subprocess
import threading
from contextlib import contextmanager

from git_phantom.logging_config import get_logger
from git_phantom.models.errors import ProcessSpawnError
from git_phantom.models.execution import ExecutionRequest
from git_phantom.models.result import Err, Ok, Result

logger = get_logger(__name__)

# SIGINT from the terminal already reaches the child through its process group.
FORWARDED_SIGNAL_NAMES = ("SIGTERM", "SIGHUP")


def forwarded_signals() -> tuple:
    """Signals relayed to the child that exist on this platform (no SIGHUP on Windows)."""
    return tuple(getattr(signal, name) for name in FORWARDED_SIGNAL_NAMES if hasattr(signal, name))


@contextmanager
def _forward_signals(proc: subprocess.Popen):
    """Relay termination signals to ``proc`` while the caller waits on it."""
    if threading.current_thread() is not threading.main_thread():
        # signal.signal only works on the main thread
        yield
        return

    def _relay(signum, frame):
        logger.debug(f"Forwarding signal {signum} to pid {proc.pid}")
        try:
            proc.send_signal(signum)
        except ProcessLookupError:
            pass

    previous = {signal.SIGINT: signal.signal(signal.SIGINT, signal.SIG_IGN)}
    for signum in forwarded_signals():
        previous[signum] = signal.signal(signum, _relay)
    try:
        yield
    finally:
        for signum, handler in previous.items():
            # None means the handler was not installed from Python
            if handler is not None:
                signal.signal(signum, handler)


class SubprocessBackend:
    """Spawns a child and waits for it, inheriting the terminal."""

    def spawn(self, request: ExecutionRequest) -> Result:
        """Run the request to completion.

        Returns:
            Ok(exit code) whatever the code is, or Err(ProcessSpawnError) when
            the program could not be started.
        """
        stdin = None if request.interactive else subprocess.DEVNULL
        logger.debug(f"Spawning {request.argv} in {request.cwd}")
        try:
            proc = subprocess.Popen(
                request.argv,
                cwd=request.cwd,
                env=request.env,
                stdin=stdin,
            )
        except OSError as e:
            logger.debug(f"Could not start {request.command}: {e}")
            return Err(ProcessSpawnError(request.command, e.strerror or str(e)))

        with _forward_signals(proc):
            returncode = proc.wait()

        if returncode < 0:
            # Killed by a signal; report it the way shells do
            returncode = 128 - returncode
        logger.debug(f"{request.command} exited with code {returncode}")
        return Ok(returncode)

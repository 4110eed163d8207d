"""Process execution request model."""

from dataclasses import dataclass, field
from typing import Dict, Tuple


@dataclass(frozen=True)
class ExecutionRequest:
    """A single child process to spawn. Built per invocation, never stored."""

    command: str
    args: Tuple[str, ...] = ()
    cwd: str = "."
    env: Dict[str, str] = field(default_factory=dict)
    interactive: bool = True  # False: stdin is /dev/null, stdout/stderr inherited

    @property
    def argv(self) -> list:
        return [self.command, *self.args]

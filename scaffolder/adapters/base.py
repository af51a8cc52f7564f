"""
Runner base — the contract between the pipeline and external processes.

The pipeline never spawns processes itself. It talks to a
CommandRunner, which reports how a command terminated and nothing
else: output streams are inherited, not captured.

Two kinds of failure are kept apart:

    - A command that ran and exited non-zero (or was terminated on
      timeout) produces a CommandOutcome.
    - A command that could not be started at all raises LaunchError.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence


class LaunchError(Exception):
    """Raised when an external command cannot be spawned."""

    def __init__(self, command: str, reason: str):
        self.command = command
        self.reason = reason
        super().__init__(f'Failed to spawn "{command}": {reason}')


@dataclass(frozen=True)
class CommandOutcome:
    """How an external command terminated.

    Attributes:
        exit_code: Process exit status, or None when killed by a signal.
        signal:    Name of the terminating signal (e.g. ``SIGTERM``), if any.
        timed_out: True when the runner forced termination at the deadline.
        duration_ms: Wall time from spawn to exit.
    """

    exit_code: int | None
    signal: str | None = None
    timed_out: bool = False
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.exit_code == 0 and not self.timed_out

    def describe(self, label: str, timeout: float) -> str:
        """Human-readable failure message for this outcome."""
        if self.timed_out:
            return f"{label} timed out after {format_duration(timeout)}"
        if self.exit_code is None:
            return f"{label} was terminated by {self.signal or 'a signal'}"
        return f"{label} failed with exit code {self.exit_code}"


class CommandRunner(ABC):
    """Abstract capability for running one external command to completion."""

    @abstractmethod
    def run(
        self,
        command: str,
        args: Sequence[str],
        cwd: Path,
        timeout: float,
    ) -> CommandOutcome:
        """Run ``command`` with ``args`` in ``cwd``, waiting at most ``timeout`` seconds.

        Raises:
            LaunchError: If the process could not be started.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}>"


def format_duration(seconds: float) -> str:
    """Format seconds as ``45s`` or ``2m 5s``."""
    total = int(round(seconds))
    minutes, secs = divmod(total, 60)
    if minutes == 0:
        return f"{secs}s"
    return f"{minutes}m {secs}s"

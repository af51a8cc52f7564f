"""
Subprocess runner — spawn external commands with inherited stdio.

This is the single place where the scaffolder starts processes.
The child writes straight to our terminal; only the termination
outcome comes back.
"""

from __future__ import annotations

import logging
import shlex
import signal
import subprocess
import time
from pathlib import Path
from typing import Sequence

from scaffolder.adapters.base import CommandOutcome, CommandRunner, LaunchError, format_duration

logger = logging.getLogger(__name__)


class SubprocessRunner(CommandRunner):
    """Run commands through ``subprocess.Popen``.

    On timeout the child gets SIGTERM, then SIGKILL if it is still
    alive after ``termination_grace`` seconds.
    """

    def __init__(self, termination_grace: float = 10.0):
        self._grace = termination_grace

    def run(
        self,
        command: str,
        args: Sequence[str],
        cwd: Path,
        timeout: float,
    ) -> CommandOutcome:
        argv = [command, *args]
        logger.info("Running: %s", shlex.join(argv))
        logger.info("  cwd: %s, timeout: %s", cwd, format_duration(timeout))

        start = time.monotonic()
        try:
            proc = subprocess.Popen(argv, cwd=cwd)
        except OSError as e:
            raise LaunchError(command, e.strerror or str(e)) from e

        timed_out = False
        try:
            proc.wait(timeout=timeout)
        except subprocess.TimeoutExpired:
            logger.warning("%s exceeded %s, terminating", command, format_duration(timeout))
            self._terminate(proc)
            timed_out = True
        except BaseException:
            # Interrupted while waiting: stop the child, then let the caller handle it
            self._terminate(proc)
            raise

        elapsed_ms = int((time.monotonic() - start) * 1000)
        return _outcome(proc.returncode, timed_out, elapsed_ms)

    def _terminate(self, proc: subprocess.Popen) -> None:
        if proc.poll() is not None:
            return
        proc.terminate()
        try:
            proc.wait(timeout=self._grace)
        except subprocess.TimeoutExpired:
            logger.warning("Process %d ignored SIGTERM, killing", proc.pid)
            proc.kill()
            proc.wait()


def _outcome(returncode: int, timed_out: bool, elapsed_ms: int) -> CommandOutcome:
    """Translate a Popen return code into a CommandOutcome."""
    if returncode < 0:
        try:
            sig_name = signal.Signals(-returncode).name
        except ValueError:
            sig_name = f"signal {-returncode}"
        return CommandOutcome(
            exit_code=None,
            signal=sig_name,
            timed_out=timed_out,
            duration_ms=elapsed_ms,
        )
    return CommandOutcome(exit_code=returncode, timed_out=timed_out, duration_ms=elapsed_ms)

"""
Interrupt supervisor — owns the in-progress state during a run.

While a pipeline runs, the supervisor holds the state and the
checkpoint path, turns SIGINT/SIGTERM into a PipelineInterrupted
exception, and is the only thing that reacts to it:

    running steps → failed, error = "Interrupted by <SIGNAL>",
    best-effort checkpoint save, no cleanup.

The checkpoint is left in place so the identical
command resumes.
"""

from __future__ import annotations

import logging
import signal
import threading
from pathlib import Path
from types import FrameType
from typing import Any, Callable, TypeVar

from scaffolder.core.models.state import ScaffoldState, StepStatus
from scaffolder.core.persistence.state_file import save_checkpoint

logger = logging.getLogger(__name__)

T = TypeVar("T")

HANDLED_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class PipelineInterrupted(Exception):
    """Raised in the main thread when a termination signal arrives."""

    def __init__(self, signal_name: str):
        self.signal_name = signal_name
        super().__init__(f"Interrupted by {signal_name}")


class InterruptSupervisor:
    """Scope that maps termination signals onto the current state.

    Args:
        state: The state being driven by the pipeline.
        checkpoint: Where that state is persisted.
    """

    def __init__(self, state: ScaffoldState, checkpoint: Path):
        self.state = state
        self.checkpoint = checkpoint
        self._previous: dict[int, Any] = {}
        self.interrupted_by: str | None = None

    def supervise(
        self,
        body: Callable[[], T],
        on_interrupt: Callable[[PipelineInterrupted], T],
    ) -> T:
        """Run ``body`` with signal handlers installed.

        If the run is interrupted, the state is recorded and the value
        of ``on_interrupt`` is returned instead.
        """
        self._install()
        try:
            return body()
        except PipelineInterrupted as exc:
            self._ignore_further()
            self.record_interruption(exc.signal_name)
            return on_interrupt(exc)
        finally:
            self._restore()

    def record_interruption(self, signal_name: str) -> None:
        """Relabel running steps as failed and try to save."""
        self.interrupted_by = signal_name
        logger.warning("Received %s. Saving state and exiting...", signal_name)

        for step in self.state.running_steps():
            self.state.set_step(step, StepStatus.FAILED)
        self.state.error = f"Interrupted by {signal_name}"

        try:
            save_checkpoint(self.state, self.checkpoint)
        except Exception as e:
            # Nothing further to do: the directory may not even exist yet
            logger.debug("Could not save checkpoint after interrupt: %s", e)
            return
        logger.info("State saved. Re-run the same command to resume.")

    # ── Signal plumbing ─────────────────────────────────────────

    def _handle(self, signum: int, frame: FrameType | None) -> None:
        raise PipelineInterrupted(signal.Signals(signum).name)

    def _install(self) -> None:
        if threading.current_thread() is not threading.main_thread():
            logger.debug("Not on the main thread; interrupt handlers not installed")
            return
        for sig in HANDLED_SIGNALS:
            self._previous[sig] = signal.signal(sig, self._handle)

    def _ignore_further(self) -> None:
        # A second Ctrl-C must not cut the checkpoint save short
        for sig in self._previous:
            signal.signal(sig, signal.SIG_IGN)

    def _restore(self) -> None:
        for sig, handler in self._previous.items():
            # None means the previous handler wasn't installed from Python
            signal.signal(sig, handler if handler is not None else signal.SIG_DFL)
        self._previous.clear()

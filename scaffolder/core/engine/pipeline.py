"""
Step pipeline — the resumable provisioning state machine.

The pipeline walks the fixed step order. For each step:

    done              → skipped, nothing written
    pending/running/failed
                      → mark running, persist, act, mark done/failed, persist

Fatal steps (bootstrap, dependency install, tool init) abort the run
on failure and, for a directory this run created, remove it. The
component step never fails the run: individual component failures
are recorded and reported. Verification failure aborts without
cleanup so the user can inspect the tree.

The pipeline returns a PipelineResult; translating that into a
process exit status is the caller's job.

Flow:
    state → [bootstrap → dependencyInstall → toolInit → componentInstall → verification]
          → checkpoint removed on success
"""

from __future__ import annotations

import logging
import shutil
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable

from scaffolder.adapters.base import CommandRunner, LaunchError
from scaffolder.core.engine.supervisor import InterruptSupervisor, PipelineInterrupted
from scaffolder.core.models.config import ScaffolderConfig
from scaffolder.core.models.state import (
    BOOTSTRAP,
    COMPONENT_INSTALL,
    DEPENDENCY_INSTALL,
    STEP_ORDER,
    TOOL_INIT,
    VERIFICATION,
    ScaffoldState,
    StepStatus,
)
from scaffolder.core.persistence.state_file import (
    CheckpointWriteError,
    checkpoint_path,
    remove_checkpoint,
    save_checkpoint,
)
from scaffolder.core.services.commands import (
    ToolCommand,
    bootstrap_command,
    dependency_install_command,
    remediation_for,
    tool_init_command,
)
from scaffolder.core.services.component_install import ComponentInstaller
from scaffolder.core.services.verification import verify_project

logger = logging.getLogger(__name__)

# Failure here ends the run and removes a freshly created directory
CLEANUP_ON_FAILURE = frozenset({BOOTSTRAP, DEPENDENCY_INSTALL, TOOL_INIT})


class Outcome(str, Enum):
    SUCCESS = "success"
    PARTIAL = "partial"          # every step done, some components failed
    FAILED = "failed"
    INTERRUPTED = "interrupted"


@dataclass
class StepOutcome:
    """Result of one step action."""

    ok: bool
    error: str | None = None
    remediation: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @classmethod
    def success(cls, warnings: list[str] | None = None) -> StepOutcome:
        return cls(ok=True, warnings=warnings or [])

    @classmethod
    def failure(cls, error: str, remediation: list[str] | None = None) -> StepOutcome:
        return cls(ok=False, error=error, remediation=remediation or [])


@dataclass
class PipelineResult:
    """Final, machine-readable outcome of a pipeline run."""

    state: ScaffoldState
    outcome: Outcome
    ran_steps: list[str] = field(default_factory=list)
    skipped_steps: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    error: str | None = None
    remediation: list[str] = field(default_factory=list)
    cleaned_up: bool = False

    @property
    def ok(self) -> bool:
        return self.outcome in (Outcome.SUCCESS, Outcome.PARTIAL)

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1

    def to_dict(self) -> dict:
        return {
            "outcome": self.outcome.value,
            "exit_code": self.exit_code,
            "project_name": self.state.project_name,
            "project_path": self.state.project_path,
            "template": self.state.template,
            "steps": {name: status.value for name, status in self.state.steps.items()},
            "ran_steps": self.ran_steps,
            "skipped_steps": self.skipped_steps,
            "installed_components": self.state.installed_components,
            "failed_components": self.state.failed_components,
            "warnings": self.warnings,
            "error": self.error,
            "remediation": self.remediation,
            "cleaned_up": self.cleaned_up,
        }


class StepPipeline:
    """Drives a ScaffoldState through the provisioning steps.

    Args:
        state: Fresh or resumed state. Mutated in place.
        runner: How external commands are run.
        config: Timeouts, tool names, verification rules.
        clock: Monotonic clock for the component time budget.
    """

    def __init__(
        self,
        state: ScaffoldState,
        runner: CommandRunner,
        config: ScaffolderConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.state = state
        self._runner = runner
        self._config = config or ScaffolderConfig()
        self._clock = clock
        self._checkpoint = checkpoint_path(state.path)
        self._actions: dict[str, Callable[[], StepOutcome]] = {
            BOOTSTRAP: self._bootstrap,
            DEPENDENCY_INSTALL: self._dependency_install,
            TOOL_INIT: self._tool_init,
            COMPONENT_INSTALL: self._component_install,
            VERIFICATION: self._verification,
        }
        self._ran: list[str] = []
        self._skipped: list[str] = []
        self._warnings: list[str] = []

    @property
    def checkpoint(self) -> Path:
        return self._checkpoint

    def run(self) -> PipelineResult:
        """Run all pending steps under interrupt supervision."""
        supervisor = InterruptSupervisor(self.state, self._checkpoint)
        return supervisor.supervise(self._run_steps, self._interrupted)

    # ── State machine ───────────────────────────────────────────

    def _run_steps(self) -> PipelineResult:
        for step in STEP_ORDER:
            if self.state.status_of(step) is StepStatus.DONE:
                logger.info("Skipping %s (already completed)", step)
                self._skipped.append(step)
                continue

            try:
                outcome = self._execute(step)
            except CheckpointWriteError as e:
                self.state.error = str(e)
                logger.error("BLOCKING: %s", e)
                return self._result(Outcome.FAILED, error=str(e))

            if not outcome.ok:
                return self._abort(step, outcome)

        return self._finish()

    def _execute(self, step: str) -> StepOutcome:
        self.state.error = None
        self.state.set_step(step, StepStatus.RUNNING)
        self._persist()

        logger.info("Running step %s", step)
        outcome = self._actions[step]()
        self._ran.append(step)
        self._warnings.extend(outcome.warnings)

        if outcome.ok:
            self.state.set_step(step, StepStatus.DONE)
        else:
            self.state.set_step(step, StepStatus.FAILED, error=outcome.error)
        self._persist()
        return outcome

    def _persist(self) -> None:
        # Before bootstrap creates the directory there is nowhere to write
        if not self.state.path.is_dir():
            logger.debug("Project directory absent; checkpoint held in memory")
            return
        save_checkpoint(self.state, self._checkpoint)

    def _abort(self, step: str, outcome: StepOutcome) -> PipelineResult:
        logger.error("BLOCKING: %s", outcome.error)
        for line in outcome.remediation:
            logger.error("  -> %s", line)

        cleaned = False
        if step in CLEANUP_ON_FAILURE and self.state.fresh_creation:
            cleaned = self._cleanup()

        return self._result(
            Outcome.FAILED,
            error=outcome.error,
            remediation=outcome.remediation,
            cleaned_up=cleaned,
        )

    def _finish(self) -> PipelineResult:
        remove_checkpoint(self._checkpoint)
        if self.state.failed_components:
            logger.warning("Project created with some component installation failures.")
            return self._result(Outcome.PARTIAL)
        logger.info("Project scaffolded successfully!")
        return self._result(Outcome.SUCCESS)

    def _interrupted(self, exc: PipelineInterrupted) -> PipelineResult:
        return self._result(Outcome.INTERRUPTED, error=str(exc))

    def _result(self, outcome: Outcome, **kwargs) -> PipelineResult:
        return PipelineResult(
            state=self.state,
            outcome=outcome,
            ran_steps=list(self._ran),
            skipped_steps=list(self._skipped),
            warnings=list(self._warnings),
            **kwargs,
        )

    def _cleanup(self) -> bool:
        """Remove the project directory this run created. True if it's gone."""
        path = self.state.path
        if not path.exists():
            return True
        logger.info("Cleaning up %s...", path)
        try:
            shutil.rmtree(path)
        except OSError as e:
            logger.error("Cleanup failed: %s. Manual removal may be needed.", e)
            return False
        logger.info("Cleanup complete.")
        return True

    # ── Step actions ────────────────────────────────────────────

    def _run_command(self, cmd: ToolCommand, timeout: float) -> StepOutcome:
        try:
            outcome = self._runner.run(cmd.command, cmd.args, cmd.cwd, timeout)
        except LaunchError as e:
            return StepOutcome.failure(str(e), remediation_for(cmd))
        if not outcome.ok:
            return StepOutcome.failure(outcome.describe(cmd.label, timeout), remediation_for(cmd))
        return StepOutcome.success()

    def _require(self, cmd: ToolCommand, marker: str, done: StepOutcome) -> StepOutcome:
        """Fail a step whose command succeeded but left no ``marker``."""
        if not done.ok or (self.state.path / marker).exists():
            return done
        return StepOutcome.failure(
            f"{cmd.label} completed but {marker} not found",
            remediation_for(cmd),
        )

    def _bootstrap(self) -> StepOutcome:
        logger.info(
            'Creating project "%s" in %s...', self.state.project_name, self.state.path.parent,
        )
        cmd = bootstrap_command(self._config, self.state.project_name, self.state.path.parent)
        done = self._run_command(cmd, self._config.timeouts.bootstrap)
        return self._require(cmd, self._config.tools.bootstrap_marker, done)

    def _dependency_install(self) -> StepOutcome:
        logger.info("Installing dependencies...")
        cmd = dependency_install_command(self._config, self.state.path)
        done = self._run_command(cmd, self._config.timeouts.dependency_install)
        return self._require(cmd, self._config.tools.dependency_marker, done)

    def _tool_init(self) -> StepOutcome:
        logger.info("Initializing UI kit...")
        cmd = tool_init_command(self._config, self.state.path)
        return self._run_command(cmd, self._config.timeouts.tool_init)

    def _component_install(self) -> StepOutcome:
        installer = ComponentInstaller(
            self._runner, self.state.path, self._config, clock=self._clock,
        )
        result = installer.install(self.state.components, self._config.timeouts.component_install)
        self.state.record_components(result.installed, result.failed)

        warnings = []
        if result.failed:
            warnings.append(
                f"{len(result.failed)} component(s) failed to install: {', '.join(result.failed)}"
            )
            logger.warning(warnings[-1])
        return StepOutcome.success(warnings)

    def _verification(self) -> StepOutcome:
        logger.info("Verifying project structure...")
        report = verify_project(
            self.state.path, self._config.verification, self.state.installed_components,
        )
        for warning in report.warnings:
            logger.warning(warning)

        if not report.valid:
            for item in report.missing:
                logger.error("  Missing: %s", item)
            return StepOutcome.failure(f"Verification failed. Missing: {', '.join(report.missing)}")
        return StepOutcome.success(report.warnings)

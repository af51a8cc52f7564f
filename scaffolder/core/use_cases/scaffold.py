"""
Scaffold use case — validate, create or resume state, run the pipeline.

This is the entry point every surface goes through. It never exits
the process: the CLI turns ``ScaffoldResult.exit_code`` into a status.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Sequence

from scaffolder.adapters.base import CommandRunner
from scaffolder.core.engine.pipeline import PipelineResult, StepPipeline
from scaffolder.core.models.config import ScaffolderConfig
from scaffolder.core.models.state import ScaffoldState, StepStatus
from scaffolder.core.services.preflight import PreflightResult, validate_inputs

logger = logging.getLogger(__name__)


@dataclass
class ScaffoldRequest:
    """What the user asked for."""

    project_name: str
    template: str = "minimal"
    components: list[str] = field(default_factory=list)
    target_dir: Path = field(default_factory=Path.cwd)


@dataclass
class ScaffoldResult:
    """Result of a scaffold invocation."""

    preflight: PreflightResult
    pipeline: PipelineResult | None = None
    resumed: bool = False

    @property
    def ok(self) -> bool:
        return self.pipeline is not None and self.pipeline.ok

    @property
    def exit_code(self) -> int:
        if self.pipeline is None:
            return 1
        return self.pipeline.exit_code

    @property
    def state(self) -> ScaffoldState | None:
        return self.pipeline.state if self.pipeline else None

    def to_dict(self) -> dict:
        result: dict = {
            "ok": self.ok,
            "exit_code": self.exit_code,
            "resumed": self.resumed,
            "preflight": self.preflight.to_dict(),
        }
        if self.pipeline is not None:
            result["pipeline"] = self.pipeline.to_dict()
        return result


def prepare_state(
    request: ScaffoldRequest,
    preflight: PreflightResult,
) -> tuple[ScaffoldState, bool]:
    """Fresh state, or the loaded checkpoint adjusted for a resume.

    Returns:
        (state, resumed)
    """
    existing = preflight.existing_state
    if existing is None:
        assert preflight.project_path is not None
        state = ScaffoldState.create(
            project_name=request.project_name,
            project_path=preflight.project_path,
            template=request.template,
            components=preflight.resolved_components,
        )
        return state, False

    # The directory predates this run: never delete it
    existing.fresh_creation = False

    # Work where the checkpoint was found, even if the project was moved or renamed
    assert preflight.project_path is not None
    if existing.path != preflight.project_path:
        logger.warning(
            "Checkpoint was recorded for %s; resuming in %s",
            existing.project_path, preflight.project_path,
        )
    existing.project_path = str(preflight.project_path)
    existing.project_name = request.project_name

    if existing.components != preflight.resolved_components:
        logger.warning(
            "Requested components differ from the checkpoint; resuming with the "
            "checkpoint's list: %s",
            ", ".join(existing.components) or "(none)",
        )
    if existing.template != request.template:
        logger.warning(
            'Checkpoint was created with template "%s"; keeping it.', existing.template,
        )

    done = [name for name, status in existing.steps.items() if status is StepStatus.DONE]
    logger.info(
        "Resuming %s (completed: %s)", existing.project_name, ", ".join(done) or "none",
    )
    return existing, True


def scaffold_project(
    request: ScaffoldRequest,
    runner: CommandRunner,
    config: ScaffolderConfig | None = None,
    clock: Callable[[], float] = time.monotonic,
) -> ScaffoldResult:
    """Scaffold (or resume scaffolding) a project.

    Args:
        request: Project name, template, components, target directory.
        runner: Executes the external tools.
        config: Scaffolder configuration (defaults if None).
        clock: Monotonic clock for the component time budget.

    Returns:
        ScaffoldResult. ``pipeline`` is None when preflight failed.
    """
    config = config or ScaffolderConfig()

    preflight = validate_inputs(
        request.project_name,
        request.template,
        request.components,
        request.target_dir,
        config,
    )
    for warning in preflight.warnings:
        logger.warning(warning)

    if not preflight.valid:
        for error in preflight.errors:
            logger.error(error)
        return ScaffoldResult(preflight=preflight)

    state, resumed = prepare_state(request, preflight)
    pipeline = StepPipeline(state, runner, config, clock=clock)
    return ScaffoldResult(preflight=preflight, pipeline=pipeline.run(), resumed=resumed)


def split_components(raw: str | Sequence[str] | None) -> list[str]:
    """Parse a comma-separated component list, keeping order and duplicates."""
    if raw is None:
        return []
    parts = raw.split(",") if isinstance(raw, str) else list(raw)
    return [p.strip() for p in parts if p.strip()]

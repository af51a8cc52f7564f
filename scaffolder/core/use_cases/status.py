"""
Status use case — inspect a project's checkpoint without running anything.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from scaffolder.core.models.state import ScaffoldState, StepStatus
from scaffolder.core.persistence.state_file import (
    CorruptCheckpointError,
    checkpoint_path,
    load_checkpoint,
)


@dataclass
class StatusResult:
    """Recorded progress of a scaffolding run."""

    project_path: Path
    state: ScaffoldState | None = None
    error: str | None = None

    @property
    def has_checkpoint(self) -> bool:
        return self.state is not None

    @property
    def next_step(self) -> str | None:
        """First step a resume would (re-)attempt."""
        if self.state is None:
            return None
        for name, status in self.state.steps.items():
            if status is not StepStatus.DONE:
                return name
        return None

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        result: dict = {"project_path": str(self.project_path)}
        if self.error:
            result["error"] = self.error
            return result
        if self.state is None:
            result["checkpoint"] = None
            return result
        result["checkpoint"] = self.state.to_document()
        result["next_step"] = self.next_step
        return result


def get_status(project_path: Path) -> StatusResult:
    """Read the checkpoint of ``project_path``.

    No checkpoint is not an error: the project either finished or was
    never started. A corrupted checkpoint is reported in ``error``.
    """
    project_path = project_path.expanduser().resolve()
    result = StatusResult(project_path=project_path)

    if not project_path.is_dir():
        result.error = f"Project directory not found: {project_path}"
        return result

    try:
        result.state = load_checkpoint(checkpoint_path(project_path))
    except CorruptCheckpointError as e:
        result.error = str(e)

    return result

"""
ScaffoldState — the persisted checkpoint of a scaffolding run.

This is the single document that records how far provisioning got.
It's serialized (camelCase keys) to .scaffolder-state.json inside the
project directory after every step transition, and deleted once the
whole pipeline has succeeded.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

CHECKPOINT_VERSION = 1

# ── Step names (fixed order) ────────────────────────────────────

BOOTSTRAP = "bootstrap"
DEPENDENCY_INSTALL = "dependencyInstall"
TOOL_INIT = "toolInit"
COMPONENT_INSTALL = "componentInstall"
VERIFICATION = "verification"

STEP_ORDER: tuple[str, ...] = (
    BOOTSTRAP,
    DEPENDENCY_INSTALL,
    TOOL_INIT,
    COMPONENT_INSTALL,
    VERIFICATION,
)


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class StepStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    DONE = "done"
    FAILED = "failed"


def _pending_steps() -> dict[str, StepStatus]:
    return {name: StepStatus.PENDING for name in STEP_ORDER}


class ScaffoldState(BaseModel):
    """Root checkpoint model.

    Identity fields and ``components`` are fixed at creation. Only
    the step pipeline (and the interrupt supervisor) mutate the rest.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
    )

    # ── Schema ───────────────────────────────────────────────────
    version: int = CHECKPOINT_VERSION

    # ── Identity ─────────────────────────────────────────────────
    project_name: str
    project_path: str
    template: str
    components: list[str] = Field(default_factory=list)

    # ── Timestamps ───────────────────────────────────────────────
    started_at: str = Field(default_factory=_now_iso)
    updated_at: str = Field(default_factory=_now_iso)

    # ── Progress ─────────────────────────────────────────────────
    fresh_creation: bool = True
    steps: dict[str, StepStatus] = Field(default_factory=_pending_steps)
    installed_components: list[str] = Field(default_factory=list)
    failed_components: list[str] = Field(default_factory=list)
    error: str | None = None

    @field_validator("version")
    @classmethod
    def _known_version(cls, value: int) -> int:
        if value != CHECKPOINT_VERSION:
            raise ValueError(
                f"unsupported checkpoint version {value} (expected {CHECKPOINT_VERSION})"
            )
        return value

    @field_validator("steps")
    @classmethod
    def _fixed_step_keys(cls, value: dict[str, StepStatus]) -> dict[str, StepStatus]:
        if set(value) != set(STEP_ORDER):
            raise ValueError(f"steps must contain exactly: {', '.join(STEP_ORDER)}")
        return {name: value[name] for name in STEP_ORDER}

    @model_validator(mode="after")
    def _disjoint_outcomes(self) -> ScaffoldState:
        overlap = set(self.installed_components) & set(self.failed_components)
        if overlap:
            raise ValueError(
                f"components both installed and failed: {', '.join(sorted(overlap))}"
            )
        return self

    @classmethod
    def create(
        cls,
        project_name: str,
        project_path: Path,
        template: str,
        components: list[str],
    ) -> ScaffoldState:
        """Fresh state for a project directory that does not exist yet."""
        return cls(
            project_name=project_name,
            project_path=str(project_path),
            template=template,
            components=list(components),
            fresh_creation=True,
        )

    # ── Queries ──────────────────────────────────────────────────

    @property
    def path(self) -> Path:
        return Path(self.project_path)

    @property
    def all_done(self) -> bool:
        return all(status is StepStatus.DONE for status in self.steps.values())

    def status_of(self, step: str) -> StepStatus:
        return self.steps[step]

    def running_steps(self) -> list[str]:
        return [name for name, status in self.steps.items() if status is StepStatus.RUNNING]

    # ── Mutations ────────────────────────────────────────────────

    def touch(self) -> None:
        """Update the updated_at timestamp."""
        self.updated_at = _now_iso()

    def set_step(self, step: str, status: StepStatus, error: str | None = None) -> None:
        """Record a step transition, attaching ``error`` when given."""
        if step not in self.steps:
            raise KeyError(f"Unknown step: {step}")
        steps = dict(self.steps)
        steps[step] = status
        self.steps = steps
        if error is not None:
            self.error = error

    def record_components(self, installed: list[str], failed: list[str]) -> None:
        """Replace the component outcome lists (one attempt's result)."""
        # Clear first: each assignment re-validates the disjointness check
        self.failed_components = []
        self.installed_components = list(installed)
        self.failed_components = list(failed)

    def to_document(self) -> dict:
        """JSON-ready dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)

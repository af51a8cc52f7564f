"""
Preflight validation — check every input before any side effect.

All problems are collected and reported together so the user can
fix everything in one pass. Nothing here writes to the filesystem;
the only reads are stat/access checks and loading an existing
checkpoint to decide between a fresh start and a resume.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from scaffolder.core.models.config import (
    COMPONENT_NAME_RE,
    CUSTOM_TEMPLATE,
    ScaffolderConfig,
)
from scaffolder.core.models.state import ScaffoldState
from scaffolder.core.persistence.state_file import (
    CorruptCheckpointError,
    checkpoint_path,
    load_checkpoint,
)

logger = logging.getLogger(__name__)

PROJECT_NAME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9._-]*$")


@dataclass
class PreflightResult:
    """Everything the pipeline needs to start, or why it can't."""

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    project_path: Path | None = None
    resolved_components: list[str] = field(default_factory=list)
    existing_state: ScaffoldState | None = None

    @property
    def valid(self) -> bool:
        return not self.errors

    @property
    def resuming(self) -> bool:
        return self.existing_state is not None

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "errors": self.errors,
            "warnings": self.warnings,
            "project_path": str(self.project_path) if self.project_path else None,
            "resolved_components": self.resolved_components,
            "resuming": self.resuming,
        }


def validate_project_name(name: str | None) -> str | None:
    """Return an error message, or None if ``name`` is acceptable."""
    if not name:
        return "Project name is required."
    if not PROJECT_NAME_RE.match(name):
        return (
            f'Invalid project name "{name}". '
            "Must start with a letter, contain only letters, digits, dots, hyphens, underscores."
        )
    return None


def resolve_components(
    template: str,
    components: Sequence[str],
    config: ScaffolderConfig,
    errors: list[str],
    warnings: list[str],
) -> list[str]:
    """Resolve the component list for ``template``, appending any problems."""
    if template != CUSTOM_TEMPLATE:
        spec = config.templates.get(template)
        if spec is None:
            return []
        if components:
            warnings.append(
                f'--components is ignored for template "{template}"; '
                f'use --template {CUSTOM_TEMPLATE} to pick components.'
            )
        return list(spec.components)

    if not components:
        errors.append("Custom template requires at least one component via --components.")
        return []

    limit = config.max_custom_components
    if len(components) > limit:
        errors.append(f"Too many components ({len(components)}). Maximum is {limit}.")
        return []

    for name in components:
        if not COMPONENT_NAME_RE.match(name):
            errors.append(
                f'Invalid component name "{name}". Use lowercase letters, digits, hyphens.'
            )

    unique = list(dict.fromkeys(components))
    if len(unique) != len(components):
        dupes = sorted({n for n in components if components.count(n) > 1})
        errors.append(
            f"Duplicate component names detected: {', '.join(dupes)}. Remove duplicates."
        )
    return unique


def check_target_dir(target_dir: Path, errors: list[str]) -> None:
    """The parent directory must exist, be a directory, and be writable."""
    if not target_dir.exists():
        errors.append(f"Target directory does not exist: {target_dir}")
    elif not target_dir.is_dir():
        errors.append(f"Target path is not a directory: {target_dir}")
    elif not os.access(target_dir, os.W_OK):
        errors.append(f"Target directory is not writable: {target_dir}")


def validate_inputs(
    project_name: str | None,
    template: str,
    components: Sequence[str],
    target_dir: Path,
    config: ScaffolderConfig | None = None,
) -> PreflightResult:
    """Validate a scaffold request.

    Args:
        project_name: Name of the directory to create.
        template: A configured template name or ``custom``.
        components: Component names (only used with ``custom``).
        target_dir: Parent directory for the project.
        config: Scaffolder configuration (defaults if None).

    Returns:
        PreflightResult. When a valid checkpoint already occupies the
        project path, ``existing_state`` holds it for resuming.
    """
    config = config or ScaffolderConfig()
    result = PreflightResult()

    # Project name
    name_error = validate_project_name(project_name)
    if name_error:
        result.errors.append(name_error)

    # Template
    valid_templates = config.template_names
    if template not in valid_templates:
        result.errors.append(
            f'Invalid template "{template}". Must be one of: {", ".join(valid_templates)}'
        )

    # Components
    result.resolved_components = resolve_components(
        template, list(components), config, result.errors, result.warnings,
    )

    # Target directory
    target_dir = target_dir.expanduser().resolve()
    check_target_dir(target_dir, result.errors)

    # Project path occupancy
    if name_error:
        return result

    project_path = target_dir / project_name
    result.project_path = project_path

    if project_path.exists() or project_path.is_symlink():
        state_file = checkpoint_path(project_path)
        if not state_file.exists():
            result.errors.append(
                f"Directory already exists: {project_path}. "
                "Delete it or choose a different project name."
            )
            return result
        try:
            result.existing_state = load_checkpoint(state_file)
            logger.info("Found existing checkpoint. Will attempt to resume.")
        except CorruptCheckpointError as e:
            result.errors.append(
                f"State file exists but is corrupted: {state_file} ({e.reason}). "
                "Delete it to start fresh."
            )

    return result

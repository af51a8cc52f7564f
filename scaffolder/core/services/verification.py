"""
Project verification — structural checks on the provisioned tree.

Two tiers:
    required  missing → the project is unusable, verification fails
    expected  missing → warning only
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from scaffolder.core.models.config import VerificationRules


@dataclass
class VerificationReport:
    """Result of checking a project directory."""

    missing: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.missing

    def to_dict(self) -> dict:
        return {"valid": self.valid, "missing": self.missing, "warnings": self.warnings}


def verify_project(
    project_path: Path,
    rules: VerificationRules,
    installed_components: Sequence[str] = (),
) -> VerificationReport:
    """Check required and expected artifacts under ``project_path``.

    Component files are only looked for when the component directory
    itself exists; its absence is already reported once.
    """
    report = VerificationReport()

    for rel in rules.required:
        if not (project_path / rel).exists():
            report.missing.append(rel)

    for rel in rules.expected:
        if not (project_path / rel).exists():
            report.warnings.append(f"Expected not found: {rel}")

    ui_dir = project_path / rules.component_dir
    if ui_dir.is_dir():
        for name in installed_components:
            filename = f"{name}{rules.component_suffix}"
            if not (ui_dir / filename).exists():
                report.warnings.append(
                    f"Component file not found: {rules.component_dir}/{filename}"
                )

    return report

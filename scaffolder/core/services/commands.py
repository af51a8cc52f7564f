"""
External command shapes for each provisioning step.

The pipeline treats these tools as opaque: a command, its arguments,
where to run it. Each builder also yields the literal command line a
user can paste to run the step by hand.
"""

from __future__ import annotations

import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from scaffolder.core.models.config import ScaffolderConfig

BOOTSTRAP_LABEL = "Project bootstrap"


@dataclass(frozen=True)
class ToolCommand:
    """One external invocation."""

    label: str
    command: str
    args: tuple[str, ...]
    cwd: Path

    @property
    def command_line(self) -> str:
        return shlex.join([self.command, *self.args])


def bootstrap_command(config: ScaffolderConfig, project_name: str, parent_dir: Path) -> ToolCommand:
    tools = config.tools
    return ToolCommand(
        label=BOOTSTRAP_LABEL,
        command=tools.npx,
        args=(tools.bootstrap_package, project_name, "--template", tools.bootstrap_template),
        cwd=parent_dir,
    )


def dependency_install_command(config: ScaffolderConfig, project_path: Path) -> ToolCommand:
    return ToolCommand(
        label="Dependency install",
        command=config.tools.npm,
        args=("install",),
        cwd=project_path,
    )


def tool_init_command(config: ScaffolderConfig, project_path: Path) -> ToolCommand:
    tools = config.tools
    return ToolCommand(
        label="UI kit init",
        command=tools.npx,
        args=(tools.ui_package, "init", "--yes", "--defaults", "--force", "--cwd", str(project_path)),
        cwd=project_path,
    )


def component_add_command(
    config: ScaffolderConfig,
    project_path: Path,
    components: Sequence[str],
) -> ToolCommand:
    """Install one or many registry components in a single call."""
    tools = config.tools
    names = list(components)
    label = f"Install {names[0]}" if len(names) == 1 else "Component batch install"
    return ToolCommand(
        label=label,
        command=tools.npx,
        args=(
            tools.ui_package, "add",
            "--registry", config.registry_url,
            "--yes", "--overwrite",
            "--cwd", str(project_path),
            *names,
        ),
        cwd=project_path,
    )


def remediation_for(step_command: ToolCommand) -> list[str]:
    """Manual recovery hints for a failed fatal step."""
    if step_command.label == BOOTSTRAP_LABEL:
        return [
            f"Check npm/npx installation: {step_command.command} --version",
            f"Manual fallback: cd {shlex.quote(str(step_command.cwd))} && {step_command.command_line}",
        ]
    return [f"Try manually: cd {shlex.quote(str(step_command.cwd))} && {step_command.command_line}"]

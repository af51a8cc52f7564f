"""
CLI rendering for scaffold results and checkpoints.

Thin presentation layer: everything shown here is already decided by
the use cases. Output goes to stdout; logs stay on stderr.
"""

from __future__ import annotations

from datetime import datetime

import click

from scaffolder.adapters.base import format_duration
from scaffolder.core.models.config import ScaffolderConfig
from scaffolder.core.models.state import (
    BOOTSTRAP,
    COMPONENT_INSTALL,
    DEPENDENCY_INSTALL,
    TOOL_INIT,
    VERIFICATION,
    ScaffoldState,
    StepStatus,
)

_RULE = "=" * 55

STEP_LABELS = {
    BOOTSTRAP: "Vite project creation",
    DEPENDENCY_INSTALL: "Dependency install",
    TOOL_INIT: "shadcn/ui init",
    COMPONENT_INSTALL: "Component installation",
    VERIFICATION: "Project verification",
}

# Status → (tag, color). A step still "running" in a final summary was aborted.
_STATUS_TAGS = {
    StepStatus.DONE: (" DONE ", "green"),
    StepStatus.FAILED: (" FAIL ", "red"),
    StepStatus.PENDING: (" SKIP ", "bright_black"),
    StepStatus.RUNNING: (" ABRT ", "yellow"),
}


def elapsed_seconds(state: ScaffoldState) -> float:
    """Seconds between ``started_at`` and ``updated_at`` (0 if unparseable)."""
    try:
        started = datetime.fromisoformat(state.started_at)
        updated = datetime.fromisoformat(state.updated_at)
    except ValueError:
        return 0.0
    return max((updated - started).total_seconds(), 0.0)


def headline(state: ScaffoldState) -> tuple[str, str]:
    """Summary title and its color."""
    if state.all_done and not state.failed_components:
        return "PROJECT SCAFFOLDED SUCCESSFULLY", "green"
    if state.all_done:
        return "PROJECT CREATED (with warnings)", "yellow"
    return "SCAFFOLDING INCOMPLETE", "red"


def print_steps(state: ScaffoldState) -> None:
    click.echo("  Steps:")
    for step, label in STEP_LABELS.items():
        tag, color = _STATUS_TAGS[state.status_of(step)]
        click.echo("    ", nl=False)
        click.secho(tag, fg=color, nl=False)
        click.echo(f" {label}")


def print_summary(state: ScaffoldState, config: ScaffolderConfig) -> None:
    """Human-readable end-of-run summary."""
    title, color = headline(state)

    click.echo()
    click.echo(_RULE)
    click.secho(f"  {title}", fg=color, bold=True)
    click.echo(_RULE)
    click.echo(f"  Project:    {state.project_name}")
    click.echo(f"  Path:       {state.project_path}")
    click.echo(f"  Template:   {state.template}")
    click.echo(f"  Duration:   {format_duration(elapsed_seconds(state))}")
    click.echo()
    print_steps(state)

    if state.installed_components:
        click.echo()
        click.echo(f"  Installed ({len(state.installed_components)}):")
        for name in state.installed_components:
            click.secho("    + ", fg="green", nl=False)
            click.echo(name)

    if state.failed_components:
        click.echo()
        click.echo(f"  Failed ({len(state.failed_components)}):")
        for name in state.failed_components:
            click.secho("    ! ", fg="red", nl=False)
            click.echo(name)

    if state.error:
        click.echo()
        click.secho(f"  Error: {state.error}", fg="red")

    click.echo(_RULE)

    if state.all_done:
        click.echo()
        click.echo("  Next steps:")
        click.echo(f"    cd {state.project_name}")
        click.echo("    npm run dev")
        click.echo()
        click.echo("  Add more components:")
        click.echo(
            f"    {config.tools.npx} {config.tools.ui_package} add "
            f"--registry {config.registry_url} [component]"
        )
        click.echo()


def print_preflight_errors(errors: list[str], warnings: list[str]) -> None:
    if errors:
        click.secho("❌ Validation failed:", fg="red", bold=True)
        for err in errors:
            click.echo(f"   • {err}")
    if warnings:
        click.echo()
        click.secho("⚠️  Warnings:", fg="yellow")
        for warn in warnings:
            click.echo(f"   • {warn}")
    click.echo()


def print_remediation(lines: list[str]) -> None:
    if not lines:
        return
    click.secho("  Remediation:", fg="yellow")
    for line in lines:
        click.echo(f"    → {line}")
    click.echo()

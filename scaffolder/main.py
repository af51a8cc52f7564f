"""
shadcn scaffolder — CLI entrypoint.

Usage:
    scaffolder --help
    scaffolder create my-app --template minimal
    scaffolder create my-app --template custom --components button,card
    scaffolder status ./my-app
    scaffolder templates
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from scaffolder import __version__
from scaffolder.core.observability.logging_config import (
    DEFAULT_LEVEL,
    LOG_FILE_ENV_VAR,
    LOG_FILE_LEVEL_ENV_VAR,
    LOG_LEVEL_ENV_VAR,
    setup_logging,
)


@click.group()
@click.version_option(version=__version__, prog_name="scaffolder")
@click.option("--verbose", "-v", is_flag=True, help="Timestamped, module-tagged log lines.")
@click.option("--quiet", "-q", is_flag=True, help="Only log errors.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=False, dir_okay=False),
    default=None,
    help="Path to a scaffolder YAML config (default: $SCAFFOLDER_CONFIG or built-ins).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """Scaffold Vite + React + shadcn/ui projects, resumably."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    if debug:
        level = "DEBUG"
    elif quiet:
        level = "ERROR"
    elif verbose:
        level = "INFO"
    else:
        level = os.environ.get(LOG_LEVEL_ENV_VAR, DEFAULT_LEVEL)

    setup_logging(
        level=level,
        log_file=os.environ.get(LOG_FILE_ENV_VAR),
        log_file_level=os.environ.get(LOG_FILE_LEVEL_ENV_VAR),
        detailed=verbose,
    )


def _load_config(ctx: click.Context):
    """Load config or exit 1 with the reason."""
    from scaffolder.core.config.loader import ConfigError, load_config

    try:
        return load_config(ctx.obj.get("config_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)


@cli.command()
@click.argument("project_name")
@click.option("--template", "-t", default="minimal", show_default=True,
              help="Component template (see `scaffolder templates`).")
@click.option("--components", "-c", default=None,
              help="Comma-separated component names (with --template custom).")
@click.option("--target", "target_dir", type=click.Path(file_okay=False), default=".",
              show_default=True, help="Parent directory for the project.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def create(
    ctx: click.Context,
    project_name: str,
    template: str,
    components: str | None,
    target_dir: str,
    as_json: bool,
) -> None:
    """Create PROJECT_NAME, or resume it if a checkpoint is found.

    Examples:

        scaffolder create my-app

        scaffolder create my-app -t custom -c button,card,dialog --target ~/projects
    """
    from scaffolder.adapters.shell.command import SubprocessRunner
    from scaffolder.core.use_cases.scaffold import (
        ScaffoldRequest,
        scaffold_project,
        split_components,
    )
    from scaffolder.ui.cli.render import (
        print_preflight_errors,
        print_remediation,
        print_summary,
    )

    config = _load_config(ctx)
    runner = ctx.obj.get("runner") or SubprocessRunner(
        termination_grace=config.timeouts.termination_grace,
    )

    request = ScaffoldRequest(
        project_name=project_name,
        template=template,
        components=split_components(components),
        target_dir=Path(target_dir),
    )
    result = scaffold_project(request, runner, config)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(result.exit_code)

    if result.pipeline is None:
        print_preflight_errors(result.preflight.errors, result.preflight.warnings)
        sys.exit(result.exit_code)

    if result.resumed:
        click.secho(f"↻ Resumed from checkpoint in {result.pipeline.state.project_path}",
                    fg="cyan")

    print_summary(result.pipeline.state, config)
    print_remediation(result.pipeline.remediation)
    sys.exit(result.exit_code)


@cli.command()
@click.argument("project_path", type=click.Path(file_okay=False))
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def status(project_path: str, as_json: bool) -> None:
    """Show the recorded progress of an unfinished project."""
    from scaffolder.core.use_cases.status import get_status
    from scaffolder.ui.cli.render import print_steps

    result = get_status(Path(project_path))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(1 if result.error else 0)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    if result.state is None:
        click.secho(f"✅ No checkpoint in {result.project_path}", fg="green")
        click.echo("   The project finished scaffolding or was never started here.")
        return

    state = result.state
    click.secho(f"\n📋 {state.project_name}", fg="cyan", bold=True)
    click.echo(f"   Template: {state.template}")
    click.echo(f"   Components: {', '.join(state.components) or '(none)'}")
    click.echo(f"   Updated: {state.updated_at}")
    click.echo()
    print_steps(state)

    if state.error:
        click.echo()
        click.secho(f"   Last error: {state.error}", fg="red")
    if result.next_step:
        click.echo()
        click.echo(f"   Resume with the original create command to continue at {result.next_step}.")
    click.echo()


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def templates(ctx: click.Context, as_json: bool) -> None:
    """List available component templates."""
    from scaffolder.core.models.config import CUSTOM_TEMPLATE

    config = _load_config(ctx)

    if as_json:
        data = {
            name: {"description": spec.description, "components": spec.components}
            for name, spec in config.templates.items()
        }
        click.echo(json.dumps(data, indent=2))
        return

    click.secho("\n🧩 Templates", fg="cyan", bold=True)
    for name, spec in config.templates.items():
        click.secho(f"   {name}", fg="white", bold=True, nl=False)
        click.echo(f" — {spec.description}" if spec.description else "")
        click.echo(f"     {', '.join(spec.components)}")
    click.secho(f"   {CUSTOM_TEMPLATE}", fg="white", bold=True, nl=False)
    click.echo(
        f" — your own list via --components (max {config.max_custom_components})"
    )
    click.echo()


if __name__ == "__main__":
    cli()

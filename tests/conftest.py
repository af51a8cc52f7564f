"""
Shared test fixtures and configuration.
"""

from pathlib import Path

import pytest

from scaffolder.adapters.mock import FakeClock, RunnerCall, ScriptedRunner
from scaffolder.core.models.config import ScaffolderConfig


def added_components(call: RunnerCall) -> list[str]:
    """Component names passed to an ``add`` call (everything after --cwd <path>)."""
    idx = call.args.index("--cwd")
    return call.args[idx + 2:]


def _fake_bootstrap(call: RunnerCall) -> None:
    project = call.cwd / call.args[1]
    (project / "src").mkdir(parents=True, exist_ok=True)
    (project / "package.json").write_text('{"name": "%s"}\n' % call.args[1])
    (project / "vite.config.ts").write_text("export default {}\n")


def _fake_npm_install(call: RunnerCall) -> None:
    (call.cwd / "node_modules").mkdir(exist_ok=True)


def _fake_ui_init(call: RunnerCall) -> None:
    (call.cwd / "components.json").write_text("{}\n")
    (call.cwd / "src" / "lib").mkdir(parents=True, exist_ok=True)
    (call.cwd / "src" / "lib" / "utils.ts").write_text("export {}\n")
    (call.cwd / "src" / "components" / "ui").mkdir(parents=True, exist_ok=True)


def _fake_ui_add(call: RunnerCall) -> None:
    ui_dir = call.cwd / "src" / "components" / "ui"
    if not ui_dir.is_dir():
        return
    for name in added_components(call):
        (ui_dir / f"{name}.tsx").write_text("export {}\n")


def install_fake_tools(runner: ScriptedRunner) -> ScriptedRunner:
    """Make ``runner`` leave behind the files the real tools would."""
    runner.on_call("create-vite", _fake_bootstrap)
    runner.on_call("npm install", _fake_npm_install)
    runner.on_call("shadcn@latest init", _fake_ui_init)
    runner.on_call("shadcn@latest add", _fake_ui_add)
    return runner


@pytest.fixture
def config() -> ScaffolderConfig:
    """Default scaffolder configuration."""
    return ScaffolderConfig()


@pytest.fixture
def clock() -> FakeClock:
    """A clock that only moves when a scripted call costs time."""
    return FakeClock()


@pytest.fixture
def runner(clock: FakeClock) -> ScriptedRunner:
    """Scripted runner whose tools materialize a plausible project tree."""
    return install_fake_tools(ScriptedRunner(clock=clock))


@pytest.fixture
def target_dir(tmp_path: Path) -> Path:
    """Parent directory projects are created in."""
    target = tmp_path / "projects"
    target.mkdir()
    return target

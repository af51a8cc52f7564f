"""
Tests for services — external command shapes and project verification.
"""

from pathlib import Path

from scaffolder.core.models.config import ScaffolderConfig, VerificationRules
from scaffolder.core.services.commands import (
    bootstrap_command,
    component_add_command,
    dependency_install_command,
    remediation_for,
    tool_init_command,
)
from scaffolder.core.services.verification import verify_project

# ── Commands ─────────────────────────────────────────────────────────


class TestCommands:
    def test_bootstrap_runs_in_parent(self, tmp_path: Path):
        cmd = bootstrap_command(ScaffolderConfig(), "my-app", tmp_path)
        assert cmd.command == "npx"
        assert cmd.args == ("create-vite@latest", "my-app", "--template", "react-ts")
        assert cmd.cwd == tmp_path

    def test_dependency_install(self, tmp_path: Path):
        cmd = dependency_install_command(ScaffolderConfig(), tmp_path)
        assert cmd.command_line == "npm install"
        assert cmd.cwd == tmp_path

    def test_tool_init(self, tmp_path: Path):
        cmd = tool_init_command(ScaffolderConfig(), tmp_path)
        assert cmd.args[:5] == ("shadcn@latest", "init", "--yes", "--defaults", "--force")
        assert cmd.args[-2:] == ("--cwd", str(tmp_path))

    def test_component_add(self, tmp_path: Path):
        config = ScaffolderConfig()
        cmd = component_add_command(config, tmp_path, ["button", "card"])
        assert cmd.args == (
            "shadcn@latest", "add", "--registry", config.registry_url,
            "--yes", "--overwrite", "--cwd", str(tmp_path), "button", "card",
        )
        assert cmd.label == "Component batch install"

    def test_component_add_single_label(self, tmp_path: Path):
        cmd = component_add_command(ScaffolderConfig(), tmp_path, ["button"])
        assert cmd.label == "Install button"

    def test_configured_tools(self, tmp_path: Path):
        config = ScaffolderConfig.model_validate({"tools": {"npm": "pnpm", "npx": "bunx"}})
        assert dependency_install_command(config, tmp_path).command == "pnpm"
        assert bootstrap_command(config, "a", tmp_path).command == "bunx"

    def test_bootstrap_remediation(self, tmp_path: Path):
        cmd = bootstrap_command(ScaffolderConfig(), "my-app", tmp_path)
        lines = remediation_for(cmd)
        assert lines[0] == "Check npm/npx installation: npx --version"
        assert lines[1].endswith("npx create-vite@latest my-app --template react-ts")

    def test_remediation_quotes_paths(self, tmp_path: Path):
        project = tmp_path / "my app"
        cmd = dependency_install_command(ScaffolderConfig(), project)
        assert remediation_for(cmd) == [f"Try manually: cd '{project}' && npm install"]


# ── Verification ─────────────────────────────────────────────────────


def _complete_project(root: Path) -> Path:
    for rel in ("node_modules", "src/lib", "src/components/ui"):
        (root / rel).mkdir(parents=True, exist_ok=True)
    for rel in ("package.json", "vite.config.ts", "components.json", "src/lib/utils.ts"):
        (root / rel).write_text("")
    return root


class TestVerifyProject:
    def test_complete_project(self, tmp_path: Path):
        report = verify_project(_complete_project(tmp_path), VerificationRules())
        assert report.valid
        assert report.warnings == []

    def test_missing_required(self, tmp_path: Path):
        root = _complete_project(tmp_path)
        (root / "package.json").unlink()
        (root / "node_modules").rmdir()
        report = verify_project(root, VerificationRules())
        assert not report.valid
        assert report.missing == ["package.json", "node_modules"]

    def test_missing_expected_is_warning(self, tmp_path: Path):
        root = _complete_project(tmp_path)
        (root / "src" / "lib" / "utils.ts").unlink()
        report = verify_project(root, VerificationRules())
        assert report.valid
        assert report.warnings == ["Expected not found: src/lib/utils.ts"]

    def test_component_files(self, tmp_path: Path):
        root = _complete_project(tmp_path)
        (root / "src" / "components" / "ui" / "button.tsx").write_text("")
        report = verify_project(root, VerificationRules(), ["button", "card"])
        assert report.valid
        assert report.warnings == ["Component file not found: src/components/ui/card.tsx"]

    def test_no_component_checks_without_ui_dir(self, tmp_path: Path):
        root = _complete_project(tmp_path)
        (root / "src" / "components" / "ui").rmdir()
        report = verify_project(root, VerificationRules(), ["button"])
        assert report.warnings == ["Expected not found: src/components/ui"]

    def test_to_dict(self, tmp_path: Path):
        data = verify_project(tmp_path, VerificationRules()).to_dict()
        assert data["valid"] is False
        assert "vite.config.ts" in data["missing"]

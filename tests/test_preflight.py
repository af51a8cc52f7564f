"""
Tests for preflight validation — names, templates, components, target directory.
"""

import json
import os
from pathlib import Path

import pytest

from scaffolder.core.models.config import ScaffolderConfig
from scaffolder.core.models.state import ScaffoldState
from scaffolder.core.persistence.state_file import checkpoint_path, save_checkpoint
from scaffolder.core.services.preflight import (
    resolve_components,
    validate_inputs,
    validate_project_name,
)


class TestProjectName:
    @pytest.mark.parametrize("name", ["my-app", "App2", "a", "my.app_v2", "x-1.0"])
    def test_accepted(self, name):
        assert validate_project_name(name) is None

    @pytest.mark.parametrize(
        "name", ["1app", "-app", ".hidden", "my app", "a/b", "../x", "app!", "_app"],
    )
    def test_rejected(self, name):
        assert "Invalid project name" in validate_project_name(name)

    def test_empty(self):
        assert validate_project_name("") == "Project name is required."

    def test_no_filesystem_access(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        validate_project_name("my-app")
        validate_project_name("1bad")
        assert list(tmp_path.iterdir()) == []


class TestResolveComponents:
    def _resolve(self, template, components, config=None):
        errors: list[str] = []
        warnings: list[str] = []
        resolved = resolve_components(
            template, components, config or ScaffolderConfig(), errors, warnings,
        )
        return resolved, errors, warnings

    def test_named_template(self):
        resolved, errors, _ = self._resolve("minimal", [])
        assert resolved == ["button", "card", "badge", "input"]
        assert errors == []

    def test_components_ignored_for_named_template(self):
        resolved, errors, warnings = self._resolve("form", ["button"])
        assert len(resolved) == 10
        assert errors == []
        assert len(warnings) == 1

    def test_custom_requires_components(self):
        _, errors, _ = self._resolve("custom", [])
        assert errors == ["Custom template requires at least one component via --components."]

    def test_custom_limit(self):
        names = [f"c{i}" for i in range(21)]
        _, errors, _ = self._resolve("custom", names)
        assert errors == ["Too many components (21). Maximum is 20."]

    def test_custom_limit_configurable(self):
        _, errors, _ = self._resolve("custom", ["a", "b", "c"], ScaffolderConfig(max_custom_components=2))
        assert "Maximum is 2" in errors[0]

    def test_invalid_component_names(self):
        _, errors, _ = self._resolve("custom", ["button", "Card", "my_thing", "1x"])
        assert len(errors) == 3
        assert all("Invalid component name" in e for e in errors)

    def test_duplicates_error_and_dedupe(self):
        resolved, errors, _ = self._resolve("custom", ["button", "card", "button"])
        assert resolved == ["button", "card"]
        assert errors == ["Duplicate component names detected: button. Remove duplicates."]

    def test_unknown_template(self):
        resolved, errors, _ = self._resolve("fancy", [])
        assert resolved == []
        assert errors == []  # reported by validate_inputs


class TestValidateInputs:
    def test_valid_fresh(self, target_dir: Path):
        result = validate_inputs("my-app", "minimal", [], target_dir)
        assert result.valid
        assert not result.resuming
        assert result.project_path == target_dir.resolve() / "my-app"
        assert result.resolved_components == ["button", "card", "badge", "input"]

    def test_never_creates_anything(self, target_dir: Path):
        validate_inputs("my-app", "minimal", [], target_dir)
        assert list(target_dir.iterdir()) == []

    def test_errors_accumulate(self, tmp_path: Path):
        result = validate_inputs("1bad", "fancy", [], tmp_path / "missing")
        assert len(result.errors) == 3
        assert any("Invalid project name" in e for e in result.errors)
        assert any('Invalid template "fancy"' in e for e in result.errors)
        assert any("Target directory does not exist" in e for e in result.errors)

    def test_template_list_in_error(self, target_dir: Path):
        result = validate_inputs("my-app", "fancy", [], target_dir)
        assert "minimal, form, dashboard, custom" in result.errors[0]

    def test_target_not_a_directory(self, tmp_path: Path):
        file_path = tmp_path / "file.txt"
        file_path.write_text("x")
        result = validate_inputs("my-app", "minimal", [], file_path)
        assert result.errors == [f"Target path is not a directory: {file_path.resolve()}"]

    @pytest.mark.skipif(os.geteuid() == 0, reason="root can write anywhere")
    def test_target_not_writable(self, target_dir: Path):
        target_dir.chmod(0o500)
        try:
            result = validate_inputs("my-app", "minimal", [], target_dir)
        finally:
            target_dir.chmod(0o700)
        assert any("not writable" in e for e in result.errors)

    def test_existing_directory_without_checkpoint(self, target_dir: Path):
        (target_dir / "my-app").mkdir()
        result = validate_inputs("my-app", "minimal", [], target_dir)
        assert not result.valid
        assert "Directory already exists" in result.errors[0]
        assert "choose a different project name" in result.errors[0]

    def test_existing_file_occupies_path(self, target_dir: Path):
        (target_dir / "my-app").write_text("x")
        result = validate_inputs("my-app", "minimal", [], target_dir)
        assert not result.valid

    def test_existing_checkpoint_resumes(self, target_dir: Path):
        project = target_dir / "my-app"
        project.mkdir()
        state = ScaffoldState.create("my-app", project, "minimal", ["button"])
        save_checkpoint(state, checkpoint_path(project))

        result = validate_inputs("my-app", "minimal", [], target_dir)
        assert result.valid
        assert result.resuming
        assert result.existing_state.project_name == "my-app"

    def test_corrupted_checkpoint(self, target_dir: Path):
        project = target_dir / "my-app"
        project.mkdir()
        checkpoint_path(project).write_text("{broken")

        result = validate_inputs("my-app", "minimal", [], target_dir)
        assert not result.valid
        assert "State file exists but is corrupted" in result.errors[0]
        assert "Delete it to start fresh." in result.errors[0]

    def test_unsupported_checkpoint_version(self, target_dir: Path):
        project = target_dir / "my-app"
        project.mkdir()
        doc = ScaffoldState.create("my-app", project, "minimal", []).to_document()
        doc["version"] = 99
        checkpoint_path(project).write_text(json.dumps(doc))

        result = validate_inputs("my-app", "minimal", [], target_dir)
        assert not result.valid
        assert "unsupported version" in result.errors[0]

    def test_target_dir_expanded(self, target_dir: Path, monkeypatch):
        monkeypatch.setenv("HOME", str(target_dir))
        result = validate_inputs("my-app", "minimal", [], Path("~"))
        assert result.project_path == target_dir.resolve() / "my-app"

    def test_duplicate_components_end_to_end(self, target_dir: Path):
        result = validate_inputs("my-app", "custom", ["button", "button"], target_dir)
        assert not result.valid
        assert result.resolved_components == ["button"]
        assert any("Duplicate component names detected: button" in e for e in result.errors)
        assert list(target_dir.iterdir()) == []

    def test_to_dict(self, target_dir: Path):
        data = validate_inputs("my-app", "minimal", [], target_dir).to_dict()
        assert data["valid"] is True
        assert data["resuming"] is False

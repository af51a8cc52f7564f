"""
Tests for domain models — checkpoint state and configuration.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from scaffolder.core.models import (
    CUSTOM_TEMPLATE,
    STEP_ORDER,
    ScaffolderConfig,
    ScaffoldState,
    StepStatus,
    TemplateSpec,
)


def _state(**overrides) -> ScaffoldState:
    state = ScaffoldState.create(
        project_name="my-app",
        project_path=Path("/tmp/projects/my-app"),
        template="minimal",
        components=["button", "card"],
    )
    for key, value in overrides.items():
        setattr(state, key, value)
    return state


# ── ScaffoldState ───────────────────────────────────────────────────


class TestScaffoldStateCreate:
    def test_all_steps_pending_in_order(self):
        state = _state()
        assert list(state.steps) == list(STEP_ORDER)
        assert all(s is StepStatus.PENDING for s in state.steps.values())

    def test_fresh_creation_defaults_true(self):
        assert _state().fresh_creation is True

    def test_path_property(self):
        assert _state().path == Path("/tmp/projects/my-app")

    def test_components_copied(self):
        components = ["button"]
        state = ScaffoldState.create("a", Path("/x/a"), "custom", components)
        components.append("card")
        assert state.components == ["button"]

    def test_no_error_initially(self):
        state = _state()
        assert state.error is None
        assert state.installed_components == []
        assert state.failed_components == []


class TestScaffoldStateDocument:
    def test_camel_case_keys(self):
        doc = _state().to_document()
        for key in (
            "version", "projectName", "projectPath", "template", "components",
            "startedAt", "updatedAt", "freshCreation", "steps",
            "installedComponents", "failedComponents", "error",
        ):
            assert key in doc

    def test_step_values_are_strings(self):
        doc = _state().to_document()
        assert doc["steps"]["bootstrap"] == "pending"
        assert doc["version"] == 1

    def test_document_roundtrip(self):
        state = _state()
        state.set_step("bootstrap", StepStatus.DONE)
        loaded = ScaffoldState.model_validate(state.to_document())
        assert loaded.to_document() == state.to_document()

    def test_accepts_snake_case_too(self):
        state = ScaffoldState(project_name="x", project_path="/x", template="minimal")
        assert state.project_name == "x"


class TestScaffoldStateValidation:
    def test_missing_step_key_rejected(self):
        doc = _state().to_document()
        del doc["steps"]["verification"]
        with pytest.raises(ValidationError):
            ScaffoldState.model_validate(doc)

    def test_extra_step_key_rejected(self):
        doc = _state().to_document()
        doc["steps"]["deploy"] = "pending"
        with pytest.raises(ValidationError):
            ScaffoldState.model_validate(doc)

    def test_unknown_status_rejected(self):
        doc = _state().to_document()
        doc["steps"]["bootstrap"] = "maybe"
        with pytest.raises(ValidationError):
            ScaffoldState.model_validate(doc)

    def test_steps_reordered(self):
        doc = _state().to_document()
        doc["steps"] = dict(reversed(list(doc["steps"].items())))
        state = ScaffoldState.model_validate(doc)
        assert list(state.steps) == list(STEP_ORDER)

    def test_other_version_rejected(self):
        doc = _state().to_document()
        doc["version"] = 2
        with pytest.raises(ValidationError):
            ScaffoldState.model_validate(doc)

    def test_installed_and_failed_disjoint(self):
        doc = _state().to_document()
        doc["installedComponents"] = ["button"]
        doc["failedComponents"] = ["button"]
        with pytest.raises(ValidationError):
            ScaffoldState.model_validate(doc)


class TestScaffoldStateMutations:
    def test_set_step(self):
        state = _state()
        state.set_step("toolInit", StepStatus.RUNNING)
        assert state.status_of("toolInit") is StepStatus.RUNNING
        assert state.running_steps() == ["toolInit"]

    def test_set_step_with_error(self):
        state = _state()
        state.set_step("bootstrap", StepStatus.FAILED, error="boom")
        assert state.error == "boom"

    def test_set_step_without_error_keeps_previous(self):
        state = _state(error="earlier")
        state.set_step("bootstrap", StepStatus.DONE)
        assert state.error == "earlier"

    def test_set_unknown_step(self):
        with pytest.raises(KeyError):
            _state().set_step("deploy", StepStatus.DONE)

    def test_all_done(self):
        state = _state()
        assert not state.all_done
        for step in STEP_ORDER:
            state.set_step(step, StepStatus.DONE)
        assert state.all_done

    def test_record_components_replaces_lists(self):
        state = _state()
        state.record_components(installed=["button"], failed=["card"])
        # A later attempt may flip an item from failed to installed
        state.record_components(installed=["button", "card"], failed=[])
        assert state.installed_components == ["button", "card"]
        assert state.failed_components == []

    def test_record_components_flip_to_failed(self):
        state = _state()
        state.record_components(installed=["button", "card"], failed=[])
        state.record_components(installed=["button"], failed=["card"])
        assert state.failed_components == ["card"]

    def test_touch_updates_timestamp(self):
        state = _state(updated_at="2000-01-01T00:00:00+00:00")
        state.touch()
        assert state.updated_at != "2000-01-01T00:00:00+00:00"


# ── ScaffolderConfig ────────────────────────────────────────────────


class TestScaffolderConfig:
    def test_default_templates(self):
        config = ScaffolderConfig()
        assert config.templates["minimal"].components == ["button", "card", "badge", "input"]
        assert len(config.templates["form"].components) == 10
        assert len(config.templates["dashboard"].components) == 12

    def test_template_names_include_custom(self):
        names = ScaffolderConfig().template_names
        assert names[-1] == CUSTOM_TEMPLATE
        assert {"minimal", "form", "dashboard"} <= set(names)

    def test_default_timeouts(self):
        t = ScaffolderConfig().timeouts
        assert (t.bootstrap, t.dependency_install, t.tool_init) == (120, 120, 60)
        assert t.component_install == 300
        assert t.per_component_cap == 60
        assert t.budget_reserve == 5

    def test_custom_template_name_reserved(self):
        with pytest.raises(ValidationError):
            ScaffolderConfig(templates={"custom": TemplateSpec(components=["button"])})

    def test_max_custom_components_positive(self):
        with pytest.raises(ValidationError):
            ScaffolderConfig(max_custom_components=0)

    def test_template_component_names_validated(self):
        with pytest.raises(ValidationError, match="invalid component name"):
            TemplateSpec(components=["button", "Button", "a b"])

    def test_template_duplicates_rejected(self):
        with pytest.raises(ValidationError, match="duplicate"):
            TemplateSpec(components=["button", "button"])

    def test_template_needs_components(self):
        with pytest.raises(ValidationError):
            TemplateSpec(components=[])

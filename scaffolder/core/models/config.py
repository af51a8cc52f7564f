"""
Scaffolder configuration model.

Every knob has a default, so an empty (or absent) config file is
valid. A YAML file only needs to list what it overrides.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, Field, field_validator

CUSTOM_TEMPLATE = "custom"

REGISTRY_URL = "https://raw.githubusercontent.com/CBDB-Code/UI_Shadcn/main/registry.json"

COMPONENT_NAME_RE = re.compile(r"^[a-z][a-z0-9-]*$")


class TemplateSpec(BaseModel):
    """A named, fixed list of components."""

    description: str = ""
    components: list[str]

    @field_validator("components")
    @classmethod
    def _valid_component_names(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("a template needs at least one component")
        bad = [name for name in value if not COMPONENT_NAME_RE.match(name)]
        if bad:
            raise ValueError(
                f"invalid component name(s): {', '.join(bad)} "
                "(use lowercase letters, digits, hyphens)"
            )
        dupes = sorted({name for name in value if value.count(name) > 1})
        if dupes:
            raise ValueError(f"duplicate component name(s): {', '.join(dupes)}")
        return value


def _default_templates() -> dict[str, TemplateSpec]:
    return {
        "minimal": TemplateSpec(
            description="Basic UI primitives (4 components)",
            components=["button", "card", "badge", "input"],
        ),
        "form": TemplateSpec(
            description="Form-focused layout (10 components)",
            components=[
                "button", "card", "input", "label", "form",
                "select", "checkbox", "radio-group", "textarea", "switch",
            ],
        ),
        "dashboard": TemplateSpec(
            description="Full dashboard with charts and navigation (12 components)",
            components=[
                "button", "card", "badge", "input", "tabs", "table",
                "chart", "sidebar", "dropdown-menu", "avatar", "separator", "skeleton",
            ],
        ),
    }


class Timeouts(BaseModel):
    """Time limits, in seconds."""

    bootstrap: float = 120.0
    dependency_install: float = 120.0
    tool_init: float = 60.0
    component_install: float = 300.0       # shared budget for batch + fallback
    per_component_cap: float = 60.0        # ceiling for one fallback attempt
    budget_reserve: float = 5.0            # stop attempting below this headroom
    termination_grace: float = 10.0        # SIGTERM → SIGKILL delay


class ToolsConfig(BaseModel):
    """Executable names and package specifiers of the external tools."""

    npx: str = "npx"
    npm: str = "npm"
    bootstrap_package: str = "create-vite@latest"
    bootstrap_template: str = "react-ts"
    ui_package: str = "shadcn@latest"
    # Must exist after the corresponding step's command succeeds
    bootstrap_marker: str = "package.json"
    dependency_marker: str = "node_modules"


class VerificationRules(BaseModel):
    """Paths (relative to the project) checked after provisioning."""

    required: list[str] = Field(
        default_factory=lambda: ["package.json", "node_modules", "src", "vite.config.ts"]
    )
    expected: list[str] = Field(
        default_factory=lambda: ["components.json", "src/lib/utils.ts", "src/components/ui"]
    )
    component_dir: str = "src/components/ui"
    component_suffix: str = ".tsx"


class ScaffolderConfig(BaseModel):
    """Root configuration."""

    registry_url: str = REGISTRY_URL
    timeouts: Timeouts = Field(default_factory=Timeouts)
    tools: ToolsConfig = Field(default_factory=ToolsConfig)
    templates: dict[str, TemplateSpec] = Field(default_factory=_default_templates)
    max_custom_components: int = Field(default=20, ge=1)
    verification: VerificationRules = Field(default_factory=VerificationRules)

    @field_validator("templates")
    @classmethod
    def _custom_is_reserved(cls, value: dict[str, TemplateSpec]) -> dict[str, TemplateSpec]:
        if CUSTOM_TEMPLATE in value:
            raise ValueError(f"'{CUSTOM_TEMPLATE}' is reserved and cannot be defined as a template")
        return value

    @property
    def template_names(self) -> list[str]:
        """Known templates, including the custom marker."""
        return [*self.templates, CUSTOM_TEMPLATE]

"""
Domain models — Pydantic types for the scaffolder.

All models are re-exported here for convenient access:

    from scaffolder.core.models import ScaffoldState, StepStatus, ScaffolderConfig
"""

from scaffolder.core.models.config import (
    CUSTOM_TEMPLATE,
    REGISTRY_URL,
    ScaffolderConfig,
    TemplateSpec,
    Timeouts,
    ToolsConfig,
    VerificationRules,
)
from scaffolder.core.models.state import (
    BOOTSTRAP,
    CHECKPOINT_VERSION,
    COMPONENT_INSTALL,
    DEPENDENCY_INSTALL,
    STEP_ORDER,
    TOOL_INIT,
    VERIFICATION,
    ScaffoldState,
    StepStatus,
)

__all__ = [
    # state.py
    "BOOTSTRAP",
    "CHECKPOINT_VERSION",
    "COMPONENT_INSTALL",
    # config.py
    "CUSTOM_TEMPLATE",
    "DEPENDENCY_INSTALL",
    "REGISTRY_URL",
    "STEP_ORDER",
    "ScaffoldState",
    "ScaffolderConfig",
    "StepStatus",
    "TOOL_INIT",
    "TemplateSpec",
    "Timeouts",
    "ToolsConfig",
    "VERIFICATION",
    "VerificationRules",
]

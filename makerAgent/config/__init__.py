"""Configuration exports."""

from .project_root import get_project_root, resolve_project_path
from .settings import (
    GovernanceSettings,
    ModelRoutingSettings,
    ObservabilitySettings,
    Settings,
    StorageSettings,
    get_settings,
)

__all__ = [
    "Settings",
    "ModelRoutingSettings",
    "GovernanceSettings",
    "StorageSettings",
    "ObservabilitySettings",
    "get_settings",
    "get_project_root",
    "resolve_project_path",
]

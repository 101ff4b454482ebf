"""Runtime assembly."""

from .app import MakerApp, build_application, build_capability_registry
from .model_resolver import build_model_resolver

__all__ = ["MakerApp", "build_application", "build_capability_registry", "build_model_resolver"]

"""Capability registry and built-in capabilities."""

from .registry import CapabilityMeta, CapabilityRegistry

__all__ = ["CapabilityMeta", "CapabilityRegistry"]

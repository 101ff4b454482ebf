"""makerAgent - a coordinator that delegates work to specialist roles and tracks project goals."""

__version__ = "0.1.0"

"""Tool registry: registration, lookup, and dispatch."""

from .registry import BridgeConvention, ToolRegistration, ToolRegistry

__all__ = ["BridgeConvention", "ToolRegistration", "ToolRegistry"]

"""Tool registry: registration, lookup and listing."""

from .registry import ToolRegistry

__all__ = ["ToolRegistry"]

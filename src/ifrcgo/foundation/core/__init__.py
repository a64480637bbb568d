"""Core tool abstractions.

- Tool: metadata + params schema + async handler record
- ToolMetadata: name, description, category and auth flag
"""

from .base import Tool, ToolMetadata, input_schema

__all__ = ["Tool", "ToolMetadata", "input_schema"]

"""Central registry for tool discovery and lookup.

The registry is filled once at startup from the tool catalogue and then
sealed: the set of tools a server advertises never changes while it runs.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from ifrcgo.foundation.core import Tool, ToolMetadata


class ToolRegistry:
    """Insertion-ordered name -> Tool mapping.
    
    Example:
        >>> registry = ToolRegistry()
        >>> registry.register(appeals_tool)
        >>> registry.seal()
        >>> registry.get("get_appeals").descriptor()["name"]
        'get_appeals'
    """
    
    __slots__ = ("_tools", "_sealed")
    
    def __init__(self) -> None:
        self._tools: dict[str, Tool[Any]] = {}
        self._sealed = False
    
    def register(self, tool: Tool[Any]) -> None:
        """Register a tool; rejects duplicates, short descriptions and a sealed registry."""
        if self._sealed:
            raise RuntimeError(f"Registry is sealed; cannot register '{tool.name}'")
        name = tool.metadata.name
        if name in self._tools:
            raise ValueError(f"Tool '{name}' already registered")
        if len(tool.metadata.description) < 10:
            raise ValueError(f"Tool '{name}' description too short for LLM selection.")
        self._tools[name] = tool
    
    def register_all(self, *tools: Tool[Any]) -> None:
        for tool in tools:
            self.register(tool)
    
    def seal(self) -> None:
        self._sealed = True
    
    @property
    def sealed(self) -> bool:
        return self._sealed
    
    def get(self, name: str) -> Tool[Any] | None:
        """Get tool by name."""
        return self._tools.get(name)
    
    def __getitem__(self, name: str) -> Tool[Any]:
        return self._tools[name]
    
    def __contains__(self, name: object) -> bool:
        return name in self._tools
    
    def __len__(self) -> int:
        return len(self._tools)
    
    def __iter__(self) -> Iterator[Tool[Any]]:
        return iter(self._tools.values())
    
    # ─────────────────────────────────────────────────────────────────
    # Listing
    # ─────────────────────────────────────────────────────────────────
    
    def list_tools(self, *, enabled_only: bool = True) -> list[ToolMetadata]:
        """List metadata for all registered tools."""
        return [t.metadata for t in self._tools.values() if not enabled_only or t.metadata.enabled]
    
    def descriptors(self, *, enabled_only: bool = True) -> list[dict[str, Any]]:
        """Protocol tool descriptors in registration order."""
        return [t.descriptor() for t in self._tools.values() if not enabled_only or t.metadata.enabled]
    
    def describe(self, *, enabled_only: bool = True) -> str:
        """Markdown list of tools, flagging those that use the API token."""
        tools = self.list_tools(enabled_only=enabled_only)
        lines = [
            f"- **{m.name}** ({m.category}){' 🔑' if m.requires_auth else ''}: {m.description}"
            for m in tools
        ]
        return "\n".join(lines + (["\n_🔑 = sends API token when configured_"] if any(m.requires_auth for m in tools) else []))

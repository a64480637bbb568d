"""Tool records: metadata, parameter schema and an async handler.

A Tool is data, not a subclass. The catalogue builds one per upstream
operation and the dispatcher drives all of them through the same path:
validate -> invoke -> wrap.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field


class ToolMetadata(BaseModel):
    """Metadata describing a tool for discovery and listing.
    
    Attributes:
        name: Unique identifier (snake_case, e.g., "get_appeals")
        description: What the tool does (shown to the model for selection)
        category: Grouping category (e.g., "dref", "country", "eru")
        requires_auth: Whether the upstream endpoint wants the API token
        enabled: Whether tool is currently listed
    """
    
    model_config = ConfigDict(frozen=True)
    
    name: str = Field(..., pattern=r"^[a-z][a-z0-9_]*$")
    description: str = Field(..., min_length=10)
    category: str = Field(default="general")
    requires_auth: bool = Field(default=False)
    enabled: bool = Field(default=True)


TParams = TypeVar("TParams", bound=BaseModel)


def input_schema(params_schema: type[BaseModel]) -> dict[str, Any]:
    """JSON schema of a params model, stripped of pydantic-specific titles."""
    schema = params_schema.model_json_schema()
    schema.pop("title", None)
    schema.setdefault("type", "object")
    schema.setdefault("properties", {})
    for prop in schema["properties"].values():
        prop.pop("title", None)
    return schema


@dataclass(frozen=True, slots=True)
class Tool(Generic[TParams]):
    """One invocable tool: metadata + params model + async handler."""
    
    metadata: ToolMetadata
    params_schema: type[TParams]
    handler: Callable[[TParams], Awaitable[Any]]
    
    @property
    def name(self) -> str:
        return self.metadata.name
    
    def validate(self, arguments: Mapping[str, Any] | None) -> TParams:
        """Validate raw arguments; raises pydantic ValidationError."""
        return self.params_schema.model_validate({} if arguments is None else arguments)
    
    async def invoke(self, params: TParams) -> Any:
        return await self.handler(params)
    
    def descriptor(self) -> dict[str, Any]:
        """Tool descriptor as advertised by tools/list."""
        return {
            "name": self.metadata.name,
            "description": self.metadata.description,
            "inputSchema": input_schema(self.params_schema),
        }

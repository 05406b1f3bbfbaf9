"""Tools module - Tool definitions, handlers and registry."""

from .base import ToolDefinition
from .schemas import (
    ListAPIsParams,
    GetAPIParams,
    ListRepositoriesParams,
    TextContent,
    ToolResult,
)
from .exceptions import (
    ToolError,
    ToolNotFoundError,
    InvalidToolArgumentsError,
    DuplicateToolError,
    RegistryFrozenError,
)
from .registry import ToolRegistry, build_tool_registry


__all__ = [
    # Definitions
    "ToolDefinition",
    "ToolRegistry",
    "build_tool_registry",
    # Schemas
    "ListAPIsParams",
    "GetAPIParams",
    "ListRepositoriesParams",
    "TextContent",
    "ToolResult",
    # Exceptions
    "ToolError",
    "ToolNotFoundError",
    "InvalidToolArgumentsError",
    "DuplicateToolError",
    "RegistryFrozenError",
]

"""Exceptions raised by the tool registry."""

from overheid_mcp.exceptions import MCPGatewayError


class ToolError(MCPGatewayError):
    """Base exception for tool registry errors."""
    pass


class ToolNotFoundError(ToolError):
    """Raised when requested tool is not in the registry.
    
    Attributes:
        tool_name: Name of the tool that was not found.
    """
    
    def __init__(self, tool_name: str):
        super().__init__(
            message=f"Tool '{tool_name}' not found",
            code="TOOL_NOT_FOUND"
        )
        self.tool_name = tool_name


class InvalidToolArgumentsError(ToolError):
    """Raised when tool arguments don't match the tool's parameter model.
    
    Attributes:
        tool_name: Name of the tool being invoked.
        errors: Validation error details.
    """
    
    def __init__(self, tool_name: str, errors: list[dict] | None = None):
        errors = errors or []
        details = "; ".join(
            f"{'.'.join(str(part) for part in error.get('loc', ())) or 'arguments'}: {error.get('msg', '')}"
            for error in errors
        )
        super().__init__(
            message=f"Invalid arguments for tool '{tool_name}'" + (f": {details}" if details else ""),
            code="INVALID_TOOL_ARGUMENTS"
        )
        self.tool_name = tool_name
        self.errors = errors


class DuplicateToolError(ToolError):
    """Raised when a tool name is registered twice."""
    
    def __init__(self, tool_name: str):
        super().__init__(
            message=f"duplicate tool name: {tool_name}",
            code="DUPLICATE_TOOL"
        )
        self.tool_name = tool_name


class RegistryFrozenError(ToolError):
    """Raised when registering a tool after the registry was frozen."""
    
    def __init__(self, tool_name: str):
        super().__init__(
            message=f"cannot register tool '{tool_name}': registry is frozen",
            code="REGISTRY_FROZEN"
        )
        self.tool_name = tool_name

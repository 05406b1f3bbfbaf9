"""Business logic for MCP protocol handlers."""

import time
from typing import Any

import structlog

from overheid_mcp import __version__
from overheid_mcp.tools import ToolRegistry, ToolResult
from overheid_mcp.tools.exceptions import InvalidToolArgumentsError, ToolNotFoundError

from .schemas import (
    PROTOCOL_VERSION,
    MCPContent,
    MCPInitializeParams,
    MCPTool,
    MCPToolCallResult,
    MCPToolListResult,
)

logger = structlog.get_logger("mcp")

SERVER_NAME = "developer-overheid-mcp"


def to_mcp_result(result: ToolResult) -> MCPToolCallResult:
    """Translate a domain tool result into the MCP wire shape."""
    return MCPToolCallResult(
        content=[MCPContent(type=block.type, text=block.text) for block in result.content],
        isError=result.is_error,
    )


def error_result(message: str) -> MCPToolCallResult:
    return MCPToolCallResult(
        content=[MCPContent(type="text", text=message)],
        isError=True,
    )


async def handle_initialize(params: MCPInitializeParams) -> dict[str, Any]:
    """Handle initialize request.

    Args:
        params: Initialize parameters from client.

    Returns:
        Server initialization response.
    """
    logger.info(
        "client_initialized",
        client=params.clientInfo.get("name"),
        protocol_version=params.protocolVersion,
    )
    return {
        "protocolVersion": PROTOCOL_VERSION,
        "capabilities": {
            "tools": {
                "listChanged": False  # Tool set is fixed at startup
            }
        },
        "serverInfo": {
            "name": SERVER_NAME,
            "version": __version__
        }
    }


async def handle_tools_list(registry: ToolRegistry) -> MCPToolListResult:
    """Handle tools/list request.

    Args:
        registry: Tool registry.

    Returns:
        Every registered tool with its input schema.
    """
    return MCPToolListResult(tools=[
        MCPTool(
            name=tool.name,
            description=tool.description,
            inputSchema=tool.input_schema,
        )
        for tool in registry.list()
    ])


async def handle_tools_call(
    registry: ToolRegistry,
    name: str,
    arguments: dict[str, Any] | None,
) -> MCPToolCallResult:
    """Handle tools/call request.

    Failures inside the tool come back as a result with ``isError`` set.
    Only invalid arguments are raised, for the transport to report as a
    protocol error.

    Args:
        registry: Tool registry.
        name: Tool name to invoke.
        arguments: Raw tool arguments.

    Returns:
        Tool execution result.

    Raises:
        InvalidToolArgumentsError: If the arguments don't match the tool's parameters.
    """
    try:
        tool = registry.get(name)
    except ToolNotFoundError as e:
        logger.warning("tool_not_found", tool_name=name)
        return error_result(f"Error: {e.message}")

    start = time.perf_counter()
    try:
        result = await tool.invoke(arguments)
    except InvalidToolArgumentsError:
        raise
    except Exception as e:
        logger.error("tool_exception", tool_name=name, error=str(e), exc_info=True)
        result = ToolResult.failure(f"Exception: {e}")

    logger.info(
        "tool_invocation",
        tool_name=name,
        is_error=result.is_error,
        duration_ms=int((time.perf_counter() - start) * 1000),
    )
    return to_mcp_result(result)

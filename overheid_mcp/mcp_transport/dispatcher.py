"""JSON-RPC dispatch shared by the stdio and SSE transports."""

import json
from typing import Any

import structlog
from pydantic import ValidationError

from overheid_mcp.tools import ToolRegistry
from overheid_mcp.tools.exceptions import InvalidToolArgumentsError

from .schemas import (
    MCPErrorCodes,
    MCPInitializeParams,
    MCPJSONRPCRequest,
    MCPJSONRPCResponse,
    MCPToolCallParams,
)
from .service import handle_initialize, handle_tools_call, handle_tools_list

logger = structlog.get_logger("mcp")


def parse_error_response(error: Exception) -> dict[str, Any]:
    """Response for a message that isn't valid JSON."""
    return MCPJSONRPCResponse.error_response(
        id=None,
        code=MCPErrorCodes.PARSE_ERROR,
        message=f"Parse error: {error}",
    ).to_wire()


class Dispatcher:
    """Routes JSON-RPC messages to the MCP handlers.

    Holds only the read-only registry, so a single dispatcher serves any
    number of concurrent messages.
    """

    def __init__(self, registry: ToolRegistry) -> None:
        self.registry = registry

    async def handle_raw(self, raw: str | bytes) -> dict[str, Any] | None:
        """Decode and dispatch one serialized message."""
        try:
            message = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            return parse_error_response(e)
        return await self.handle(message)

    async def handle(self, message: Any) -> dict[str, Any] | None:
        """Dispatch a decoded JSON-RPC message.

        Args:
            message: Decoded JSON value.

        Returns:
            The JSON-RPC response, or None for notifications.
        """
        request_id = message.get("id") if isinstance(message, dict) else None
        if isinstance(request_id, bool) or not isinstance(request_id, (str, int, type(None))):
            request_id = None

        try:
            request = MCPJSONRPCRequest.model_validate(message)
        except ValidationError as e:
            return MCPJSONRPCResponse.error_response(
                id=request_id,
                code=MCPErrorCodes.INVALID_REQUEST,
                message=f"Invalid request: {e.error_count()} validation error(s)",
            ).to_wire()

        is_notification = "id" not in message
        response = await self._dispatch(request)
        if is_notification:
            return None
        return response.to_wire() if response is not None else None

    async def _dispatch(self, request: MCPJSONRPCRequest) -> MCPJSONRPCResponse | None:
        method = request.method
        params = request.params or {}

        try:
            if method == "initialize":
                init_params = MCPInitializeParams(**params)
                result = await handle_initialize(init_params)
                return MCPJSONRPCResponse.success(request.id, result)

            elif method.startswith("notifications/"):
                # Client notifications (e.g. initialized) need no response
                return None

            elif method == "ping":
                return MCPJSONRPCResponse.success(request.id, {})

            elif method == "tools/list":
                result = await handle_tools_list(self.registry)
                return MCPJSONRPCResponse.success(request.id, result.model_dump())

            elif method == "tools/call":
                call_params = MCPToolCallParams(**params)
                result = await handle_tools_call(
                    self.registry,
                    name=call_params.name,
                    arguments=call_params.arguments,
                )
                return MCPJSONRPCResponse.success(request.id, result.model_dump())

            else:
                return MCPJSONRPCResponse.error_response(
                    request.id,
                    code=MCPErrorCodes.METHOD_NOT_FOUND,
                    message=f"Method not found: {method}",
                )

        except (InvalidToolArgumentsError, ValidationError) as e:
            message = e.message if isinstance(e, InvalidToolArgumentsError) else f"Invalid params for {method}"
            return MCPJSONRPCResponse.error_response(
                request.id,
                code=MCPErrorCodes.INVALID_PARAMS,
                message=message,
            )
        except Exception as e:
            logger.error("internal_error", method=method, error=str(e), exc_info=True)
            return MCPJSONRPCResponse.error_response(
                request.id,
                code=MCPErrorCodes.INTERNAL_ERROR,
                message=f"Internal error: {e}",
            )

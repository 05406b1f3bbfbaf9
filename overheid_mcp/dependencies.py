"""Global dependencies for the application."""

from fastapi import Request

from overheid_mcp.mcp_transport.dispatcher import Dispatcher
from overheid_mcp.mcp_transport.sessions import SessionManager


async def get_dispatcher(request: Request) -> Dispatcher:
    """Dependency to get the shared JSON-RPC dispatcher.
    
    The dispatcher wraps the read-only tool registry built at startup and
    is shared by every request.
    
    Args:
        request: The FastAPI request object.
        
    Returns:
        The application's Dispatcher instance.
    """
    return request.app.state.dispatcher


async def get_session_manager(request: Request) -> SessionManager:
    """Dependency to get the SSE session manager."""
    return request.app.state.sse_sessions

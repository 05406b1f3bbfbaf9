"""SSE transport implementation for MCP protocol."""

import asyncio
import json
from typing import Annotated, Any, AsyncIterator

import structlog
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse, Response, StreamingResponse

from overheid_mcp.dependencies import get_dispatcher, get_session_manager

from .dispatcher import Dispatcher, parse_error_response
from .sessions import SessionManager, SSESession

logger = structlog.get_logger("mcp.sse")

router = APIRouter(prefix="", tags=["mcp-sse"])

PING_INTERVAL_SECONDS = 30.0


def format_event(data: str, event: str | None = None) -> str:
    """Format a single server-sent event."""
    lines = [f"event: {event}"] if event else []
    lines.extend(f"data: {line}" for line in data.splitlines() or [""])
    return "\n".join(lines) + "\n\n"


async def sse_events(
    request: Request,
    session: SSESession,
    ping_interval: float = PING_INTERVAL_SECONDS,
) -> AsyncIterator[str]:
    """Yield the endpoint event, then queued messages and keep-alive pings."""
    message_endpoint = f"{request.url.scheme}://{request.url.netloc}/messages?sessionId={session.session_id}"
    yield format_event(message_endpoint, event="endpoint")

    while not await request.is_disconnected():
        try:
            message = await asyncio.wait_for(session.queue.get(), timeout=ping_interval)
        except asyncio.TimeoutError:
            yield ": ping\n\n"
            continue
        yield format_event(json.dumps(message, ensure_ascii=False), event="message")


async def _read_body(request: Request) -> tuple[Any, dict[str, Any] | None]:
    """Decode the JSON body, or return a parse error response."""
    try:
        return await request.json(), None
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        return None, parse_error_response(e)


@router.get("/sse", operation_id="sse_endpoint_get")
async def sse_get_endpoint(
    request: Request,
    sessions: Annotated[SessionManager, Depends(get_session_manager)],
):
    """Open an SSE stream and announce the message endpoint."""
    session = sessions.open()
    logger.info("sse_session_opened", session_id=session.session_id)

    async def event_stream():
        try:
            async for event in sse_events(request, session):
                yield event
        finally:
            sessions.close(session.session_id)
            logger.info("sse_session_closed", session_id=session.session_id)

    return StreamingResponse(
        event_stream(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
        },
    )


@router.post("/messages", operation_id="sse_messages_post")
async def sse_messages_endpoint(
    request: Request,
    dispatcher: Annotated[Dispatcher, Depends(get_dispatcher)],
    sessions: Annotated[SessionManager, Depends(get_session_manager)],
    session_id: Annotated[str, Query(alias="sessionId")],
):
    """Handle a JSON-RPC message and push the response onto its SSE stream."""
    session = sessions.get(session_id)
    if session is None:
        return JSONResponse(
            status_code=404,
            content={"error": "SESSION_NOT_FOUND", "message": f"Unknown session '{session_id}'"},
        )

    body, error = await _read_body(request)
    response = error if error is not None else await dispatcher.handle(body)
    if response is not None:
        await session.send(response)
    return Response(status_code=202)


@router.post("/sse", operation_id="sse_endpoint_post")
async def sse_post_endpoint(
    request: Request,
    dispatcher: Annotated[Dispatcher, Depends(get_dispatcher)],
):
    """Handle a JSON-RPC message and return the response in the HTTP body."""
    body, error = await _read_body(request)
    response = error if error is not None else await dispatcher.handle(body)
    if response is None:
        return Response(status_code=202)
    return JSONResponse(content=response)

import contextlib
import math
import signal
from contextlib import asynccontextmanager

import anyio
import httpx
import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .config import Settings, parse_listen_address
from .exceptions import MCPGatewayError
from .mcp_transport.dispatcher import Dispatcher
from .mcp_transport.sessions import SessionManager
from .mcp_transport.sse import router as mcp_sse_router
from .mcp_transport.stdio import StdioTransport
from .tools import build_tool_registry
from .upstream import UpstreamClient

logger = structlog.get_logger("server")


def create_http_client(settings: Settings) -> httpx.AsyncClient:
    """Shared HTTP client for connection pooling across tool invocations."""
    return httpx.AsyncClient(
        timeout=settings.UPSTREAM_TIMEOUT_SECONDS,
        follow_redirects=True,
    )


def build_dispatcher(settings: Settings, http_client: httpx.AsyncClient) -> Dispatcher:
    upstream = UpstreamClient(
        http_client,
        base_url=settings.UPSTREAM_BASE_URL,
        timeout=settings.UPSTREAM_TIMEOUT_SECONDS,
    )
    return Dispatcher(build_tool_registry(upstream))


def create_app(settings: Settings, dispatcher: Dispatcher | None = None) -> FastAPI:
    """Build the FastAPI app serving the SSE transport.

    Args:
        settings: Application settings.
        dispatcher: Dispatcher to share with other transports. When omitted,
            the app owns its HTTP client and builds its own dispatcher.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.sse_sessions = SessionManager()
        if dispatcher is not None:
            app.state.dispatcher = dispatcher
            yield
            return

        # Standalone app: owns the upstream HTTP client
        async with create_http_client(settings) as http_client:
            app.state.dispatcher = build_dispatcher(settings, http_client)
            yield

    app = FastAPI(
        title=settings.APP_NAME,
        lifespan=lifespan,
        debug=settings.DEBUG
    )

    @app.exception_handler(MCPGatewayError)
    async def gateway_exception_handler(request: Request, exc: MCPGatewayError):
        return JSONResponse(
            status_code=500,
            content={"error": exc.code, "message": exc.message}
        )

    @app.get("/health")
    async def health_check():
        return {"status": "ok", "app": settings.APP_NAME}

    app.include_router(mcp_sse_router)
    return app


class EmbeddedServer(uvicorn.Server):
    """uvicorn server that leaves signal handling to the bootstrap."""

    def install_signal_handlers(self) -> None:
        pass

    @contextlib.contextmanager
    def capture_signals(self):
        yield


def build_server_config(settings: Settings, dispatcher: Dispatcher) -> uvicorn.Config:
    """uvicorn config for the SSE app, sharing ``dispatcher`` with stdio."""
    host, port = parse_listen_address(settings.HTTP_ADDR)
    return uvicorn.Config(
        create_app(settings, dispatcher=dispatcher),
        host=host or "0.0.0.0",
        port=port,
        log_config=None,
        access_log=False,
        # uvicorn takes whole seconds; never shorter than the grace period
        timeout_graceful_shutdown=math.ceil(settings.SHUTDOWN_GRACE_SECONDS),
    )


def sse_endpoint_url(settings: Settings) -> str:
    host, port = parse_listen_address(settings.HTTP_ADDR)
    return f"http://{host or 'localhost'}:{port}/sse"


async def wait_for_shutdown_signal() -> int:
    with anyio.open_signal_receiver(signal.SIGINT, signal.SIGTERM) as signals:
        async for signum in signals:
            return signum
    raise RuntimeError("signal receiver closed")


async def serve(settings: Settings) -> None:
    """Run the enabled transports until EOF on stdio or a shutdown signal.

    On SIGINT/SIGTERM both transports stop accepting new messages, in-flight
    invocations get ``SHUTDOWN_GRACE_SECONDS`` to finish and whatever is left
    is cancelled. A second Ctrl+C during the grace period force quits.

    Raises:
        ValueError: If no transport is enabled or the listen address is invalid.
    """
    if not (settings.ENABLE_STDIO or settings.ENABLE_SSE):
        raise ValueError("at least one transport (stdio or SSE) must be enabled")

    transports: list[str] = []
    server: EmbeddedServer | None = None

    async with create_http_client(settings) as http_client:
        dispatcher = build_dispatcher(settings, http_client)

        stdio = StdioTransport(dispatcher) if settings.ENABLE_STDIO else None
        if stdio is not None:
            transports.append("stdio")

        if settings.ENABLE_SSE:
            server = EmbeddedServer(build_server_config(settings, dispatcher))
            transports.append("sse")

        services_done = anyio.Event()

        async with anyio.create_task_group() as tg:

            async def run_services() -> None:
                try:
                    async with anyio.create_task_group() as services:
                        if stdio is not None:
                            services.start_soon(stdio.serve)
                        if server is not None:
                            services.start_soon(server.serve)
                finally:
                    services_done.set()
                # Every transport finished on its own (e.g. stdin closed)
                tg.cancel_scope.cancel()

            tg.start_soon(run_services)

            logger.info("server_started", transports=transports)
            if server is not None:
                logger.info("sse_endpoint", url=sse_endpoint_url(settings))

            signum = await wait_for_shutdown_signal()
            logger.info(
                "shutdown_requested",
                signal=signal.Signals(signum).name,
                grace_seconds=settings.SHUTDOWN_GRACE_SECONDS,
            )

            if stdio is not None:
                stdio.stop()
            if server is not None:
                server.should_exit = True

            with anyio.move_on_after(settings.SHUTDOWN_GRACE_SECONDS):
                await services_done.wait()
            if not services_done.is_set():
                logger.warning("shutdown_grace_period_exceeded")
            tg.cancel_scope.cancel()

    logger.info("server_stopped")


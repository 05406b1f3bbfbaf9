"""Line-oriented stdio transport for MCP.

Each line on the input stream is one JSON-RPC message; each response is
written as one line on the output stream. Messages are handled
concurrently, so a slow upstream call doesn't block other requests.
"""

import asyncio
import json
import sys
import threading
from typing import Any, TextIO

import anyio
import structlog

from .dispatcher import Dispatcher

logger = structlog.get_logger("mcp.stdio")

# Marks end of input on the line queue
EOF_MARKER = ""


class StdioTransport:
    """Serves JSON-RPC over a pair of text streams.

    Blocking reads run on a daemon thread, so a pending ``readline`` never
    keeps the process alive after shutdown.

    Attributes:
        dispatcher: Dispatcher handling decoded messages.
        reader: Input stream, one message per line.
        writer: Output stream for responses.
    """

    def __init__(
        self,
        dispatcher: Dispatcher,
        reader: TextIO | None = None,
        writer: TextIO | None = None,
    ) -> None:
        self.dispatcher = dispatcher
        self.reader = reader if reader is not None else sys.stdin
        self.writer = writer if writer is not None else sys.stdout
        self._reader_scope = anyio.CancelScope()

    def stop(self) -> None:
        """Stop reading new messages; in-flight messages still complete."""
        self._reader_scope.cancel()

    def _start_reader(self) -> asyncio.Queue[str]:
        loop = asyncio.get_running_loop()
        lines: asyncio.Queue[str] = asyncio.Queue()

        def pump() -> None:
            try:
                for line in iter(self.reader.readline, EOF_MARKER):
                    loop.call_soon_threadsafe(lines.put_nowait, line)
                loop.call_soon_threadsafe(lines.put_nowait, EOF_MARKER)
            except RuntimeError:
                # Event loop already closed
                return

        threading.Thread(target=pump, name="mcp-stdin-reader", daemon=True).start()
        return lines

    def _write(self, payload: dict[str, Any]) -> None:
        # Single synchronous write: lines from concurrent tasks never interleave
        self.writer.write(json.dumps(payload, ensure_ascii=False) + "\n")
        self.writer.flush()

    async def _handle_line(self, line: str) -> None:
        response = await self.dispatcher.handle_raw(line)
        if response is not None:
            self._write(response)

    async def serve(self) -> None:
        """Read messages until EOF or ``stop()``, then drain in-flight work."""
        lines = self._start_reader()
        logger.info("stdio_transport_started")
        async with anyio.create_task_group() as inflight:
            with self._reader_scope:
                while True:
                    line = await lines.get()
                    if line == EOF_MARKER:
                        break
                    if not line.strip():
                        continue
                    inflight.start_soon(self._handle_line, line)
        logger.info("stdio_transport_stopped")

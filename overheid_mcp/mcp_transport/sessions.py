"""SSE session bookkeeping."""

import asyncio
import uuid
from dataclasses import dataclass, field
from typing import Any


@dataclass
class SSESession:
    """One open SSE stream and its pending outbound messages."""

    session_id: str
    queue: asyncio.Queue[dict[str, Any]] = field(default_factory=asyncio.Queue)

    async def send(self, message: dict[str, Any]) -> None:
        await self.queue.put(message)


class SessionManager:
    """Tracks open SSE sessions by id.

    Sessions are created when a client opens ``GET /sse`` and removed when the
    stream closes. All access happens on the event loop thread.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, SSESession] = {}

    def open(self) -> SSESession:
        session = SSESession(session_id=uuid.uuid4().hex)
        self._sessions[session.session_id] = session
        return session

    def close(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    def get(self, session_id: str) -> SSESession | None:
        return self._sessions.get(session_id)

    def __len__(self) -> int:
        return len(self._sessions)

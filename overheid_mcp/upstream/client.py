"""HTTP client for the upstream registry API."""

import json
import math
import time
from dataclasses import dataclass, field
from typing import Any, Mapping

import httpx
import structlog

from .exceptions import UpstreamDecodeError, UpstreamTimeoutError, UpstreamUnavailableError

logger = structlog.get_logger("upstream")

# Default timeout for upstream requests
DEFAULT_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True)
class UpstreamResponse:
    """A fully read upstream response.

    Attributes:
        url: Requested URL.
        status_code: HTTP status code.
        headers: Response headers (case-insensitive lookup).
        content: Raw response body.
    """

    url: str
    status_code: int
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    content: bytes = b""

    @property
    def is_not_found(self) -> bool:
        return self.status_code == httpx.codes.NOT_FOUND

    def json(self) -> Any:
        """Decode the body as strict JSON.

        ``NaN``, ``Infinity`` and numbers outside the float range are rejected
        so the decoded value always re-encodes as valid JSON.

        Raises:
            UpstreamDecodeError: If the body is empty or not valid JSON.
        """
        if not self.content.strip():
            raise UpstreamDecodeError(url=self.url, reason="empty response body")
        try:
            return json.loads(
                self.content,
                parse_constant=_reject_constant,
                parse_float=_parse_finite_float,
            )
        except (ValueError, UnicodeDecodeError) as e:
            raise UpstreamDecodeError(url=self.url, reason=str(e))


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid JSON constant {name!r}")


def _parse_finite_float(literal: str) -> float:
    value = float(literal)
    if not math.isfinite(value):
        raise ValueError(f"number {literal} out of range")
    return value


class UpstreamClient:
    """Issues GET requests against a fixed upstream base URL.

    Wraps a shared ``httpx.AsyncClient`` so connections are pooled across
    tool invocations. The client holds no per-request state and is safe to
    use from concurrent tasks.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize the upstream client.

        Args:
            client: Shared HTTP client.
            base_url: Base URL every path is appended to.
            timeout: Default per-request timeout in seconds.
        """
        self.client = client
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def build_url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    async def fetch(
        self,
        path: str,
        params: Mapping[str, str | int] | None = None,
        timeout: float | None = None,
    ) -> UpstreamResponse:
        """Perform a single GET request and read the whole body.

        The body stream is closed on every exit path. Cancelling the calling
        task aborts the in-flight request.

        Args:
            path: Path relative to the base URL (e.g. "/apis").
            params: Query parameters.
            timeout: Deadline override in seconds.

        Returns:
            The status code, headers and raw body.

        Raises:
            UpstreamTimeoutError: If the upstream doesn't respond in time.
            UpstreamUnavailableError: If the request fails at the network level.
        """
        url = self.build_url(path)
        timeout = self.timeout if timeout is None else timeout
        start = time.perf_counter()

        try:
            async with self.client.stream(
                "GET",
                url,
                params=params,
                headers={"Accept": "application/json"},
                timeout=timeout,
            ) as response:
                content = await response.aread()
        except httpx.TimeoutException:
            raise UpstreamTimeoutError(url=url, timeout_seconds=timeout)
        except httpx.ConnectError as e:
            raise UpstreamUnavailableError(url=url, reason=str(e))
        except httpx.RequestError as e:
            raise UpstreamUnavailableError(url=url, reason=f"Request failed: {e}")

        logger.debug(
            "upstream_request",
            url=str(response.url),
            status_code=response.status_code,
            duration_ms=int((time.perf_counter() - start) * 1000),
        )

        return UpstreamResponse(
            url=str(response.url),
            status_code=response.status_code,
            headers=response.headers,
            content=content,
        )

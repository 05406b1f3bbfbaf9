# Test configuration
import sys
from pathlib import Path
from typing import Callable

import httpx
import pytest

REPO_ROOT = Path(__file__).parent.parent

# Add repo root to path so tests can import modules
sys.path.insert(0, str(REPO_ROOT))

from overheid_mcp.upstream import UpstreamClient  # noqa: E402

UPSTREAM_BASE_URL = "https://upstream.test/api/v0"


class StubUpstream:
    """Records requests and answers them through an ``httpx.MockTransport``."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.handler = handler
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def make_upstream():
    """Factory returning (stub, UpstreamClient) backed by a mock transport."""

    def factory(handler: Callable[[httpx.Request], httpx.Response], timeout: float = 5.0):
        stub = StubUpstream(handler)
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(stub))
        return stub, UpstreamClient(http_client, base_url=UPSTREAM_BASE_URL, timeout=timeout)

    return factory

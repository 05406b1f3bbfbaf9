"""Exceptions raised while talking to the upstream registry API."""

from overheid_mcp.exceptions import MCPGatewayError


class UpstreamError(MCPGatewayError):
    """Base exception for upstream-specific errors."""
    pass


class UpstreamTimeoutError(UpstreamError):
    """Raised when the upstream API doesn't respond in time.
    
    Attributes:
        url: URL of the request that timed out.
        timeout_seconds: Timeout duration that was exceeded.
    """
    
    def __init__(self, url: str, timeout_seconds: float | None):
        super().__init__(
            message=f"request to '{url}' timed out after {timeout_seconds}s",
            code="UPSTREAM_TIMEOUT"
        )
        self.url = url
        self.timeout_seconds = timeout_seconds


class UpstreamUnavailableError(UpstreamError):
    """Raised when the upstream API is unreachable.
    
    Attributes:
        url: URL of the failed request.
        reason: Description of the connection failure.
    """
    
    def __init__(self, url: str, reason: str = "Connection failed"):
        super().__init__(
            message=f"request to '{url}' failed: {reason}",
            code="UPSTREAM_UNAVAILABLE"
        )
        self.url = url
        self.reason = reason


class UpstreamDecodeError(UpstreamError):
    """Raised when an upstream response body is not valid JSON.
    
    Attributes:
        url: URL of the request whose body failed to decode.
        reason: Decoder error message.
    """
    
    def __init__(self, url: str, reason: str):
        super().__init__(
            message=reason,
            code="UPSTREAM_DECODE_ERROR"
        )
        self.url = url
        self.reason = reason

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    APP_NAME: str = "Developer Overheid MCP"
    DEBUG: bool = False
    
    # Upstream
    UPSTREAM_BASE_URL: str = "https://apis.developer.overheid.nl/api/v0"
    UPSTREAM_TIMEOUT_SECONDS: float = 30.0
    
    # Transports
    HTTP_ADDR: str = ":8080"
    ENABLE_STDIO: bool = True
    ENABLE_SSE: bool = False
    SHUTDOWN_GRACE_SECONDS: float = 5.0
    
    # MCP
    MCP_LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")


def parse_listen_address(addr: str) -> tuple[str, int]:
    """Split a ``host:port`` listen address.

    An empty host (``":8080"``) means all interfaces.

    Args:
        addr: Listen address, e.g. ``":8080"`` or ``"127.0.0.1:9000"``.

    Returns:
        Tuple of (host, port). Host is ``""`` when omitted.

    Raises:
        ValueError: If the port is missing or not a number.
    """
    host, sep, port = addr.rpartition(":")
    if not sep or not port:
        raise ValueError(f"missing port in address {addr!r}")
    if not port.isdigit():
        raise ValueError(f"invalid port in address {addr!r}")
    return host.strip("[]"), int(port)


@lru_cache()
def get_settings() -> Settings:
    return Settings()

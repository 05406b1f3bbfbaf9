"""Tests for configuration and process bootstrap."""

from unittest.mock import MagicMock

import pytest

from overheid_mcp.__main__ import main
from overheid_mcp.config import Settings, get_settings, parse_listen_address
from overheid_mcp.main import build_server_config, serve, sse_endpoint_url


class TestSettings:
    """Tests for Settings defaults and overrides."""
    
    def test_defaults(self):
        """Test defaults match the public Developer Overheid API."""
        settings = Settings()
        
        assert settings.UPSTREAM_BASE_URL == "https://apis.developer.overheid.nl/api/v0"
        assert settings.HTTP_ADDR == ":8080"
        assert settings.ENABLE_STDIO is True
        assert settings.ENABLE_SSE is False
        assert settings.SHUTDOWN_GRACE_SECONDS == 5.0
    
    def test_env_override(self, monkeypatch):
        """Test environment variables override defaults."""
        monkeypatch.setenv("ENABLE_SSE", "true")
        monkeypatch.setenv("UPSTREAM_BASE_URL", "http://localhost:9000/api")
        get_settings.cache_clear()
        try:
            settings = get_settings()
            assert settings.ENABLE_SSE is True
            assert settings.UPSTREAM_BASE_URL == "http://localhost:9000/api"
        finally:
            get_settings.cache_clear()


class TestListenAddress:
    """Tests for parse_listen_address."""
    
    @pytest.mark.parametrize("addr,expected", [
        (":8080", ("", 8080)),
        ("127.0.0.1:9000", ("127.0.0.1", 9000)),
        ("[::1]:8443", ("::1", 8443)),
    ])
    def test_valid(self, addr, expected):
        assert parse_listen_address(addr) == expected
    
    @pytest.mark.parametrize("addr", ["8080", "localhost:", "host:http"])
    def test_invalid(self, addr):
        with pytest.raises(ValueError):
            parse_listen_address(addr)
    
    def test_sse_endpoint_defaults_to_localhost(self):
        """Test an empty host is advertised as localhost."""
        assert sse_endpoint_url(Settings(HTTP_ADDR=":8080")) == "http://localhost:8080/sse"
        assert sse_endpoint_url(Settings(HTTP_ADDR="0.0.0.0:9000")) == "http://0.0.0.0:9000/sse"


class TestServe:
    """Tests for bootstrap validation."""
    
    @pytest.mark.parametrize("grace,expected", [(5.0, 5), (0.5, 1), (2.25, 3), (0, 0)])
    def test_http_graceful_shutdown_rounds_up(self, grace, expected):
        """Test a fractional grace period is never truncated for the HTTP server."""
        settings = Settings(ENABLE_SSE=True, HTTP_ADDR="127.0.0.1:9000", SHUTDOWN_GRACE_SECONDS=grace)
        
        config = build_server_config(settings, dispatcher=MagicMock())
        
        assert config.timeout_graceful_shutdown == expected
        assert (config.host, config.port) == ("127.0.0.1", 9000)
    
    @pytest.mark.asyncio
    async def test_no_transport_enabled(self):
        """Test serving without any transport is rejected."""
        with pytest.raises(ValueError):
            await serve(Settings(ENABLE_STDIO=False, ENABLE_SSE=False))
    
    @pytest.mark.asyncio
    async def test_invalid_listen_address(self):
        """Test a listen address without port is rejected before serving."""
        with pytest.raises(ValueError):
            await serve(Settings(ENABLE_STDIO=False, ENABLE_SSE=True, HTTP_ADDR="localhost"))
    
    def test_importing_bootstrap_builds_no_app(self):
        """Test the bootstrap module exposes factories only, no app built at import."""
        import overheid_mcp.main as bootstrap
        
        assert not hasattr(bootstrap, "app")
    
    def test_main_exits_on_startup_failure(self):
        """Test the CLI exits non-zero when no transport is enabled."""
        with pytest.raises(SystemExit) as exc_info:
            main(["--ENABLE_STDIO", "false"])
        
        assert exc_info.value.code == 1

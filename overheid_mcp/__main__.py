"""Command-line entry point.

Settings come from the environment, ``.env`` and command-line flags, e.g.::

    python -m overheid_mcp --ENABLE_SSE true --HTTP_ADDR 127.0.0.1:8080
"""

import sys
from typing import Sequence

import anyio
import structlog

from .config import Settings
from .logging_config import configure_logging
from .main import serve


def main(argv: Sequence[str] | None = None) -> None:
    settings = Settings(_cli_parse_args=list(argv) if argv is not None else True)
    configure_logging(settings.MCP_LOG_LEVEL)
    try:
        anyio.run(serve, settings)
    except ValueError as e:
        structlog.get_logger("server").critical("startup_failed", error=str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()

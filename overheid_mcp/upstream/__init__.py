"""Upstream module - HTTP access to the registry API and pagination."""

from .client import UpstreamClient, UpstreamResponse
from .exceptions import (
    UpstreamError,
    UpstreamTimeoutError,
    UpstreamUnavailableError,
    UpstreamDecodeError,
)
from .pagination import (
    LinkRelation,
    parse_link_header,
    next_page_from_links,
    next_page_from_header,
)


__all__ = [
    # Client
    "UpstreamClient",
    "UpstreamResponse",
    # Exceptions
    "UpstreamError",
    "UpstreamTimeoutError",
    "UpstreamUnavailableError",
    "UpstreamDecodeError",
    # Pagination
    "LinkRelation",
    "parse_link_header",
    "next_page_from_links",
    "next_page_from_header",
]

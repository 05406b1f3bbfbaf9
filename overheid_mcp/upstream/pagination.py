"""Pagination helpers for RFC 8288 style ``Link`` headers."""

import re
from dataclasses import dataclass
from typing import Iterable
from urllib.parse import parse_qs, urlsplit

LINK_URL_RE = re.compile(r"<([^>]+)>")
LINK_REL_RE = re.compile(r'rel="([^"]+)"')

NEXT_REL = "next"

# Optional sign followed by ASCII digits only
PAGE_NUMBER_RE = re.compile(r"[+-]?[0-9]+")

# Largest page number representable as a signed 64-bit integer
MAX_PAGE = 2**63 - 1


@dataclass(frozen=True)
class LinkRelation:
    """A single link relation extracted from a ``Link`` header."""

    url: str
    rel: str


def parse_link_header(header: str) -> list[LinkRelation]:
    """Parse a ``Link`` header value into link relations.

    Each comma-separated fragment contributes a relation only when it holds
    both a ``<url>`` and a ``rel="..."`` attribute. Other fragments are
    skipped. Order follows the header.

    Args:
        header: Raw header value.

    Returns:
        Relations in header order, possibly empty.
    """
    links: list[LinkRelation] = []

    for fragment in header.split(","):
        fragment = fragment.strip()

        url_match = LINK_URL_RE.search(fragment)
        rel_match = LINK_REL_RE.search(fragment)

        if url_match and rel_match:
            links.append(LinkRelation(url=url_match.group(1), rel=rel_match.group(1)))

    return links


def page_from_url(url: str) -> int | None:
    """Read the first ``page`` query parameter of a URL as a decimal integer."""
    try:
        query = parse_qs(urlsplit(url).query, keep_blank_values=True)
    except ValueError:
        return None

    values = query.get("page")
    if not values or not PAGE_NUMBER_RE.fullmatch(values[0]):
        return None
    page = int(values[0])
    if abs(page) > MAX_PAGE:
        return None
    return page


def next_page_from_links(links: Iterable[LinkRelation]) -> int | None:
    """Return the page number of the first ``next`` relation.

    Scanning stops at the first ``next`` relation even when its URL holds
    no usable page number.

    Args:
        links: Parsed link relations.

    Returns:
        The next page number, or None when there is no further page.
    """
    for link in links:
        if link.rel != NEXT_REL:
            continue
        page = page_from_url(link.url)
        if page is None or page <= 0:
            return None
        return page
    return None


def next_page_from_header(header: str | None) -> int | None:
    """Derive the next page number from an optional ``Link`` header."""
    if not header:
        return None
    return next_page_from_links(parse_link_header(header))

"""Tool handlers for the Developer Overheid API.

Every handler turns upstream failures into a failed ``ToolResult`` and never
lets them propagate: a failed result carries only a diagnostic message and
no partially decoded upstream data.
"""

import json
from typing import Any
from urllib.parse import quote

from overheid_mcp.upstream import UpstreamClient, next_page_from_header
from overheid_mcp.upstream.exceptions import UpstreamDecodeError, UpstreamError

from .schemas import GetAPIParams, ListAPIsParams, ListRepositoriesParams, PageParams, ToolResult

APIS_PATH = "/apis"
REPOSITORIES_PATH = "/repositories"


def encode_page(data: Any, next_page: int | None) -> str:
    """Compact JSON encoding of a list page; ``nextPage`` only when present."""
    payload: dict[str, Any] = {"data": data}
    if next_page is not None:
        payload["nextPage"] = next_page
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False, allow_nan=False)


async def fetch_page(
    client: UpstreamClient,
    path: str,
    params: PageParams,
    resource: str,
) -> ToolResult:
    """Fetch one page of a listing and attach the next page number.

    Status codes are not inspected: only network and decode failures
    produce a failed result.

    Args:
        client: Upstream client.
        path: Listing path (e.g. "/apis").
        params: Validated page parameters.
        resource: Plural resource label used in error messages.

    Returns:
        Result whose single block encodes ``{"data": ..., "nextPage"?: N}``.
    """
    page = params.effective_page

    try:
        response = await client.fetch(path, params={"page": page})
    except UpstreamError as e:
        return ToolResult.failure(f"Error fetching {resource}: {e.message}")

    try:
        data = response.json()
    except UpstreamDecodeError as e:
        return ToolResult.failure(f"Error parsing response: {e.message}")

    next_page = next_page_from_header(response.headers.get("Link"))
    return ToolResult.success(encode_page(data, next_page))


async def list_apis(client: UpstreamClient, params: ListAPIsParams) -> ToolResult:
    """List all APIs, one page at a time."""
    return await fetch_page(client, APIS_PATH, params, resource="APIs")


async def list_repositories(client: UpstreamClient, params: ListRepositoriesParams) -> ToolResult:
    """List all repositories, one page at a time."""
    return await fetch_page(client, REPOSITORIES_PATH, params, resource="repositories")


async def get_api(client: UpstreamClient, params: GetAPIParams) -> ToolResult:
    """Fetch a single API by ID.

    A 404 from upstream maps to a "not found" failure without decoding the
    body. The API document is returned indented for readability.
    """
    path = f"{APIS_PATH}/{quote(params.id, safe='')}"

    try:
        response = await client.fetch(path)
    except UpstreamError as e:
        return ToolResult.failure(f"Error fetching API: {e.message}")

    if response.is_not_found:
        return ToolResult.failure(f"API with ID {params.id} not found")

    try:
        api = response.json()
    except UpstreamDecodeError as e:
        return ToolResult.failure(f"Error parsing response: {e.message}")

    return ToolResult.success(json.dumps(api, indent=2, ensure_ascii=False, allow_nan=False))

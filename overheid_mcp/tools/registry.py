"""Tool registry and the default Developer Overheid tool set."""

from functools import partial
from typing import Iterator

from overheid_mcp.upstream import UpstreamClient

from .base import ToolDefinition
from .exceptions import DuplicateToolError, RegistryFrozenError, ToolNotFoundError
from .handlers import get_api, list_apis, list_repositories
from .schemas import GetAPIParams, ListAPIsParams, ListRepositoriesParams


class ToolRegistry:
    """Holds tool definitions by name.

    Tools are registered at startup; after ``freeze()`` the registry is
    read-only and can be shared by any number of concurrent invocations.
    """

    def __init__(self) -> None:
        self._tools: dict[str, ToolDefinition] = {}
        self._frozen = False

    def register(self, definition: ToolDefinition) -> ToolDefinition:
        """Add a tool definition.

        Raises:
            RegistryFrozenError: If the registry was frozen.
            DuplicateToolError: If a tool with the same name exists.
        """
        if self._frozen:
            raise RegistryFrozenError(definition.name)
        if definition.name in self._tools:
            raise DuplicateToolError(definition.name)
        self._tools[definition.name] = definition
        return definition

    def freeze(self) -> "ToolRegistry":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, name: str) -> ToolDefinition:
        """Look up a tool by name.

        Raises:
            ToolNotFoundError: If no tool has this name.
        """
        tool = self._tools.get(name)
        if tool is None:
            raise ToolNotFoundError(name)
        return tool

    def list(self) -> list[ToolDefinition]:
        """All tools in registration order."""
        return list(self._tools.values())

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __iter__(self) -> Iterator[ToolDefinition]:
        return iter(self.list())

    def __len__(self) -> int:
        return len(self._tools)


def build_tool_registry(client: UpstreamClient) -> ToolRegistry:
    """Build the frozen registry of Developer Overheid tools.

    Args:
        client: Upstream client shared by all handlers.

    Returns:
        A frozen registry with list_apis, get_api and list_repositories.
    """
    registry = ToolRegistry()
    registry.register(ToolDefinition(
        name="list_apis",
        description="List all APIs from the Developer Overheid API.",
        params_model=ListAPIsParams,
        handler=partial(list_apis, client),
    ))
    registry.register(ToolDefinition(
        name="get_api",
        description="Get a specific API by ID from the Developer Overheid API.",
        params_model=GetAPIParams,
        handler=partial(get_api, client),
    ))
    registry.register(ToolDefinition(
        name="list_repositories",
        description="List all repositories from the Developer Overheid API.",
        params_model=ListRepositoriesParams,
        handler=partial(list_repositories, client),
    ))
    return registry.freeze()

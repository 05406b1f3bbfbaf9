"""Tool definition: a named, typed unit of work exposed to MCP clients."""

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from .exceptions import InvalidToolArgumentsError
from .schemas import ToolResult

ParamsT = TypeVar("ParamsT", bound=BaseModel)

ToolHandler = Callable[[ParamsT], Awaitable[ToolResult]]


@dataclass(frozen=True)
class ToolDefinition(Generic[ParamsT]):
    """Immutable tool definition owned by the registry.

    Attributes:
        name: Unique tool name.
        description: Human-readable description.
        params_model: Pydantic model the arguments are validated into.
        handler: Coroutine function run with the validated parameters.
    """

    name: str
    description: str
    params_model: type[ParamsT]
    handler: ToolHandler = field(repr=False, compare=False)

    @property
    def input_schema(self) -> dict[str, Any]:
        """JSON schema of the tool's parameters."""
        schema = self.params_model.model_json_schema()
        schema.pop("title", None)
        schema.setdefault("properties", {})
        return schema

    def parse_arguments(self, arguments: dict[str, Any] | None) -> ParamsT:
        """Validate raw arguments into the parameter model.

        Raises:
            InvalidToolArgumentsError: If the arguments don't validate.
        """
        try:
            return self.params_model.model_validate(arguments or {})
        except ValidationError as e:
            raise InvalidToolArgumentsError(
                tool_name=self.name,
                errors=e.errors(include_url=False, include_context=False, include_input=False),
            )

    async def invoke(self, arguments: dict[str, Any] | None) -> ToolResult:
        """Validate arguments and run the handler."""
        params = self.parse_arguments(arguments)
        return await self.handler(params)

"""Pydantic schemas for tool parameters and results."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, StrictStr, model_validator


class PageParams(BaseModel):
    """Parameters shared by the paginated list tools.
    
    Attributes:
        page: 1-based page number. Absent, zero or negative means the first page.
    """
    
    model_config = ConfigDict(extra="ignore")
    
    page: int | None = Field(default=None, description="Page number to fetch (defaults to 1)")
    
    @property
    def effective_page(self) -> int:
        """Page number sent upstream."""
        if self.page is None or self.page <= 0:
            return 1
        return self.page


class ListAPIsParams(PageParams):
    """Parameters for the list_apis tool."""


class ListRepositoriesParams(PageParams):
    """Parameters for the list_repositories tool."""


class GetAPIParams(BaseModel):
    """Parameters for the get_api tool.
    
    Attributes:
        id: Identifier of the API to fetch.
    """
    
    model_config = ConfigDict(extra="ignore")
    
    id: StrictStr = Field(..., min_length=1, description="ID of the API to fetch")


class TextContent(BaseModel):
    """A single text content block."""
    
    model_config = ConfigDict(frozen=True)
    
    type: Literal["text"] = "text"
    text: str


class ToolResult(BaseModel):
    """Outcome of a tool invocation.
    
    Either a success carrying one or more text blocks, or a failure
    carrying a single diagnostic block with ``is_error`` set.
    
    Attributes:
        content: Ordered, non-empty content blocks.
        is_error: Whether the invocation failed.
    """
    
    model_config = ConfigDict(frozen=True)
    
    content: tuple[TextContent, ...] = Field(..., min_length=1)
    is_error: bool = False
    
    @model_validator(mode="after")
    def check_failure_has_single_block(self) -> "ToolResult":
        if self.is_error and len(self.content) != 1:
            raise ValueError("a failed result carries exactly one content block")
        return self
    
    @classmethod
    def success(cls, *texts: str) -> "ToolResult":
        """Create a successful result with one block per text."""
        return cls(content=tuple(TextContent(text=text) for text in texts))
    
    @classmethod
    def failure(cls, message: str) -> "ToolResult":
        """Create a failed result with a single diagnostic block."""
        return cls(content=(TextContent(text=message),), is_error=True)
    
    @property
    def text(self) -> str:
        """Text of the first content block."""
        return self.content[0].text

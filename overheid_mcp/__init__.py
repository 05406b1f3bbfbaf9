"""MCP server exposing the Developer Overheid API as tools."""

__version__ = "0.1.0"

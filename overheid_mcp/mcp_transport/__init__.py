"""MCP transport module - JSON-RPC dispatch over stdio and SSE."""

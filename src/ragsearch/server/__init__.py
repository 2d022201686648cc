"""MCP server for ragsearch."""

from ragsearch.server.mcp_server import create_mcp_server, format_results

__all__ = ["create_mcp_server", "format_results"]

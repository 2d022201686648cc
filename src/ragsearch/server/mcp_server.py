"""FastMCP server exposing an ingested corpus as search tools."""

from mcp.server.fastmcp import FastMCP

from ragsearch.models import SearchResult
from ragsearch.service import RetrievalService

SNIPPET_CHARS = 200


def format_results(query: str, results: list[SearchResult]) -> str:
    """Render search results as a numbered plain-text list."""
    if not results:
        return f"No results found for: {query}"

    lines = []
    for i, r in enumerate(results, 1):
        # Truncate long text snippets
        text = r.chunk.text[:SNIPPET_CHARS].replace("\n", " ")
        if len(r.chunk.text) > SNIPPET_CHARS:
            text += "..."

        lines.append(f"{i}. [{r.score:.3f}] {r.chunk.chunk_id}")
        lines.append(f"   {text}")
        lines.append("")

    return "\n".join(lines)


def create_mcp_server(service: RetrievalService) -> FastMCP:
    """Create an MCP server over an already ingested service.

    Design: 1 process = 1 corpus. Re-ingestion happens by restarting.

    Args:
        service: Retrieval service holding the ingested corpus

    Returns:
        Configured FastMCP server instance
    """
    mcp = FastMCP(
        name="ragsearch",
    )

    @mcp.tool()
    def search(query: str, limit: int = 5) -> str:
        """Search the ingested text files.

        Falls back to keyword overlap when the query shares no vocabulary
        with the corpus.

        Args:
            query: Free-text description of what you're looking for
            limit: Maximum number of results to return (default: 5)

        Returns:
            Ranked list of matching passages with scores
        """
        return format_results(query, service.query(query, limit))

    @mcp.tool()
    def summary() -> str:
        """Return the extractive summary built when the corpus was ingested."""
        return service.last_summary or "No summary available."

    return mcp

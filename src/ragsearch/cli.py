"""CLI entry point for ragsearch."""

import argparse
import logging
import sys
from typing import Literal, cast

from dotenv import find_dotenv, load_dotenv

from ragsearch.config import load_config
from ragsearch.errors import RagSearchError
from ragsearch.factory import build_service
from ragsearch.service import RetrievalService

logger = logging.getLogger(__name__)


def _ingest(paths: list[str], config_path: str | None) -> tuple[RetrievalService, str]:
    config = load_config(config_path)
    service = build_service(config)
    logger.info(f"Ingesting {len(paths)} path(s)...")
    summary = service.ingest(paths)
    return service, summary


def ingest(paths: list[str], config_path: str | None = None) -> None:
    """Ingest files and print the corpus summary.

    Args:
        paths: Files or glob patterns
        config_path: Optional YAML config file
    """
    service, summary = _ingest(paths, config_path)
    logger.info(f"Indexed {len(service.chunks)} chunks")
    print(summary)


def query(paths: list[str], text: str, top_k: int = 5, config_path: str | None = None) -> None:
    """Ingest files, run one query and print ranked results."""
    service, _ = _ingest(paths, config_path)
    results = service.query(text, top_k)

    if not results:
        print(f"No results found for: {text}")
        return

    for i, r in enumerate(results, 1):
        print(f"{i}. [{r.score:.3f}] {r.chunk.chunk_id}")
        print(f"   {r.chunk.text}")
        print("")


def deck(paths: list[str], top_k: int = 5, config_path: str | None = None) -> None:
    """Ingest files and open the Search Deck TUI."""
    service, summary = _ingest(paths, config_path)

    # Import here to avoid loading textual unless needed
    from ragsearch.search_deck import run_deck

    run_deck(service, summary, top_k)


def serve(paths: list[str], transport: str = "stdio", config_path: str | None = None) -> None:
    """Ingest files and start an MCP server over them."""
    service, _ = _ingest(paths, config_path)

    # Import here to avoid loading MCP unless needed
    from ragsearch.server import create_mcp_server

    logger.info(f"Serving {len(service.chunks)} chunks via {transport}")
    mcp = create_mcp_server(service)
    mcp.run(transport=cast(Literal["stdio", "sse", "streamable-http"], transport))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ragsearch",
        description="ragsearch - ranked passage search over local text files",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to YAML config file (default: $RAGSEARCH_CONFIG or ~/.config/ragsearch/config.yaml)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # ingest command
    ingest_parser = subparsers.add_parser(
        "ingest",
        help="Index .txt files and print a summary",
    )
    ingest_parser.add_argument("paths", nargs="+", help="Files or glob patterns")

    # query command
    query_parser = subparsers.add_parser(
        "query",
        help="Index .txt files and run a single query",
    )
    query_parser.add_argument("paths", nargs="+", help="Files or glob patterns")
    query_parser.add_argument("-q", "--query", required=True, help="Query text")
    query_parser.add_argument(
        "-k",
        "--top-k",
        type=int,
        default=5,
        help="Number of results (default: 5)",
    )

    # deck command
    deck_parser = subparsers.add_parser(
        "deck",
        help="Index .txt files and open the interactive Search Deck",
    )
    deck_parser.add_argument("paths", nargs="+", help="Files or glob patterns")
    deck_parser.add_argument(
        "-k",
        "--top-k",
        type=int,
        default=5,
        help="Number of results (default: 5)",
    )

    # serve command
    serve_parser = subparsers.add_parser(
        "serve",
        help="Index .txt files and start an MCP server",
    )
    serve_parser.add_argument("paths", nargs="+", help="Files or glob patterns")
    serve_parser.add_argument(
        "--transport",
        choices=["stdio", "sse"],
        default="stdio",
        help="Transport protocol (default: stdio)",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    # Credentials such as the embedder API key may live in ./.env
    load_dotenv(find_dotenv(usecwd=True))

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
    )

    try:
        if args.command == "ingest":
            ingest(args.paths, args.config)
        elif args.command == "query":
            query(args.paths, args.query, args.top_k, args.config)
        elif args.command == "deck":
            deck(args.paths, args.top_k, args.config)
        elif args.command == "serve":
            serve(args.paths, args.transport, args.config)
    except RagSearchError as e:
        logger.error(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()

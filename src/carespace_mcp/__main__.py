"""
Entry point for running carespace_mcp as a module.

Usage:
    python -m carespace_mcp                    # Run with stdio transport
    python -m carespace_mcp --http             # Run with HTTP transport
    python -m carespace_mcp --http --port 9000 # Run HTTP on custom port
"""

import argparse
import logging
import os

from carespace_mcp import create_app

logger = logging.getLogger("carespace_mcp")


def main():
    parser = argparse.ArgumentParser(
        description="Carespace MCP Server - Session-based access to the Carespace rehabilitation API"
    )
    parser.add_argument(
        "--http",
        action="store_true",
        help="Use http transport instead of stdio"
    )
    parser.add_argument(
        "--host",
        default="0.0.0.0",
        help="Host to bind to (default: 0.0.0.0)"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8081,
        help="Port for HTTP transport (default: 8081)"
    )
    parser.add_argument(
        "--log-level",
        default=os.environ.get("CARESPACE_LOG_LEVEL", "INFO"),
        help="Logging level (default: INFO)"
    )

    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper())

    if args.http:
        os.environ["MCP_TRANSPORT"] = "http"
        os.environ["MCP_HOST"] = args.host
        os.environ["MCP_PORT"] = str(args.port)
    else:
        os.environ["MCP_TRANSPORT"] = "stdio"

    app = create_app()

    if args.http:
        logger.info(f"Starting Carespace MCP server on http://{args.host}:{args.port}/mcp")
        app.run(transport="http", host=args.host, port=args.port)
    else:
        app.run()


if __name__ == "__main__":
    main()

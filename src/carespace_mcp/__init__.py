"""
Modular MCP Server for the Carespace rehabilitation platform

Provides tools to authenticate with Carespace and manage users, clients,
and rehabilitation programs via the Model Context Protocol (MCP).

Supports two transport modes:
- stdio: For single-user local usage (default)
- http: For multi-user HTTP server deployment
"""

import logging
import os

from fastmcp import FastMCP

from carespace_mcp import auth_tool
from carespace_mcp import users
from carespace_mcp import clients
from carespace_mcp import programs


def create_app() -> FastMCP:
    """Create and configure the MCP app with all tools registered."""
    app = FastMCP("Carespace v1.0")

    # Auth tools (login, session management, passwords)
    app = auth_tool.register_tools(app)

    # Domain tools
    app = users.register_tools(app)
    app = clients.register_tools(app)
    app = programs.register_tools(app)

    return app


def main():
    """Initialize the MCP server and run with configured transport.

    Environment variables:
    - MCP_TRANSPORT: 'stdio' (default) or 'http'
    - MCP_HOST: Host to bind to (default: '0.0.0.0')
    - MCP_PORT: Port for HTTP transport (default: 8081)
    - CARESPACE_LOG_LEVEL: Logging level (default: 'INFO')
    """
    logging.basicConfig(level=os.environ.get("CARESPACE_LOG_LEVEL", "INFO").upper())

    app = create_app()

    transport = os.environ.get("MCP_TRANSPORT", "stdio")

    if transport == "http":
        host = os.environ.get("MCP_HOST", "0.0.0.0")
        port = int(os.environ.get("MCP_PORT", "8081"))
        app.run(transport="http", host=host, port=port)
    else:
        app.run()


if __name__ == "__main__":
    main()

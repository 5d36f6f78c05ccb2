"""MCP server exposing the converter tools."""

from __future__ import annotations

from fastmcp import FastMCP

from .tools import TOOL_REGISTRY


def create_server() -> FastMCP:
    """Create the server and register every tool in the registry."""
    mcp = FastMCP("kicad-e2k")
    for spec in TOOL_REGISTRY.values():
        mcp.tool(spec.handler, name=spec.name, description=spec.description)
    return mcp


def main() -> None:
    """CLI entry point."""
    server = create_server()
    server.run()


if __name__ == "__main__":
    main()

"""Integration tests for the MCP server wiring."""

from __future__ import annotations

from unittest.mock import patch

from fastmcp import FastMCP

from kicad_e2k.server import create_server
from kicad_e2k.tools import TOOL_REGISTRY


class TestServerCreation:
    def test_create_server(self) -> None:
        server = create_server()
        assert server is not None
        assert server.name == "kicad-e2k"

    def test_registers_every_tool(self) -> None:
        with patch.object(FastMCP, "tool") as mock_tool:
            create_server()
        names = [c.kwargs["name"] for c in mock_tool.call_args_list]
        assert sorted(names) == sorted(TOOL_REGISTRY)

    def test_handlers_passed_through(self) -> None:
        with patch.object(FastMCP, "tool") as mock_tool:
            create_server()
        for c in mock_tool.call_args_list:
            spec = TOOL_REGISTRY[c.kwargs["name"]]
            assert c.args == (spec.handler,)
            assert c.kwargs["description"] == spec.description

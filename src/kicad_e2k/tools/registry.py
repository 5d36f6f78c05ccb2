"""Registry of the converter's MCP tools.

Tool modules call :func:`register_tool` at import time; the server walks
:data:`TOOL_REGISTRY` to expose them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable


@dataclass(frozen=True)
class ToolSpec:
    """One MCP tool: its public name, schema and handler."""

    name: str
    description: str
    parameters: dict[str, Any]
    handler: Callable[..., dict[str, Any]]
    category: str = "convert"

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "parameters": self.parameters,
        }


TOOL_REGISTRY: dict[str, ToolSpec] = {}


def register_tool(
    name: str,
    description: str,
    parameters: dict[str, Any],
    handler: Callable[..., dict[str, Any]],
    *,
    category: str = "convert",
) -> None:
    """Add a tool; registering a name twice replaces the earlier entry."""
    TOOL_REGISTRY[name] = ToolSpec(name, description, parameters, handler, category)


def tools_in_category(category: str) -> list[ToolSpec]:
    return [spec for spec in TOOL_REGISTRY.values() if spec.category == category]

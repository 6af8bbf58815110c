"""MCP tools for browsing the built-in pack catalog and preset bundles."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from mcp.types import TextContent, Tool

from repoforge.bundles import PRESET_BUNDLES, find_preset_bundle
from repoforge.mcp_tools.common import _text
from repoforge.packs_data import BUILT_IN_CATALOG


def register() -> tuple[list[Tool], dict[str, Callable[..., Any]]]:
    """Return (tool_definitions, handler_map) for catalog tools."""
    tools = [
        Tool(
            name="list_packs",
            description="List built-in packs with priority, requirement tags, conflicts and capabilities",
            inputSchema={"type": "object", "properties": {}},
        ),
        Tool(
            name="list_bundles",
            description="List preset bundles, or fetch one bundle by id",
            inputSchema={
                "type": "object",
                "properties": {
                    "id": {"type": "string", "description": "Return only this bundle"},
                },
            },
        ),
    ]
    handlers: dict[str, Callable[..., Any]] = {
        "list_packs": _handle_list_packs,
        "list_bundles": _handle_list_bundles,
    }
    return tools, handlers


async def _handle_list_packs(arguments: dict[str, Any]) -> list[TextContent]:
    return _text([p.to_dict() for p in sorted(BUILT_IN_CATALOG, key=lambda p: p.sort_key)])


async def _handle_list_bundles(arguments: dict[str, Any]) -> list[TextContent]:
    bundle_id = arguments.get("id")
    if bundle_id:
        bundle = find_preset_bundle(bundle_id)
        if bundle is None:
            return _text({"error": f"Bundle not found: {bundle_id}", "code": "not_found"})
        return _text(bundle.to_dict())
    return _text([b.to_dict() for b in PRESET_BUNDLES])

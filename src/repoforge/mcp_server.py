"""MCP server for the repoforge compiler.

Exposes the compile / resolve / plan / recommend / render / publish pipeline
and the pack and bundle catalogs as MCP tools. Stateless: every call compiles
from the arguments it receives.

Usage:
    repoforge-mcp                          # Serve over stdio
    repoforge-mcp --log-dir .repoforge     # Also write JSONL tool-call logs
"""

from __future__ import annotations

import argparse
import logging
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from repoforge.mcp_tools import catalog, pipeline
from repoforge.mcp_tools.common import _text

# ---------------------------------------------------------------------------
# Server setup
# ---------------------------------------------------------------------------

server = Server("repoforge")
_logger: logging.Logger | None = None

_TOOLS: list[Tool] = []
_HANDLERS: dict[str, Callable[..., Any]] = {}

for _module in (pipeline, catalog):
    _module_tools, _module_handlers = _module.register()
    _TOOLS.extend(_module_tools)
    _HANDLERS.update(_module_handlers)

# ---------------------------------------------------------------------------
# Tool definitions
# ---------------------------------------------------------------------------


@server.list_tools()  # type: ignore[untyped-decorator,no-untyped-call]
async def list_tools() -> list[Tool]:
    return list(_TOOLS)


# ---------------------------------------------------------------------------
# Tool dispatch
# ---------------------------------------------------------------------------


@server.call_tool()  # type: ignore[untyped-decorator]
async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
    t0 = time.monotonic()

    try:
        result = await _dispatch(name, arguments or {})
    except Exception:
        if _logger:
            _logger.error("tool_error", extra={"tool": name, "args_data": arguments}, exc_info=True)
        raise
    else:
        duration_ms = round((time.monotonic() - t0) * 1000, 1)
        if _logger:
            _logger.info("tool_call", extra={"tool": name, "args_data": arguments, "duration_ms": duration_ms})
        return result


async def _dispatch(name: str, arguments: dict[str, Any]) -> list[TextContent]:
    handler = _HANDLERS.get(name)
    if handler is None:
        return _text({"error": f"Unknown tool: {name}", "code": "unknown_tool"})
    result: list[TextContent] = await handler(arguments)
    return result


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------


async def _run(log_dir: Path | None) -> None:
    global _logger

    if log_dir is not None:
        from repoforge.logging import setup_logging

        _logger = setup_logging(log_dir)
        _logger.info("mcp_server_start", extra={"tool": "server", "args_data": {"log_dir": str(log_dir)}})

    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


def main() -> None:
    import asyncio

    parser = argparse.ArgumentParser(description="repoforge MCP server")
    parser.add_argument("--log-dir", type=Path, default=None, help="Directory for JSONL tool-call logs")
    args = parser.parse_args()

    asyncio.run(_run(args.log_dir))


if __name__ == "__main__":
    main()

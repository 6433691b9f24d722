"""MCP stdio server exposing the FFmpeg operations as tools."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from ffmpeg_helper import __version__
from ffmpeg_helper.config import AppConfig
from ffmpeg_helper.dispatch import Dispatcher
from ffmpeg_helper.operations.catalog import TOOL_DEFINITIONS


logger = logging.getLogger(__name__)

SERVER_NAME = "mcp-ffmpeg-helper"


def list_tool_definitions() -> list[Tool]:
    return [
        Tool(name=d["name"], description=d["description"], inputSchema=d["inputSchema"])
        for d in TOOL_DEFINITIONS
    ]


def create_server(config: AppConfig | None = None, dispatcher: Dispatcher | None = None) -> Server:
    dispatcher = dispatcher or Dispatcher(config)
    server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def handle_list_tools() -> list[Tool]:
        return list_tool_definitions()

    # arguments are validated by the dispatcher
    @server.call_tool(validate_input=False)
    async def handle_call_tool(name: str, arguments: dict[str, Any] | None) -> list[TextContent]:
        # one worker thread per request; the ffmpeg run is the only wait
        result = await asyncio.to_thread(dispatcher.dispatch, name, arguments or {})
        return [TextContent(type="text", text=result.text)]

    return server


async def serve(config: AppConfig | None = None) -> None:
    server = create_server(config)
    logger.info("Starting MCP FFmpeg Helper server %s", __version__)
    async with stdio_server() as (read_stream, write_stream):
        logger.info("MCP FFmpeg Helper server connected and ready")
        await server.run(read_stream, write_stream, server.create_initialization_options())


def run(config: AppConfig | None = None) -> None:
    asyncio.run(serve(config))

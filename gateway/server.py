from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import CallToolResult, TextContent, Tool

from config.loader import (
    http_timeout_seconds,
    load_runtime_config,
    load_settings,
    trash_cache_ttl_seconds,
    trash_source_urls,
)
from gateway.dispatcher import Dispatcher
from gateway.errors import ConfigurationError
from gateway.services import build_registry
from gateway.tools.registry import build_tools_and_registry
from integrations.trash_client import TrashClient

logger = logging.getLogger("arr_gateway.server")

SERVER_NAME = "arr-gateway"


def build_server(dispatcher: Dispatcher) -> Server:
    server = Server(SERVER_NAME)

    @server.list_tools()
    async def list_tools() -> List[Tool]:
        return [
            Tool(name=spec.name, description=spec.description, inputSchema=spec.input_schema)
            for spec in dispatcher.list_tools()
        ]

    # Arguments are coerced by the dispatcher, so the SDK's strict schema check stays off
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: Optional[Dict[str, Any]]) -> CallToolResult:
        try:
            result = await dispatcher.invoke(name, arguments or {})
            text, is_error = result.to_text(), result.is_error
        except Exception as e:
            logger.exception("MCP tool '%s' failed", name)
            text, is_error = f"Error: {type(e).__name__}: {e}", True
        return CallToolResult(content=[TextContent(type="text", text=text)], isError=is_error)

    return server


def build_dispatcher(project_root: Path) -> Dispatcher:
    settings = load_settings(project_root)
    runtime_config = load_runtime_config(project_root)
    services = build_registry(settings.services, timeout=http_timeout_seconds(runtime_config))
    raw_url, api_url = trash_source_urls(runtime_config)
    trash = TrashClient(
        raw_url=raw_url,
        api_url=api_url,
        ttl_sec=trash_cache_ttl_seconds(runtime_config),
        timeout=http_timeout_seconds(runtime_config),
    )
    tools = build_tools_and_registry(services, trash)
    logger.info("Registered %d tools, advertising %d", len(tools), len(tools.advertised(services)))
    return Dispatcher(services, tools)


async def serve(dispatcher: Dispatcher) -> None:
    server = build_server(dispatcher)
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


def run() -> None:
    project_root = Path(__file__).resolve().parent.parent
    settings = load_settings(project_root)
    # stdout carries the JSON-RPC stream
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    try:
        dispatcher = build_dispatcher(project_root)
    except ConfigurationError as e:
        logger.error("%s", e)
        sys.exit(1)
    try:
        asyncio.run(serve(dispatcher))
    except KeyboardInterrupt:
        pass

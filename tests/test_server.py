import json
from unittest.mock import AsyncMock, Mock

import pytest
from mcp.types import CallToolRequest, CallToolRequestParams, ListToolsRequest

from gateway.dispatcher import Dispatcher
from gateway.server import build_server
from gateway.tools.registry import build_tools_and_registry
from integrations.trash_client import TrashClient


def server_for(services):
    return build_server(Dispatcher(services, build_tools_and_registry(services, TrashClient())))


@pytest.mark.asyncio
async def test_list_tools_returns_advertised_specs(make_registry):
    server = server_for(make_registry(overseerr=Mock()))
    handler = server.request_handlers[ListToolsRequest]
    result = await handler(ListToolsRequest(method="tools/list"))
    names = {t.name for t in result.root.tools}
    assert "overseerr_get_requests" in names
    assert "radarr_get_movies" not in names
    tool = next(t for t in result.root.tools if t.name == "overseerr_approve_request")
    assert tool.inputSchema["required"] == ["requestId"]


@pytest.mark.asyncio
async def test_call_tool_wraps_success_and_errors(make_registry):
    overseerr = Mock()
    overseerr.get_status = AsyncMock(return_value={"version": "1.33.2"})
    server = server_for(make_registry(overseerr=overseerr))
    handler = server.request_handlers[CallToolRequest]

    ok = await handler(
        CallToolRequest(method="tools/call", params=CallToolRequestParams(name="overseerr_status", arguments={}))
    )
    assert ok.root.isError is False
    assert json.loads(ok.root.content[0].text) == {"version": "1.33.2"}

    bad = await handler(
        CallToolRequest(method="tools/call", params=CallToolRequestParams(name="sonarr_get_queue", arguments={}))
    )
    assert bad.root.isError is True
    assert bad.root.content[0].text.startswith("Error: Sonarr (TV) is not configured")

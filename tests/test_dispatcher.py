import json
import logging
from unittest.mock import AsyncMock, Mock

import pytest

from config.loader import Backend
from gateway.dispatcher import Dispatcher
from gateway.results import ToolResult
from gateway.tools.registry import ToolRegistry, ToolSpec, build_tools_and_registry
from integrations.errors import TransportError
from integrations.trash_client import TrashClient


def dispatcher_for(services):
    return Dispatcher(services, build_tools_and_registry(services, TrashClient()))


@pytest.mark.asyncio
async def test_unknown_tool(make_registry):
    d = dispatcher_for(make_registry(radarr=Mock()))
    res = await d.invoke("nope_tool", {})
    assert res.is_error
    assert res.to_text() == "Error: Unknown tool: nope_tool"


@pytest.mark.asyncio
async def test_unconfigured_service_names_the_env_vars(make_registry):
    d = dispatcher_for(make_registry(radarr=Mock()))
    res = await d.invoke("sonarr_get_series", {})
    assert res.is_error
    assert res.to_text() == "Error: Sonarr (TV) is not configured. Set SONARR_URL and SONARR_API_KEY."


@pytest.mark.asyncio
async def test_unconfigured_check_comes_before_argument_validation(make_registry):
    d = dispatcher_for(make_registry(radarr=Mock()))
    res = await d.invoke("sonarr_get_episodes", {})
    assert "not configured" in res.payload


@pytest.mark.asyncio
async def test_missing_required_argument(make_registry):
    sonarr = Mock()
    sonarr.get_episodes = AsyncMock(return_value=[])
    d = dispatcher_for(make_registry(sonarr=sonarr))
    res = await d.invoke("sonarr_get_episodes", {})
    assert res.is_error
    assert res.payload == "Missing required argument: seriesId"
    sonarr.get_episodes.assert_not_called()


@pytest.mark.asyncio
async def test_numeric_strings_are_coerced_before_the_handler(make_registry):
    sonarr = Mock()
    sonarr.get_episodes = AsyncMock(return_value=[{"id": 1, "seasonNumber": 2, "hasFile": False}])
    d = dispatcher_for(make_registry(sonarr=sonarr))
    res = await d.invoke("sonarr_get_episodes", {"seriesId": "12", "seasonNumber": "2"})
    assert not res.is_error
    sonarr.get_episodes.assert_awaited_once_with(12, 2)
    assert json.loads(res.to_text())["count"] == 1


@pytest.mark.asyncio
async def test_backend_error_becomes_error_result(make_registry, caplog):
    radarr = Mock()
    radarr.get_movies = AsyncMock(side_effect=TransportError("Radarr", 503, "Service Unavailable"))
    d = dispatcher_for(make_registry(radarr=radarr))
    with caplog.at_level(logging.WARNING, logger="arr_gateway.dispatcher"):
        res = await d.invoke("radarr_get_movies", {})
    assert res.is_error
    assert res.to_text() == "Error: Radarr API error: 503 Service Unavailable"
    assert any(r.levelno == logging.WARNING for r in caplog.records)


@pytest.mark.asyncio
async def test_unexpected_exception_is_reported_with_type(make_registry, caplog):
    async def broken(args):
        raise KeyError("id")

    tools = ToolRegistry()
    tools.register(ToolSpec("broken", "d", {"type": "object", "properties": {}, "required": []}, None, broken))
    d = Dispatcher(make_registry(radarr=Mock()), tools)
    with caplog.at_level(logging.ERROR, logger="arr_gateway.dispatcher"):
        res = await d.invoke("broken", None)
    assert res.is_error
    assert res.payload == "KeyError: 'id'"
    assert any(r.exc_info for r in caplog.records)


@pytest.mark.asyncio
async def test_handler_may_return_flagged_result(make_registry):
    async def flagged(args):
        return ToolResult.flagged({"error": "nope", "hint": "try again"})

    tools = ToolRegistry()
    tools.register(ToolSpec("flagged", "d", {"type": "object", "properties": {}, "required": []}, None, flagged))
    res = await Dispatcher(make_registry(radarr=Mock()), tools).invoke("flagged", {})
    assert res.is_error
    assert json.loads(res.to_text()) == {"error": "nope", "hint": "try again"}


@pytest.mark.asyncio
async def test_list_tools_advertises_configured_only(make_registry):
    d = dispatcher_for(make_registry(tautulli=Mock()))
    names = {t.name for t in d.list_tools()}
    assert "tautulli_get_history" in names
    assert not any(n.startswith(("sonarr_", "radarr_", "overseerr_")) for n in names)
    assert Backend.TAUTULLI in d.services.configured()


@pytest.mark.asyncio
async def test_trash_compare_without_the_arr_service_is_flagged(make_registry):
    d = dispatcher_for(make_registry(sonarr=Mock()))
    res = await d.invoke("trash_compare_profile", {"service": "radarr", "profileId": "3", "trashProfile": "hd-bluray-web"})
    assert res.is_error
    assert json.loads(res.to_text()) == {"error": "radarr not configured. Cannot compare profiles."}


@pytest.mark.asyncio
async def test_enum_violation_is_rejected(make_registry):
    d = dispatcher_for(make_registry(sonarr=Mock()))
    res = await d.invoke("trash_list_profiles", {"service": "lidarr"})
    assert res.is_error
    assert res.payload == "Argument 'service' must be one of: radarr, sonarr"

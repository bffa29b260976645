import json
from unittest.mock import AsyncMock, Mock

import pytest

from config.loader import Backend
from gateway.dispatcher import Dispatcher
from gateway.tools.registry import build_tools_and_registry
from integrations.errors import TransportError
from integrations.trash_client import TrashClient


def arr(status=None, error=None, lookup=None, lookup_error=None, lookup_name=None):
    client = Mock()
    client.get_status = AsyncMock(return_value=status, side_effect=error)
    if lookup_name:
        setattr(client, lookup_name, AsyncMock(return_value=lookup, side_effect=lookup_error))
    return client


async def call(services, name, args=None):
    d = Dispatcher(services, build_tools_and_registry(services, TrashClient()))
    res = await d.invoke(name, args or {})
    return res, json.loads(res.to_text())


@pytest.mark.asyncio
async def test_status_reports_every_backend_even_when_one_is_down(make_registry):
    services = make_registry(
        sonarr=arr(status={"version": "4.0.0", "appName": "Sonarr"}),
        radarr=arr(error=TransportError("Radarr", None, "ConnectError: refused")),
    )
    res, report = await call(services, "arr_status")
    assert not res.is_error
    assert list(report.keys()) == [b.value for b in Backend]
    assert report["sonarr"] == {"configured": True, "connected": True, "version": "4.0.0", "appName": "Sonarr"}
    assert report["radarr"]["configured"] is True
    assert report["radarr"]["connected"] is False
    assert report["radarr"]["error"] == "Radarr API error: ConnectError: refused"
    for absent in ("lidarr", "readarr", "prowlarr", "tautulli", "overseerr"):
        assert report[absent] == {"configured": False}


@pytest.mark.asyncio
async def test_status_uses_server_status_for_tautulli_and_update_flag_for_overseerr(make_registry):
    tautulli = Mock()
    tautulli.get_server_status = AsyncMock(return_value={"connected": True})
    overseerr = arr(status={"version": "1.33.2", "updateAvailable": False})
    services = make_registry(tautulli=tautulli, overseerr=overseerr)
    _, report = await call(services, "arr_status")
    assert report["tautulli"] == {"configured": True, "connected": True, "data": {"connected": True}}
    assert report["overseerr"] == {
        "configured": True,
        "connected": True,
        "version": "1.33.2",
        "updateAvailable": False,
    }


@pytest.mark.asyncio
async def test_search_all_settles_every_configured_library(make_registry):
    series = [{"title": f"Show {i}"} for i in range(8)]
    services = make_registry(
        sonarr=arr(lookup=series, lookup_name="search_series"),
        radarr=arr(lookup_error=TransportError("Radarr", 500, "Internal Server Error"), lookup_name="search_movies"),
        lidarr=arr(lookup=[], lookup_name="search_artists"),
        prowlarr=arr(),
    )
    res, out = await call(services, "arr_search_all", {"term": "dune"})
    assert not res.is_error
    assert list(out.keys()) == ["sonarr", "radarr", "lidarr"]
    assert out["sonarr"]["count"] == 8
    assert len(out["sonarr"]["results"]) == 5
    assert out["radarr"] == {"error": "Radarr API error: 500 Internal Server Error"}
    assert out["lidarr"] == {"count": 0, "results": []}
    services.get(Backend.SONARR).search_series.assert_awaited_once_with("dune")


@pytest.mark.asyncio
async def test_search_all_requires_term(make_registry):
    services = make_registry(sonarr=arr(lookup=[], lookup_name="search_series"))
    d = Dispatcher(services, build_tools_and_registry(services, TrashClient()))
    res = await d.invoke("arr_search_all", {})
    assert res.is_error
    assert res.payload == "Missing required argument: term"

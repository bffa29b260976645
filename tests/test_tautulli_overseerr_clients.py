import httpx
import pytest

from integrations.errors import ApplicationError, TransportError
from integrations.overseerr_client import OverseerrClient, format_media_status, format_request_status
from integrations.tautulli_client import TautulliClient


def tautulli_ok(data):
    return {"response": {"result": "success", "message": None, "data": data}}


@pytest.mark.asyncio
async def test_tautulli_sends_key_and_cmd_as_query(make_recorder):
    rec = make_recorder({("GET", "/api/v2"): tautulli_ok({"stream_count": "1"})})
    t = TautulliClient("http://tautulli:8181", "tkey", transport=rec.transport)
    out = await t.get_activity()
    assert out == {"stream_count": "1"}
    req = rec.last()
    assert req.url.params["apikey"] == "tkey"
    assert req.url.params["cmd"] == "get_activity"
    assert "X-Api-Key" not in req.headers


@pytest.mark.asyncio
async def test_tautulli_drops_unset_filters_and_stringifies_bools(make_recorder):
    rec = make_recorder({("GET", "/api/v2"): tautulli_ok({"data": []})})
    t = TautulliClient("http://tautulli:8181", "tkey", transport=rec.transport)
    await t.get_history(search="Dune", length=1000, order_dir="desc")
    params = rec.last().url.params
    assert params["search"] == "Dune"
    assert params["length"] == "1000"
    assert "user_id" not in params
    assert "media_type" not in params

    await t.command("get_history", grouping=True)
    assert rec.last().url.params["grouping"] == "true"


@pytest.mark.asyncio
async def test_tautulli_library_search_ignores_non_positive_limit(make_recorder):
    rec = make_recorder({("GET", "/api/v2"): tautulli_ok({"results_count": 0})})
    t = TautulliClient("http://tautulli:8181", "tkey", transport=rec.transport)
    await t.search_library("Dune", 0)
    assert "limit" not in rec.last().url.params
    await t.search_library("Dune", 10)
    assert rec.last().url.params["limit"] == "10"


@pytest.mark.asyncio
async def test_tautulli_error_result_in_200_raises_application_error(make_recorder):
    rec = make_recorder(
        {("GET", "/api/v2"): {"response": {"result": "error", "message": "Invalid apikey", "data": {}}}}
    )
    t = TautulliClient("http://tautulli:8181", "tkey", transport=rec.transport)
    with pytest.raises(ApplicationError) as ei:
        await t.get_users()
    assert str(ei.value) == "Invalid apikey"


@pytest.mark.asyncio
async def test_tautulli_error_result_without_message(make_recorder):
    rec = make_recorder({("GET", "/api/v2"): {"response": {"result": "error"}}})
    t = TautulliClient("http://tautulli:8181", "tkey", transport=rec.transport)
    with pytest.raises(ApplicationError, match="Tautulli API error"):
        await t.get_server_status()


@pytest.mark.asyncio
async def test_tautulli_transport_error_hides_key(make_recorder):
    rec = make_recorder({("GET", "/api/v2"): httpx.Response(500, text="boom for tkey")})
    t = TautulliClient("http://tautulli:8181", "tkey", transport=rec.transport)
    with pytest.raises(TransportError) as ei:
        await t.get_libraries()
    assert "tkey" not in str(ei.value)
    assert str(ei.value).startswith("Tautulli API error: 500")


@pytest.mark.asyncio
async def test_overseerr_requests_skip_falsy_params(make_recorder):
    rec = make_recorder({("GET", "/api/v1/request"): {"pageInfo": {"results": 0}, "results": []}})
    o = OverseerrClient("http://overseerr:5055", "okey", transport=rec.transport)
    await o.get_requests(take=20, skip=0, filter="pending")
    params = rec.last().url.params
    assert params["take"] == "20"
    assert params["filter"] == "pending"
    assert "skip" not in params
    assert rec.last().headers["X-Api-Key"] == "okey"


@pytest.mark.asyncio
async def test_overseerr_approve_and_user_requests_paths(make_recorder):
    rec = make_recorder(
        {
            ("POST", "/api/v1/request/9/approve"): {"id": 9, "status": 2},
            ("GET", "/api/v1/user/4/requests"): {"results": []},
        }
    )
    o = OverseerrClient("http://overseerr:5055", "okey", transport=rec.transport)
    out = await o.approve_request(9)
    assert out["status"] == 2
    await o.get_user_requests(4, take=5)
    assert rec.last().url.params["take"] == "5"


def test_overseerr_status_labels():
    assert format_request_status(1) == "pending"
    assert format_request_status(3) == "declined"
    assert format_request_status(99) == "unknown"
    assert format_media_status(5) == "available"
    assert format_media_status(None) == "unknown"


@pytest.mark.asyncio
async def test_overseerr_single_item_paths(make_recorder):
    rec = make_recorder(
        {
            ("GET", "/api/v1/request/7"): {"id": 7, "status": 1},
            ("DELETE", "/api/v1/request/7"): httpx.Response(204),
            ("GET", "/api/v1/user/4"): {"id": 4, "displayName": "sam"},
            ("GET", "/api/v1/movie/438631"): {"id": 438631, "title": "Dune"},
            ("GET", "/api/v1/tv/90228"): {"id": 90228, "name": "Dune: Prophecy"},
        }
    )
    o = OverseerrClient("http://overseerr:5055", "okey", transport=rec.transport)
    assert (await o.get_request("7"))["status"] == 1
    assert await o.delete_request(7) is None
    assert rec.last().method == "DELETE"
    assert (await o.get_user(4))["displayName"] == "sam"
    assert (await o.get_movie(438631))["title"] == "Dune"
    assert (await o.get_tv(90228))["name"] == "Dune: Prophecy"
    assert [r.url.path for r in rec.requests] == [
        "/api/v1/request/7",
        "/api/v1/request/7",
        "/api/v1/user/4",
        "/api/v1/movie/438631",
        "/api/v1/tv/90228",
    ]

import httpx
import pytest

from integrations.errors import TransportError
from integrations.trash_client import TrashClient, categorize_custom_format, normalize_naming
from integrations.ttl_cache import TTLCache

RAW = "https://raw.example"
API = "https://api.example/contents"


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def listing(*names):
    return [{"name": n, "type": "file"} for n in names] + [{"name": "README.md", "type": "file"}]


def guides_transport(calls):
    docs = {
        "/contents/docs/json/radarr/quality-profiles": listing("hd-bluray-web.json", "remux-web-1080p.json"),
        "/docs/json/radarr/quality-profiles/hd-bluray-web.json": {
            "trash_id": "abc",
            "name": "HD Bluray + WEB",
            "trash_description": "Quality profile for HD",
            "items": [{"name": "Bluray-1080p", "allowed": True}],
            "formatItems": {"BR-DISK": "id1"},
        },
        "/docs/json/radarr/quality-profiles/remux-web-1080p.json": {"trash_id": "def", "name": "Remux + WEB 1080p"},
        "/contents/docs/json/radarr/cf": listing("truehd-atmos.json", "amzn.json", "br-disk.json"),
        "/docs/json/radarr/cf/truehd-atmos.json": {"name": "TrueHD ATMOS", "trash_id": "t1", "trash_scores": {"default": 5000}},
        "/docs/json/radarr/cf/amzn.json": {"name": "AMZN", "trash_id": "t2"},
        "/docs/json/radarr/cf/br-disk.json": {"name": "BR-DISK", "trash_id": "t3", "trash_scores": {"default": -10000}},
        "/contents/docs/json/sonarr/quality-size": listing("series.json", "anime.json"),
        "/docs/json/sonarr/quality-size/series.json": {"type": "series", "qualities": [{"quality": "HDTV-720p", "min": 10}]},
        "/docs/json/sonarr/quality-size/anime.json": {"type": "anime", "qualities": []},
        "/docs/json/sonarr/naming/sonarr-naming.json": {
            "season": {"default": "Season {season:00}"},
            "series": {"default": "{Series TitleYear}", "plex-imdb": "{Series TitleYear} {imdb-{ImdbId}}"},
            "episodes": {"standard": {"default": "{Series TitleYear} - S{season:00}E{episode:00}"}},
        },
    }

    def handler(request):
        calls.append(str(request.url))
        body = docs.get(request.url.path)
        if body is None:
            return httpx.Response(404, text="missing")
        return httpx.Response(200, json=body)

    return httpx.MockTransport(handler)


def make_client(calls, clock=None, ttl=3600):
    return TrashClient(
        raw_url=RAW,
        api_url=API,
        ttl_sec=ttl,
        cache=TTLCache(clock=clock or FakeClock()),
        transport=guides_transport(calls),
    )


def test_categorize_custom_format():
    assert categorize_custom_format("TrueHD ATMOS") == ["audio"]
    assert "streaming" in categorize_custom_format("AMZN")
    assert "unwanted" in categorize_custom_format("BR-DISK")
    assert categorize_custom_format("Dolby Vision (w/o HDR fallback)")[0] == "hdr"
    assert categorize_custom_format("Something Unheard Of") == []


def test_normalize_naming_sonarr_shape():
    raw = {"series": {"default": "S"}, "season": {"default": "Season"}, "episodes": {"standard": {"default": "E"}}}
    out = normalize_naming("sonarr", raw)
    assert out["folder"] == {"default": "S"}
    assert out["file"] == {"default": "E"}
    assert out["season"] == {"default": "Season"}


@pytest.mark.asyncio
async def test_list_profiles_only_reads_json_documents():
    calls = []
    trash = make_client(calls)
    profiles = await trash.list_profiles("radarr")
    assert [p["name"] for p in profiles] == ["HD Bluray + WEB", "Remux + WEB 1080p"]
    assert profiles[0]["description"] == "Quality profile for HD"
    assert not any("README" in c for c in calls)


@pytest.mark.asyncio
async def test_get_profile_matches_name_stem_or_id():
    trash = make_client([])
    assert (await trash.get_profile("radarr", "hd bluray + web"))["trash_id"] == "abc"
    assert (await trash.get_profile("radarr", "remux-web-1080p"))["trash_id"] == "def"
    assert (await trash.get_profile("radarr", "abc"))["name"] == "HD Bluray + WEB"
    assert await trash.get_profile("radarr", "nope") is None


@pytest.mark.asyncio
async def test_custom_formats_filtered_by_category():
    trash = make_client([])
    everything = await trash.list_custom_formats("radarr")
    assert len(everything) == 3
    audio = await trash.list_custom_formats("radarr", "audio")
    assert [f["name"] for f in audio] == ["TrueHD ATMOS"]
    assert audio[0]["defaultScore"] == 5000


@pytest.mark.asyncio
async def test_quality_sizes_and_naming():
    trash = make_client([])
    sizes = await trash.get_quality_sizes("sonarr", "Series")
    assert [s["type"] for s in sizes] == ["series"]
    naming = await trash.get_naming("sonarr")
    assert naming["folder"]["plex-imdb"].startswith("{Series TitleYear}")
    assert await trash.get_naming("radarr") is None


@pytest.mark.asyncio
async def test_reference_data_cached_within_ttl_and_refetched_after():
    calls = []
    clock = FakeClock()
    trash = make_client(calls, clock=clock, ttl=60)
    await trash.list_profiles("radarr")
    first = len(calls)
    await trash.list_profiles("radarr")
    assert len(calls) == first

    clock.now += 61
    await trash.list_profiles("radarr")
    assert len(calls) == first * 2


@pytest.mark.asyncio
async def test_unsupported_service_rejected():
    trash = make_client([])
    with pytest.raises(ValueError):
        await trash.list_profiles("lidarr")


@pytest.mark.asyncio
async def test_listing_failure_raises_transport_error():
    trash = make_client([])
    with pytest.raises(TransportError) as ei:
        await trash.list_profiles("sonarr")
    assert ei.value.status == 404

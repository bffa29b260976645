from __future__ import annotations

import asyncio
import logging
import re
from typing import Any, Dict, List, Optional

import httpx

from config.loader import TRASH_API_URL, TRASH_RAW_URL
from integrations.errors import TransportError
from integrations.ttl_cache import TTLCache, shared_cache

logger = logging.getLogger("arr_gateway.trash")

TRASH_SERVICES = ("radarr", "sonarr")

CUSTOM_FORMAT_CATEGORIES = (
    "hdr",
    "audio",
    "resolution",
    "source",
    "streaming",
    "anime",
    "unwanted",
    "release",
    "language",
)

# Matched against the lowercased custom format name, token-wise for single words
_CATEGORY_KEYWORDS: Dict[str, tuple] = {
    "hdr": ("hdr", "hdr10", "hdr10+", "hdr10plus", "dv", "dolby vision", "hlg", "pq", "sdr"),
    "audio": ("truehd", "atmos", "dts", "dts-x", "dts-hd", "dts-es", "aac", "flac", "pcm", "dd", "dd+", "opus", "mp3", "audio"),
    "resolution": ("480p", "576p", "720p", "1080p", "2160p", "4k", "uhd", "sd"),
    "source": ("remux", "bluray", "blu-ray", "web", "web-dl", "webdl", "webrip", "hdtv", "dvd", "bd", "disk", "raw-hd"),
    "streaming": (
        "amzn", "atvp", "dsnp", "hmax", "max", "hulu", "nf", "pcok", "pmtp", "stan", "crav", "it", "ma",
        "roku", "sho", "vudu", "cc", "crit", "dcu", "ip", "nlz", "qibi", "red", "syfy", "vrv", "funi", "cr", "hidive",
    ),
    "anime": ("anime", "subs", "dual audio", "uncensored", "v0", "v1", "v2", "v3", "v4", "bd raw"),
    "unwanted": (
        "br-disk", "lq", "3d", "extras", "upscaled", "obfuscated", "retags", "scene", "av1", "x265 (hd)",
        "bad dual groups", "no-rlsgroup", "evo", "sing-along", "line/mic dubbed", "generated dynamic hdr",
    ),
    "release": (
        "tier", "repack", "repack2", "repack3", "proper", "hq", "internal", "remaster", "remastered", "imax",
        "criterion", "edition", "special", "hybrid", "open matte", "theatrical", "director", "extended",
        "uncut", "unrated", "group", "freeleech",
    ),
    "language": ("language", "german", "french", "english", "original", "multi", "dubs", "vostfr", "dl"),
}

_NAMING_FILES = {"radarr": "radarr-naming.json", "sonarr": "sonarr-naming.json"}

_FETCH_CONCURRENCY = 8


def categorize_custom_format(name: str) -> List[str]:
    text = (name or "").lower()
    tokens = set(re.split(r"[\s()\[\]/|,.:]+", text))
    found: List[str] = []
    for category in CUSTOM_FORMAT_CATEGORIES:
        for kw in _CATEGORY_KEYWORDS[category]:
            hit = kw in text if " " in kw else kw in tokens
            if hit:
                found.append(category)
                break
    return found


def normalize_naming(service: str, raw: Dict[str, Any]) -> Dict[str, Any]:
    """Bring both services' naming documents to ``{folder, file, season?, series?}``."""
    if service == "sonarr":
        episodes = raw.get("episodes") or {}
        out: Dict[str, Any] = {
            "folder": dict(raw.get("series") or {}),
            "file": dict(episodes.get("standard") or {}),
        }
        if raw.get("season"):
            out["season"] = dict(raw["season"])
        if raw.get("series"):
            out["series"] = dict(raw["series"])
        return out
    return {"folder": dict(raw.get("folder") or {}), "file": dict(raw.get("file") or {})}


class TrashClient:
    """Read-only view of the TRaSH Guides JSON published on GitHub.

    Directory listings come from the GitHub contents API, documents from the raw
    content host; both are cached for ``ttl_sec``.
    """

    service_name = "TRaSH Guides"

    def __init__(
        self,
        *,
        raw_url: str = TRASH_RAW_URL,
        api_url: str = TRASH_API_URL,
        ttl_sec: int = 3600,
        timeout: float = 30.0,
        cache: Optional[TTLCache] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.raw_url = raw_url.rstrip("/")
        self.api_url = api_url.rstrip("/")
        self.ttl_sec = ttl_sec
        self.timeout = timeout
        self.cache = cache if cache is not None else shared_cache
        self._transport = transport

    def _new_client(self) -> httpx.AsyncClient:
        kwargs: Dict[str, Any] = {
            "timeout": self.timeout,
            "headers": {"Accept": "application/json", "User-Agent": "arr-gateway"},
            "follow_redirects": True,
        }
        if self._transport is not None:
            kwargs["transport"] = self._transport
        return httpx.AsyncClient(**kwargs)

    async def _get_json(self, url: str, *, missing_ok: bool = False) -> Any:
        try:
            async with self._new_client() as client:
                r = await client.get(url)
        except httpx.HTTPError as e:
            raise TransportError(self.service_name, None, f"{type(e).__name__}: {e}") from e
        if r.status_code == 404 and missing_ok:
            return None
        if r.status_code >= 400:
            raise TransportError(self.service_name, r.status_code, r.reason_phrase or "", r.text)
        return r.json()

    async def _list_dir(self, path: str) -> List[str]:
        async def load() -> List[str]:
            entries = await self._get_json(f"{self.api_url}/{path}") or []
            return sorted(
                e["name"] for e in entries
                if isinstance(e, dict) and e.get("type") == "file" and str(e.get("name", "")).endswith(".json")
            )

        return await self.cache.cached(f"trash:dir:{path}", self.ttl_sec, load)

    async def _document(self, path: str, *, missing_ok: bool = False) -> Any:
        async def load() -> Any:
            return await self._get_json(f"{self.raw_url}/{path}", missing_ok=missing_ok)

        return await self.cache.cached(f"trash:doc:{path}", self.ttl_sec, load)

    async def _documents(self, directory: str) -> List[Dict[str, Any]]:
        names = await self._list_dir(directory)
        sem = asyncio.Semaphore(_FETCH_CONCURRENCY)

        async def one(name: str) -> Dict[str, Any]:
            async with sem:
                doc = await self._document(f"{directory}/{name}") or {}
            doc = dict(doc)
            doc.setdefault("_file", name)
            return doc

        return list(await asyncio.gather(*(one(n) for n in names)))

    # Quality profiles
    async def list_profiles(self, service: str) -> List[Dict[str, Any]]:
        docs = await self._documents(f"docs/json/{_service(service)}/quality-profiles")
        return [
            {
                "name": d.get("name") or d["_file"][:-5],
                "description": d.get("trash_description"),
                "trash_id": d.get("trash_id"),
            }
            for d in docs
        ]

    async def get_profile(self, service: str, name: str) -> Optional[Dict[str, Any]]:
        wanted = (name or "").strip().lower()
        if not wanted:
            return None
        docs = await self._documents(f"docs/json/{_service(service)}/quality-profiles")
        for d in docs:
            stem = d["_file"][:-5].lower()
            if str(d.get("name", "")).lower() == wanted or stem == wanted or d.get("trash_id") == name:
                return d
        return None

    # Custom formats
    async def list_custom_formats(self, service: str, category: Optional[str] = None) -> List[Dict[str, Any]]:
        docs = await self._documents(f"docs/json/{_service(service)}/cf")
        formats = []
        for d in docs:
            cf_name = d.get("name") or d["_file"][:-5]
            scores = d.get("trash_scores") or {}
            formats.append(
                {
                    "name": cf_name,
                    "trash_id": d.get("trash_id"),
                    "categories": categorize_custom_format(cf_name),
                    "defaultScore": scores.get("default"),
                }
            )
        if category:
            wanted = category.lower()
            formats = [f for f in formats if wanted in f["categories"]]
        return formats

    # Naming
    async def get_naming(self, service: str) -> Optional[Dict[str, Any]]:
        svc = _service(service)
        raw = await self._document(f"docs/json/{svc}/naming/{_NAMING_FILES[svc]}", missing_ok=True)
        if not raw:
            return None
        return normalize_naming(svc, raw)

    # Quality sizes
    async def get_quality_sizes(self, service: str, type: Optional[str] = None) -> List[Dict[str, Any]]:
        docs = await self._documents(f"docs/json/{_service(service)}/quality-size")
        sizes = [{"type": d.get("type") or d["_file"][:-5], "qualities": d.get("qualities") or []} for d in docs]
        if type:
            sizes = [s for s in sizes if str(s["type"]).lower() == type.lower()]
        return sizes


def _service(service: str) -> str:
    svc = (service or "").lower()
    if svc not in TRASH_SERVICES:
        raise ValueError(f"TRaSH Guides data is only available for: {', '.join(TRASH_SERVICES)}")
    return svc

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional

from gateway.formatters import (
    allowed_quality_names,
    calendar_window,
    format_bytes,
    mb_per_min,
    percent,
    scored_custom_formats,
    summarize_queue,
)


class ArrWorker:
    """Reshaping shared by the library managers (Sonarr, Radarr, Lidarr, Readarr).

    Subclasses pick the storage endpoint, the calendar default and whether the
    backend knows about metadata profiles.
    """

    service = "arr"
    calendar_days = 30
    storage_from_disk_space = False
    has_metadata_profiles = False

    def __init__(self, client: Any) -> None:
        self.client = client

    # --------------------------- helpers ---------------------------
    @staticmethod
    def _coerce_bool(value: Any, default: bool = True) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            v = value.strip().lower()
            if v in ("1", "true", "yes", "y", "on"):
                return True
            if v in ("0", "false", "no", "n", "off"):
                return False
        return default

    @staticmethod
    def _coerce_int_list(value: Any) -> List[int]:
        if value is None:
            return []
        if isinstance(value, (list, tuple)):
            return [int(v) for v in value]
        if isinstance(value, str):
            return [int(p.strip()) for p in value.split(",") if p.strip()]
        return [int(value)]

    def _window(self, days: Any) -> tuple:
        # 0 / missing fall back to the per-service default
        n = int(days) if days else self.calendar_days
        return calendar_window(n)

    # --------------------------- config ops ---------------------------
    async def quality_profiles(self) -> Dict[str, Any]:
        profiles = await self.client.get_quality_profiles()
        return {
            "count": len(profiles),
            "profiles": [
                {
                    "id": p.get("id"),
                    "name": p.get("name"),
                    "upgradeAllowed": p.get("upgradeAllowed"),
                    "cutoff": p.get("cutoff"),
                    "allowedQualities": allowed_quality_names(p.get("items") or []),
                    "customFormats": scored_custom_formats(p),
                    "minFormatScore": p.get("minFormatScore"),
                    "cutoffFormatScore": p.get("cutoffFormatScore"),
                }
                for p in profiles
            ],
        }

    async def health(self) -> Dict[str, Any]:
        issues = await self.client.get_health()
        return {
            "issueCount": len(issues),
            "issues": [
                {
                    "source": h.get("source"),
                    "type": h.get("type"),
                    "message": h.get("message"),
                    "wikiUrl": h.get("wikiUrl"),
                }
                for h in issues
            ],
            "status": "healthy" if not issues else "issues detected",
        }

    async def root_folders(self) -> Dict[str, Any]:
        if self.storage_from_disk_space:
            folders = await self.client.get_disk_space()
        else:
            folders = await self.client.get_root_folders()
        return {"count": len(folders), "folders": [self._folder(f) for f in folders]}

    @staticmethod
    def _folder(f: Dict[str, Any]) -> Dict[str, Any]:
        free = f.get("freeSpace") or 0
        total = f.get("totalSpace") or 0
        out: Dict[str, Any] = {
            "id": f.get("id"),
            "path": f.get("path"),
            "accessible": f.get("accessible"),
            "freeSpace": format_bytes(free),
            "freeSpaceBytes": f.get("freeSpace"),
        }
        if total > 0:
            out["totalSpace"] = format_bytes(total)
            out["totalSpaceBytes"] = total
            out["percentFree"] = percent(free, total)
            out["percentUsed"] = percent(total - free, total)
        out["unmappedFolders"] = len(f.get("unmappedFolders") or [])
        return out

    async def download_clients(self) -> Dict[str, Any]:
        clients = await self.client.get_download_clients()
        return {
            "count": len(clients),
            "clients": [
                {
                    "id": c.get("id"),
                    "name": c.get("name"),
                    "implementation": c.get("implementationName"),
                    "protocol": c.get("protocol"),
                    "enabled": c.get("enable"),
                    "priority": c.get("priority"),
                    "removeCompletedDownloads": c.get("removeCompletedDownloads"),
                    "removeFailedDownloads": c.get("removeFailedDownloads"),
                    "tags": c.get("tags"),
                }
                for c in clients
            ],
        }

    async def naming(self) -> Dict[str, Any]:
        return await self.client.get_naming_config()

    async def tags(self) -> Dict[str, Any]:
        tags = await self.client.get_tags()
        return {"count": len(tags), "tags": [{"id": t.get("id"), "label": t.get("label")} for t in tags]}

    async def review_setup(self) -> Dict[str, Any]:
        """Every configuration surface in one call; any failing read fails the review."""
        calls = [
            self.client.get_status(),
            self.client.get_health(),
            self.client.get_quality_profiles(),
            self.client.get_quality_definitions(),
            self.client.get_download_clients(),
            self.client.get_naming_config(),
            self.client.get_media_management(),
            self.client.get_root_folders(),
            self.client.get_tags(),
            self.client.get_indexers(),
        ]
        if self.has_metadata_profiles:
            calls.append(self.client.get_metadata_profiles())
        results = await asyncio.gather(*calls)
        (status, health, profiles, definitions, clients, naming, media, folders, tags, indexers) = results[:10]
        metadata_profiles: Optional[List[Dict[str, Any]]] = results[10] if self.has_metadata_profiles else None

        status = status or {}
        media = media or {}
        review: Dict[str, Any] = {
            "service": self.service,
            "version": status.get("version"),
            "appName": status.get("appName"),
            "platform": {"os": status.get("osName"), "isDocker": status.get("isDocker")},
            "health": {"issueCount": len(health), "issues": health},
            "storage": {
                "rootFolders": [
                    {
                        "path": f.get("path"),
                        "accessible": f.get("accessible"),
                        "freeSpace": format_bytes(f.get("freeSpace") or 0),
                        "freeSpaceBytes": f.get("freeSpace"),
                        "unmappedFolderCount": len(f.get("unmappedFolders") or []),
                    }
                    for f in folders
                ]
            },
            "qualityProfiles": [
                {
                    "id": p.get("id"),
                    "name": p.get("name"),
                    "upgradeAllowed": p.get("upgradeAllowed"),
                    "cutoff": p.get("cutoff"),
                    "allowedQualities": allowed_quality_names(p.get("items") or []),
                    "customFormatsWithScores": len(scored_custom_formats(p)),
                    "minFormatScore": p.get("minFormatScore"),
                }
                for p in profiles
            ],
            "qualityDefinitions": [
                {
                    "quality": (d.get("quality") or {}).get("name"),
                    "minSize": mb_per_min(d.get("minSize")),
                    "maxSize": "unlimited" if d.get("maxSize") == 0 else mb_per_min(d.get("maxSize")),
                    "preferredSize": mb_per_min(d.get("preferredSize")),
                }
                for d in definitions
            ],
            "downloadClients": [
                {
                    "name": c.get("name"),
                    "type": c.get("implementationName"),
                    "protocol": c.get("protocol"),
                    "enabled": c.get("enable"),
                    "priority": c.get("priority"),
                }
                for c in clients
            ],
            "indexers": [
                {
                    "name": i.get("name"),
                    "protocol": i.get("protocol"),
                    "enableRss": i.get("enableRss"),
                    "enableAutomaticSearch": i.get("enableAutomaticSearch"),
                    "enableInteractiveSearch": i.get("enableInteractiveSearch"),
                    "priority": i.get("priority"),
                }
                for i in indexers
            ],
            "naming": naming,
            "mediaManagement": {
                "recycleBin": media.get("recycleBin") or "not set",
                "recycleBinCleanupDays": media.get("recycleBinCleanupDays"),
                "downloadPropersAndRepacks": media.get("downloadPropersAndRepacks"),
                "deleteEmptyFolders": media.get("deleteEmptyFolders"),
                "copyUsingHardlinks": media.get("copyUsingHardlinks"),
                "importExtraFiles": media.get("importExtraFiles"),
                "extraFileExtensions": media.get("extraFileExtensions"),
            },
            "tags": [t.get("label") for t in tags],
        }
        if metadata_profiles:
            review["metadataProfiles"] = metadata_profiles
        return review

    # --------------------------- activity ---------------------------
    async def queue(self) -> Dict[str, Any]:
        return summarize_queue(await self.client.get_queue())

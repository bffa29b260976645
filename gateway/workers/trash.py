from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional, Union

from gateway.results import ToolResult
from integrations.trash_client import CUSTOM_FORMAT_CATEGORIES, TrashClient

CUSTOM_FORMAT_PAGE = 50
UNLIMITED_PREFERRED = 1999
UNLIMITED_MAX = 2000

# media server -> (folder key, file key) in the naming documents
SERVER_NAMING_KEYS: Dict[str, Dict[str, str]] = {
    "plex": {"folder": "plex-imdb", "file": "plex-imdb"},
    "emby": {"folder": "emby-imdb", "file": "emby-imdb"},
    "jellyfin": {"folder": "jellyfin-imdb", "file": "jellyfin-imdb"},
    "standard": {"folder": "default", "file": "standard"},
}

Response = Union[Dict[str, Any], ToolResult]


def _profile_not_found(name: str, service: str) -> ToolResult:
    return ToolResult.flagged(
        {
            "error": f"Profile '{name}' not found for {service}",
            "hint": "Use trash_list_profiles to see available profiles",
        }
    )


def _naming_keys(media_server: str) -> Dict[str, str]:
    return SERVER_NAMING_KEYS.get(media_server) or SERVER_NAMING_KEYS["standard"]


def _recommended(naming: Dict[str, Any], media_server: str) -> Dict[str, Any]:
    keys = _naming_keys(media_server)
    folder = naming.get("folder") or {}
    file = naming.get("file") or {}
    out = {
        "folder": folder.get(keys["folder"]) or folder.get("default"),
        "file": file.get(keys["file"]) or file.get("standard"),
    }
    if naming.get("season"):
        out["season"] = naming["season"].get(keys["folder"]) or naming["season"].get("default")
    if naming.get("series"):
        out["series"] = naming["series"].get(keys["folder"]) or naming["series"].get("default")
    return out


def _size(value: Any, unlimited: int) -> str:
    return "unlimited" if value == unlimited else f"{value} MB/min"


def _diff(mine: List[str], theirs: List[str]) -> Dict[str, List[str]]:
    mine_set, theirs_set = set(mine), set(theirs)
    return {
        "matching": [q for q in mine if q in theirs_set],
        "missingFromYours": [q for q in theirs if q not in mine_set],
        "extraInYours": [q for q in mine if q not in theirs_set],
    }


def _unique(values: List[Any]) -> List[Any]:
    seen: Dict[Any, None] = {}
    for v in values:
        if v is not None and v not in seen:
            seen[v] = None
    return list(seen)


class TrashWorker:
    """TRaSH Guides lookups plus comparisons against a live Radarr/Sonarr."""

    def __init__(self, trash: TrashClient, arr_client: Optional[Any] = None) -> None:
        self.trash = trash
        self.arr_client = arr_client

    def _require_arr(self, service: str, action: str) -> Optional[ToolResult]:
        if self.arr_client is None:
            return ToolResult.flagged({"error": f"{service} not configured. Cannot compare {action}."})
        return None

    async def list_profiles(self, *, service: str) -> Dict[str, Any]:
        profiles = await self.trash.list_profiles(service)
        return {
            "service": service,
            "count": len(profiles),
            "profiles": [
                {
                    "name": p.get("name"),
                    "description": (p.get("description") or "").replace("<br>", " ") or "No description",
                }
                for p in profiles
            ],
            "usage": "Use trash_get_profile to see full details for a specific profile",
        }

    async def get_profile(self, *, service: str, profile: str) -> Response:
        data = await self.trash.get_profile(service, profile)
        if not data:
            return _profile_not_found(profile, service)
        description = data.get("trash_description")
        return {
            "name": data.get("name"),
            "description": description.replace("<br>", "\n") if description else None,
            "trash_id": data.get("trash_id"),
            "upgradeAllowed": data.get("upgradeAllowed"),
            "cutoff": data.get("cutoff"),
            "minFormatScore": data.get("minFormatScore"),
            "cutoffFormatScore": data.get("cutoffFormatScore"),
            "language": data.get("language"),
            "qualities": [
                {"name": i.get("name"), "allowed": i.get("allowed"), "items": i.get("items")}
                for i in data.get("items") or []
            ],
            "customFormats": [
                {"name": name, "trash_id": trash_id} for name, trash_id in (data.get("formatItems") or {}).items()
            ],
        }

    async def list_custom_formats(self, *, service: str, category: Optional[str] = None) -> Dict[str, Any]:
        formats = await self.trash.list_custom_formats(service, category)
        out: Dict[str, Any] = {
            "service": service,
            "category": category or "all",
            "count": len(formats),
            "formats": [
                {"name": f.get("name"), "categories": f.get("categories"), "defaultScore": f.get("defaultScore")}
                for f in formats[:CUSTOM_FORMAT_PAGE]
            ],
        }
        if len(formats) > CUSTOM_FORMAT_PAGE:
            out["note"] = (
                f"Showing first {CUSTOM_FORMAT_PAGE} of {len(formats)}. Use category filter to narrow results."
            )
        out["availableCategories"] = list(CUSTOM_FORMAT_CATEGORIES)
        return out

    async def get_naming(self, *, service: str, media_server: str) -> Response:
        naming = await self.trash.get_naming(service)
        if not naming:
            return ToolResult.flagged({"error": f"Could not fetch naming conventions for {service}"})
        return {
            "service": service,
            "mediaServer": media_server,
            "recommended": _recommended(naming, media_server),
            "allFolderOptions": list((naming.get("folder") or {}).keys()),
            "allFileOptions": list((naming.get("file") or {}).keys()),
        }

    async def get_quality_sizes(self, *, service: str, type: Optional[str] = None) -> Dict[str, Any]:
        sizes = await self.trash.get_quality_sizes(service, type)
        return {
            "service": service,
            "type": type or "all",
            "profiles": [
                {
                    "type": s.get("type"),
                    "qualities": [
                        {
                            "quality": q.get("quality"),
                            "min": f"{q.get('min')} MB/min",
                            "preferred": _size(q.get("preferred"), UNLIMITED_PREFERRED),
                            "max": _size(q.get("max"), UNLIMITED_MAX),
                        }
                        for q in s.get("qualities") or []
                    ],
                }
                for s in sizes
            ],
        }

    async def compare_profile(self, *, service: str, profile_id: int, trash_profile: str) -> Response:
        missing = self._require_arr(service, "profiles")
        if missing:
            return missing
        user_profiles, reference = await asyncio.gather(
            self.arr_client.get_quality_profiles(),
            self.trash.get_profile(service, trash_profile),
        )
        mine = next((p for p in user_profiles if p.get("id") == int(profile_id)), None)
        if mine is None:
            return ToolResult.flagged(
                {
                    "error": f"Profile ID {int(profile_id)} not found",
                    "availableProfiles": [{"id": p.get("id"), "name": p.get("name")} for p in user_profiles],
                }
            )
        if not reference:
            return ToolResult.flagged(
                {
                    "error": f"TRaSH profile '{trash_profile}' not found",
                    "hint": "Use trash_list_profiles to see available profiles",
                }
            )

        my_qualities = _unique(
            [(i.get("quality") or {}).get("name") or i.get("name") for i in mine.get("items") or [] if i.get("allowed")]
        )
        ref_qualities = _unique([i.get("name") for i in reference.get("items") or [] if i.get("allowed")])
        qualities = _diff(my_qualities, ref_qualities)

        my_formats = _unique([f.get("name") for f in mine.get("formatItems") or [] if f.get("score") != 0])
        ref_formats = list((reference.get("formatItems") or {}).keys())
        formats = _diff(my_formats, ref_formats)

        recommendations: List[str] = []
        if qualities["missingFromYours"]:
            recommendations.append(f"Enable these qualities: {', '.join(qualities['missingFromYours'])}")
        if formats["missingFromYours"]:
            shown = ", ".join(formats["missingFromYours"][:5])
            extra = len(formats["missingFromYours"]) - 5
            suffix = f" and {extra} more" if extra > 0 else ""
            recommendations.append(f"Add these custom formats: {shown}{suffix}")
        if mine.get("upgradeAllowed") != reference.get("upgradeAllowed"):
            upgrade = reference.get("upgradeAllowed")
            recommendations.append(f"Set upgradeAllowed to {str(upgrade).lower() if isinstance(upgrade, bool) else upgrade}")

        return {
            "yourProfile": {
                "name": mine.get("name"),
                "id": mine.get("id"),
                "upgradeAllowed": mine.get("upgradeAllowed"),
                "cutoff": mine.get("cutoff"),
            },
            "trashProfile": {
                "name": reference.get("name"),
                "upgradeAllowed": reference.get("upgradeAllowed"),
                "cutoff": reference.get("cutoff"),
            },
            "qualityComparison": qualities,
            "customFormatComparison": formats,
            "recommendations": recommendations,
        }

    async def compare_naming(self, *, service: str, media_server: str) -> Response:
        missing = self._require_arr(service, "naming")
        if missing:
            return missing
        mine, reference = await asyncio.gather(self.arr_client.get_naming_config(), self.trash.get_naming(service))
        if not reference:
            return ToolResult.flagged({"error": f"Could not fetch TRaSH naming for {service}"})

        recommended = _recommended(reference, media_server)
        mine = mine or {}
        my_folder = mine.get("movieFolderFormat") or mine.get("seriesFolderFormat") or mine.get("standardMovieFormat")
        my_file = mine.get("standardMovieFormat") or mine.get("standardEpisodeFormat")

        recommendations: List[str] = []
        if my_folder != recommended["folder"]:
            recommendations.append(f"Update folder format to: {recommended['folder']}")
        if my_file != recommended["file"]:
            recommendations.append(f"Update file format to: {recommended['file']}")
        return {
            "mediaServer": media_server,
            "yourNaming": {"folder": my_folder, "file": my_file},
            "trashRecommended": {"folder": recommended["folder"], "file": recommended["file"]},
            "folderMatch": my_folder == recommended["folder"],
            "fileMatch": my_file == recommended["file"],
            "recommendations": recommendations,
        }

from __future__ import annotations

from typing import Any, Dict, List, Optional

from gateway.formatters import (
    command_result,
    format_bytes,
    fraction,
    listing_envelope,
    normalize_limit,
    sort_library,
    summarize_search,
)
from gateway.workers.arr import ArrWorker


class SonarrWorker(ArrWorker):
    """Worker centralizing Sonarr operations."""

    service = "sonarr"
    calendar_days = 7
    storage_from_disk_space = True

    async def get_series(
        self, *, sort_by: Optional[str] = None, sort_dir: Optional[str] = None, limit: Any = None
    ) -> Dict[str, Any]:
        series = await self.client.get_series()
        ordered, direction = sort_library(
            series,
            sort_by,
            sort_dir,
            date_key=lambda s: s.get("added") or "",
            size_key=lambda s: (s.get("statistics") or {}).get("sizeOnDisk") or 0,
        )
        return listing_envelope(
            ordered,
            "series",
            sort_by=sort_by if direction else None,
            sort_dir=direction,
            limit=normalize_limit(limit),
            total=len(series),
            shape=self._series,
        )

    @staticmethod
    def _series(s: Dict[str, Any]) -> Dict[str, Any]:
        stats = s.get("statistics") or {}
        return {
            "id": s.get("id"),
            "title": s.get("title"),
            "year": s.get("year"),
            "status": s.get("status"),
            "network": s.get("network"),
            "seasons": stats.get("seasonCount"),
            "episodes": fraction(stats.get("episodeFileCount"), stats.get("totalEpisodeCount")),
            "sizeOnDisk": format_bytes(stats.get("sizeOnDisk") or 0),
            "monitored": s.get("monitored"),
            "dateAdded": s.get("added"),
        }

    async def search(self, term: str) -> Dict[str, Any]:
        results = await self.client.search_series(term)
        return summarize_search(results, ("title", "year", "tvdbId"))

    async def calendar(self, days: Any = None) -> Any:
        start, end = self._window(days)
        return await self.client.get_calendar(start, end)

    async def get_episodes(self, *, series_id: int, season_number: Optional[int] = None) -> Dict[str, Any]:
        episodes = await self.client.get_episodes(int(series_id), season_number)
        shaped: List[Dict[str, Any]] = []
        for e in episodes:
            item: Dict[str, Any] = {"id": e.get("id")}
            if e.get("hasFile"):
                item["episodeFileId"] = e.get("episodeFileId")
            item.update(
                {
                    "seasonNumber": e.get("seasonNumber"),
                    "episodeNumber": e.get("episodeNumber"),
                    "title": e.get("title"),
                    "airDate": e.get("airDate"),
                    "hasFile": e.get("hasFile"),
                    "monitored": e.get("monitored"),
                    "dateAdded": (e.get("episodeFile") or {}).get("dateAdded"),
                }
            )
            shaped.append(item)
        return {"count": len(episodes), "episodes": shaped}

    async def search_missing(self, *, series_id: int) -> Dict[str, Any]:
        data = await self.client.search_missing(int(series_id))
        return command_result(data, "Search triggered for missing episodes")

    async def search_episodes(self, *, episode_ids: Any) -> Dict[str, Any]:
        ids = self._coerce_int_list(episode_ids)
        data = await self.client.search_episodes(ids)
        return command_result(data, f"Search triggered for {len(ids)} episode(s)")

    async def delete_series(
        self, *, series_id: int, delete_files: Any = True, add_import_list_exclusion: Any = False
    ) -> Dict[str, Any]:
        delete_files = self._coerce_bool(delete_files, True)
        exclusion = self._coerce_bool(add_import_list_exclusion, False)
        await self.client.delete_series(
            int(series_id), delete_files=delete_files, add_import_list_exclusion=exclusion
        )
        return {
            "success": True,
            "message": "Series deleted successfully",
            "seriesId": int(series_id),
            "deleteFiles": delete_files,
            "addImportListExclusion": exclusion,
        }

    async def delete_season(self, *, series_id: int, season_number: int) -> Dict[str, Any]:
        file_ids = await self.client.get_episode_file_ids(int(series_id), int(season_number))
        if file_ids:
            await self.client.delete_episode_files(file_ids)
            message = f"Deleted {len(file_ids)} episode file(s) from season {int(season_number)}"
        else:
            message = f"No episode files found for season {int(season_number)}"
        return {
            "success": True,
            "message": message,
            "seriesId": int(series_id),
            "seasonNumber": int(season_number),
            "deletedFiles": len(file_ids),
        }

    async def delete_episode_files(self, *, episode_file_ids: Any) -> Dict[str, Any]:
        ids = self._coerce_int_list(episode_file_ids)
        await self.client.delete_episode_files(ids)
        return {"success": True, "message": f"Deleted {len(ids)} episode file(s)", "deletedFiles": len(ids)}

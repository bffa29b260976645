from __future__ import annotations

from typing import Any, Dict, List, Optional

from integrations.arr_client import ArrClient


class SonarrClient(ArrClient):
    service_name = "Sonarr"

    # Series Management
    async def get_series(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/series") or []

    async def search_series(self, term: str) -> List[Dict[str, Any]]:
        return await self._request("GET", "/series/lookup", params={"term": term}) or []

    async def delete_series(self, series_id: int, *, delete_files: bool = True, add_import_list_exclusion: bool = False) -> None:
        params = {
            "deleteFiles": str(bool(delete_files)).lower(),
            "addImportListExclusion": str(bool(add_import_list_exclusion)).lower(),
        }
        await self._request("DELETE", f"/series/{int(series_id)}", params=params)

    # Episodes
    async def get_episodes(self, series_id: int, season_number: Optional[int] = None) -> List[Dict[str, Any]]:
        params: Dict[str, Any] = {"seriesId": int(series_id), "includeEpisodeFile": "true"}
        if season_number is not None:
            params["seasonNumber"] = int(season_number)
        return await self._request("GET", "/episode", params=params) or []

    async def get_episode_file_ids(self, series_id: int, season_number: int) -> List[int]:
        files = await self._request("GET", "/episodefile", params={"seriesId": int(series_id)}) or []
        return [int(f["id"]) for f in files if f.get("seasonNumber") == int(season_number) and f.get("id") is not None]

    async def delete_episode_files(self, episode_file_ids: List[int]) -> None:
        await self._request("DELETE", "/episodefile/bulk", json={"episodeFileIds": [int(i) for i in episode_file_ids]})

    # Search
    async def search_missing(self, series_id: int) -> Dict[str, Any]:
        return await self.post_command("SeriesSearch", seriesId=int(series_id))

    async def search_episodes(self, episode_ids: List[int]) -> Dict[str, Any]:
        return await self.post_command("EpisodeSearch", episodeIds=[int(i) for i in episode_ids])

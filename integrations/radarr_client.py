from __future__ import annotations

from typing import Any, Dict, List

from integrations.arr_client import ArrClient


class RadarrClient(ArrClient):
    service_name = "Radarr"

    # Movie Management
    async def get_movies(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/movie") or []

    async def search_movies(self, term: str) -> List[Dict[str, Any]]:
        return await self._request("GET", "/movie/lookup", params={"term": term}) or []

    async def delete_movie(self, movie_id: int, *, delete_files: bool = True, add_import_exclusion: bool = False) -> None:
        params = {
            "deleteFiles": str(bool(delete_files)).lower(),
            "addImportExclusion": str(bool(add_import_exclusion)).lower(),
        }
        await self._request("DELETE", f"/movie/{int(movie_id)}", params=params)

    # Search & Download
    async def search_movie(self, movie_id: int) -> Dict[str, Any]:
        return await self.post_command("MoviesSearch", movieIds=[int(movie_id)])

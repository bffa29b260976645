from __future__ import annotations

from typing import Any, Dict, Optional

from gateway.formatters import (
    command_result,
    first_present,
    format_bytes,
    listing_envelope,
    normalize_limit,
    sort_library,
    summarize_search,
)
from gateway.workers.arr import ArrWorker


class RadarrWorker(ArrWorker):
    """Worker centralizing Radarr operations."""

    service = "radarr"
    storage_from_disk_space = True

    async def get_movies(
        self, *, sort_by: Optional[str] = None, sort_dir: Optional[str] = None, limit: Any = None
    ) -> Dict[str, Any]:
        if sort_by == "added":
            sort_by = "dateAdded"
        movies = await self.client.get_movies()
        ordered, direction = sort_library(
            movies,
            sort_by,
            sort_dir,
            date_key=lambda m: first_present(m.get("dateAdded"), m.get("added"), default=""),
            size_key=lambda m: m.get("sizeOnDisk") or 0,
        )
        return listing_envelope(
            ordered,
            "movies",
            sort_by=sort_by if direction else None,
            sort_dir=direction,
            limit=normalize_limit(limit),
            total=len(movies),
            shape=self._movie,
        )

    @staticmethod
    def _movie(m: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "id": m.get("id"),
            "title": m.get("title"),
            "year": m.get("year"),
            "status": m.get("status"),
            "hasFile": m.get("hasFile"),
            "sizeOnDisk": format_bytes(m.get("sizeOnDisk") or 0),
            "monitored": m.get("monitored"),
            "studio": m.get("studio"),
            "dateAdded": first_present(m.get("dateAdded"), m.get("added")),
        }

    async def search(self, term: str) -> Dict[str, Any]:
        results = await self.client.search_movies(term)
        return summarize_search(results, ("title", "year", "tmdbId", "imdbId"))

    async def calendar(self, days: Any = None) -> Any:
        start, end = self._window(days)
        return await self.client.get_calendar(start, end)

    async def search_movie(self, *, movie_id: int) -> Dict[str, Any]:
        data = await self.client.search_movie(int(movie_id))
        return command_result(data, "Search triggered for movie")

    async def delete_movie(
        self, *, movie_id: int, delete_files: Any = True, add_import_exclusion: Any = False
    ) -> Dict[str, Any]:
        delete_files = self._coerce_bool(delete_files, True)
        exclusion = self._coerce_bool(add_import_exclusion, False)
        await self.client.delete_movie(int(movie_id), delete_files=delete_files, add_import_exclusion=exclusion)
        return {
            "success": True,
            "message": "Movie deleted successfully",
            "movieId": int(movie_id),
            "deleteFiles": delete_files,
            "addImportExclusion": exclusion,
        }

from __future__ import annotations

from typing import Any, Dict

from gateway.formatters import command_result, format_bytes, fraction, summarize_search
from gateway.workers.arr import ArrWorker


class LidarrWorker(ArrWorker):
    service = "lidarr"
    has_metadata_profiles = True

    async def get_artists(self) -> Dict[str, Any]:
        artists = await self.client.get_artists()
        shaped = []
        for a in artists:
            stats = a.get("statistics") or {}
            shaped.append(
                {
                    "id": a.get("id"),
                    "artistName": a.get("artistName"),
                    "status": a.get("status"),
                    "albums": stats.get("albumCount"),
                    "tracks": fraction(stats.get("trackFileCount"), stats.get("totalTrackCount")),
                    "sizeOnDisk": format_bytes(stats.get("sizeOnDisk") or 0),
                    "monitored": a.get("monitored"),
                    "dateAdded": a.get("added"),
                }
            )
        return {"count": len(artists), "artists": shaped}

    async def search(self, term: str) -> Dict[str, Any]:
        results = await self.client.search_artists(term)
        return summarize_search(results, ("title", "foreignArtistId"))

    async def get_albums(self, *, artist_id: int) -> Dict[str, Any]:
        albums = await self.client.get_albums(int(artist_id))
        shaped = []
        for a in albums:
            stats = a.get("statistics")
            shaped.append(
                {
                    "id": a.get("id"),
                    "title": a.get("title"),
                    "releaseDate": a.get("releaseDate"),
                    "albumType": a.get("albumType"),
                    "monitored": a.get("monitored"),
                    "tracks": fraction(stats.get("trackFileCount"), stats.get("totalTrackCount")) if stats else "unknown",
                    "sizeOnDisk": format_bytes((stats or {}).get("sizeOnDisk") or 0),
                    "percentComplete": (stats or {}).get("percentOfTracks") or 0,
                    "grabbed": a.get("grabbed"),
                    "dateAdded": a.get("added"),
                }
            )
        return {"count": len(albums), "albums": shaped}

    async def search_album(self, *, album_id: int) -> Dict[str, Any]:
        data = await self.client.search_album(int(album_id))
        return command_result(data, "Search triggered for album")

    async def search_missing(self, *, artist_id: int) -> Dict[str, Any]:
        data = await self.client.search_missing_albums(int(artist_id))
        return command_result(data, "Search triggered for missing albums")

    async def calendar(self, days: Any = None) -> Dict[str, Any]:
        start, end = self._window(days)
        albums = await self.client.get_calendar(start, end)
        return {
            "count": len(albums),
            "albums": [
                {
                    "id": a.get("id"),
                    "title": a.get("title"),
                    "artistId": a.get("artistId"),
                    "releaseDate": a.get("releaseDate"),
                    "albumType": a.get("albumType"),
                    "monitored": a.get("monitored"),
                }
                for a in albums
            ],
        }

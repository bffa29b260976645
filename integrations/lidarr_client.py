from __future__ import annotations

from typing import Any, Dict, List

from integrations.arr_client import ArrV1Client


class LidarrClient(ArrV1Client):
    service_name = "Lidarr"

    async def get_artists(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/artist") or []

    async def search_artists(self, term: str) -> List[Dict[str, Any]]:
        return await self._request("GET", "/artist/lookup", params={"term": term}) or []

    async def get_albums(self, artist_id: int) -> List[Dict[str, Any]]:
        return await self._request("GET", "/album", params={"artistId": int(artist_id)}) or []

    async def search_album(self, album_id: int) -> Dict[str, Any]:
        return await self.post_command("AlbumSearch", albumIds=[int(album_id)])

    async def search_missing_albums(self, artist_id: int) -> Dict[str, Any]:
        return await self.post_command("ArtistSearch", artistId=int(artist_id))

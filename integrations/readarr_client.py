from __future__ import annotations

from typing import Any, Dict, List

from integrations.arr_client import ArrV1Client


class ReadarrClient(ArrV1Client):
    service_name = "Readarr"

    async def get_authors(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/author") or []

    async def search_authors(self, term: str) -> List[Dict[str, Any]]:
        return await self._request("GET", "/author/lookup", params={"term": term}) or []

    async def get_books(self, author_id: int) -> List[Dict[str, Any]]:
        return await self._request("GET", "/book", params={"authorId": int(author_id)}) or []

    async def search_books(self, book_ids: List[int]) -> Dict[str, Any]:
        return await self.post_command("BookSearch", bookIds=[int(i) for i in book_ids])

    async def search_missing_books(self, author_id: int) -> Dict[str, Any]:
        return await self.post_command("AuthorSearch", authorId=int(author_id))

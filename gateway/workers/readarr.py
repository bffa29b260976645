from __future__ import annotations

from typing import Any, Dict

from gateway.formatters import command_result, format_bytes, fraction, summarize_search
from gateway.workers.arr import ArrWorker


class ReadarrWorker(ArrWorker):
    service = "readarr"
    has_metadata_profiles = True

    async def get_authors(self) -> Dict[str, Any]:
        authors = await self.client.get_authors()
        shaped = []
        for a in authors:
            stats = a.get("statistics") or {}
            shaped.append(
                {
                    "id": a.get("id"),
                    "authorName": a.get("authorName"),
                    "status": a.get("status"),
                    "books": fraction(stats.get("bookFileCount"), stats.get("totalBookCount")),
                    "sizeOnDisk": format_bytes(stats.get("sizeOnDisk") or 0),
                    "monitored": a.get("monitored"),
                    "dateAdded": a.get("added"),
                }
            )
        return {"count": len(authors), "authors": shaped}

    async def search(self, term: str) -> Dict[str, Any]:
        results = await self.client.search_authors(term)
        return summarize_search(results, ("title", "foreignAuthorId"))

    async def get_books(self, *, author_id: int) -> Dict[str, Any]:
        books = await self.client.get_books(int(author_id))
        shaped = []
        for b in books:
            stats = b.get("statistics")
            shaped.append(
                {
                    "id": b.get("id"),
                    "title": b.get("title"),
                    "releaseDate": b.get("releaseDate"),
                    "pageCount": b.get("pageCount"),
                    "monitored": b.get("monitored"),
                    "hasFile": bool(stats) and (stats.get("bookFileCount") or 0) > 0,
                    "sizeOnDisk": format_bytes((stats or {}).get("sizeOnDisk") or 0),
                    "grabbed": b.get("grabbed"),
                    "dateAdded": b.get("added"),
                }
            )
        return {"count": len(books), "books": shaped}

    async def search_books(self, *, book_ids: Any) -> Dict[str, Any]:
        ids = self._coerce_int_list(book_ids)
        data = await self.client.search_books(ids)
        return command_result(data, f"Search triggered for {len(ids)} book(s)")

    async def search_missing(self, *, author_id: int) -> Dict[str, Any]:
        data = await self.client.search_missing_books(int(author_id))
        return command_result(data, "Search triggered for missing books")

    async def calendar(self, days: Any = None) -> Dict[str, Any]:
        start, end = self._window(days)
        books = await self.client.get_calendar(start, end)
        return {
            "count": len(books),
            "books": [
                {
                    "id": b.get("id"),
                    "title": b.get("title"),
                    "authorId": b.get("authorId"),
                    "releaseDate": b.get("releaseDate"),
                    "monitored": b.get("monitored"),
                }
                for b in books
            ],
        }

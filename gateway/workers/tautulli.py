from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from gateway.formatters import epoch_to_iso, first_present

logger = logging.getLogger("arr_gateway.tautulli")

DEFAULT_HISTORY_LENGTH = 25
TITLE_HISTORY_CAP = 100
TITLE_HISTORY_FETCH = 1000
LIBRARY_SEARCH_LIMIT = 10


@dataclass
class WatchHistoryQuery:
    title: Optional[str] = None
    user_id: Optional[int] = None
    length: Optional[int] = None
    media_type: Optional[str] = None
    order_column: Optional[str] = None
    order_dir: Optional[str] = None

    @property
    def has_title(self) -> bool:
        return isinstance(self.title, str) and bool(self.title.strip())

    def return_cap(self) -> int:
        if self.length is not None and self.length > 0:
            return min(int(self.length), TITLE_HISTORY_CAP)
        return TITLE_HISTORY_CAP

    def plain_length(self) -> int:
        if self.length is not None and self.length > 0:
            return int(self.length)
        return DEFAULT_HISTORY_LENGTH


def library_has_match(search: Any) -> bool:
    """True if either presence signal of a Tautulli library search says so."""
    if not isinstance(search, dict):
        return False
    count = search.get("results_count") or 0
    results = search.get("results_list") or {}
    listed = sum(len(v) for v in results.values() if isinstance(v, list)) if isinstance(results, dict) else 0
    return count > 0 or listed > 0


def history_rows(payload: Any) -> List[Dict[str, Any]]:
    if isinstance(payload, dict):
        rows = payload.get("data")
    elif isinstance(payload, list):
        rows = payload
    else:
        rows = None
    return rows if isinstance(rows, list) else []


def history_entry(row: Dict[str, Any]) -> Dict[str, Any]:
    date = row.get("date")
    return {
        "who": first_present(row.get("friendly_name"), row.get("user"), default="-"),
        "when": epoch_to_iso(date) if date is not None else "-",
        "title": first_present(row.get("full_title"), row.get("title"), row.get("grandparent_title"), default="-"),
    }


def _elapsed_ms(t0: float) -> int:
    return int((time.monotonic() - t0) * 1000)


class TautulliWorker:
    """Tautulli reads; most are passthrough, watch history correlates two probes."""

    def __init__(self, client: Any) -> None:
        self.client = client

    async def get_history(self, query: WatchHistoryQuery) -> Any:
        order_column = query.order_column or "date"
        order_dir = query.order_dir or "desc"
        if not query.has_title:
            return await self.client.get_history(
                user_id=query.user_id,
                length=query.plain_length(),
                media_type=query.media_type,
                order_column=order_column,
                order_dir=order_dir,
            )

        title = (query.title or "").strip()
        cap = query.return_cap()
        started = time.monotonic()

        async def library_probe() -> Tuple[Any, int]:
            t0 = time.monotonic()
            try:
                data = await self.client.search_library(title, LIBRARY_SEARCH_LIMIT)
            except Exception as e:  # presence degrades to "not found"
                logger.warning("Library search for %r failed: %s", title, e)
                data = None
            return data, _elapsed_ms(t0)

        async def history_probe() -> Tuple[Any, int]:
            t0 = time.monotonic()
            data = await self.client.get_history(
                user_id=query.user_id,
                media_type=query.media_type,
                order_column=order_column,
                order_dir=order_dir,
                length=TITLE_HISTORY_FETCH,
                search=title,
            )
            return data, _elapsed_ms(t0)

        (library, library_ms), (history, history_ms) = await asyncio.gather(library_probe(), history_probe())

        exists = library_has_match(library)
        rows = history_rows(history)
        watched = len(rows)
        entries = [history_entry(r) for r in rows[:cap] if isinstance(r, dict)]
        return {
            "searchedFor": title,
            "existsInLibrary": exists,
            "summary": (
                "The film/series is in the Plex library."
                if exists
                else "The film/series is not in the Plex library."
            ),
            "watchedCount": watched,
            "watchedSummary": (
                "No one has watched it (according to history)." if watched == 0 else f"{watched} play(s)."
            ),
            "returned": len(entries),
            "history": entries,
            "responseTime": {
                "totalMs": _elapsed_ms(started),
                "librarySearchMs": library_ms,
                "historySearchMs": history_ms,
            },
        }

    async def get_activity(self) -> Any:
        return await self.client.get_activity()

    async def get_libraries(self) -> Any:
        return await self.client.get_libraries()

    async def get_server_info(self) -> Any:
        return await self.client.get_server_info()

    async def get_home_stats(self, *, time_range: Optional[int] = None, stats_count: Optional[int] = None) -> Any:
        return await self.client.get_home_stats(time_range=time_range, stats_count=stats_count)

    async def get_users(self) -> Any:
        return await self.client.get_users()

    async def get_recently_added(self, *, count: Optional[int] = None, section_id: Optional[str] = None) -> Any:
        return await self.client.get_recently_added(count=count, section_id=section_id)

    async def server_status(self) -> Any:
        return await self.client.get_server_status()

    async def terminate_session(self, *, session_key: str, session_id: str) -> Any:
        return await self.client.terminate_session(str(session_key), str(session_id))

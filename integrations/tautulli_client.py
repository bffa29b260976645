from __future__ import annotations

from typing import Any, Dict, Optional

from integrations.errors import ApplicationError
from integrations.http_client import BaseHttpClient


class TautulliClient(BaseHttpClient):
    """Tautulli API v2: one endpoint, the command travels in ``cmd``.

    Payloads arrive wrapped as ``{"response": {"result", "message", "data"}}``;
    only ``data`` is returned, and ``result == "error"`` raises.
    """

    service_name = "Tautulli"
    api_path = "/api/v2"

    def _auth_headers(self) -> Dict[str, str]:
        return {}

    def _auth_params(self) -> Dict[str, Any]:
        return {"apikey": self.api_key}

    async def command(self, cmd: str, **params: Any) -> Any:
        query = {"cmd": cmd}
        query.update({k: _as_param(v) for k, v in params.items() if v is not None})
        payload = await self._request("GET", "", params=query)
        envelope = (payload or {}).get("response") or {}
        if envelope.get("result") == "error":
            raise ApplicationError(self.service_name, envelope.get("message") or "Tautulli API error")
        return envelope.get("data")

    async def get_activity(self) -> Any:
        return await self.command("get_activity")

    async def search_library(self, query: str, limit: Optional[int] = None) -> Any:
        if limit is not None and limit <= 0:
            limit = None
        return await self.command("search", query=query, limit=limit)

    async def get_history(
        self,
        *,
        user_id: Optional[int] = None,
        rating_key: Optional[int] = None,
        start: Optional[int] = None,
        length: Optional[int] = None,
        search: Optional[str] = None,
        media_type: Optional[str] = None,
        order_column: Optional[str] = None,
        order_dir: Optional[str] = None,
    ) -> Any:
        return await self.command(
            "get_history",
            user_id=user_id,
            rating_key=rating_key,
            start=start,
            length=length,
            search=search,
            media_type=media_type,
            order_column=order_column,
            order_dir=order_dir,
        )

    async def get_libraries(self) -> Any:
        return await self.command("get_libraries")

    async def get_server_info(self) -> Any:
        return await self.command("get_server_info")

    async def get_home_stats(self, time_range: Optional[int] = None, stats_count: Optional[int] = None) -> Any:
        return await self.command("get_home_stats", time_range=time_range, stats_count=stats_count)

    async def get_users(self) -> Any:
        return await self.command("get_users")

    async def get_recently_added(
        self, count: Optional[int] = None, start: Optional[int] = None, section_id: Optional[str] = None
    ) -> Any:
        return await self.command("get_recently_added", count=count, start=start, section_id=section_id)

    async def get_server_status(self) -> Any:
        return await self.command("server_status")

    async def terminate_session(self, session_key: str, session_id: str) -> Any:
        return await self.command("terminate_session", session_key=session_key, session_id=session_id)


def _as_param(value: Any) -> Any:
    if isinstance(value, bool):
        return "true" if value else "false"
    return value

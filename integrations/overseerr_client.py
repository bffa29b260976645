from __future__ import annotations

from typing import Any, Dict, Optional

from integrations.http_client import BaseHttpClient

REQUEST_STATUS: Dict[int, str] = {
    1: "pending",
    2: "approved",
    3: "declined",
}

MEDIA_STATUS: Dict[int, str] = {
    1: "unknown",
    2: "pending",
    3: "processing",
    4: "partially_available",
    5: "available",
}


def format_request_status(status: Any) -> str:
    return REQUEST_STATUS.get(status, "unknown")


def format_media_status(status: Any) -> str:
    return MEDIA_STATUS.get(status, "unknown")


class OverseerrClient(BaseHttpClient):
    service_name = "Overseerr"
    api_path = "/api/v1"

    async def get_status(self) -> Dict[str, Any]:
        return await self._request("GET", "/status") or {}

    async def get_request_count(self) -> Dict[str, Any]:
        return await self._request("GET", "/request/count") or {}

    async def get_requests(
        self,
        *,
        take: Optional[int] = None,
        skip: Optional[int] = None,
        filter: Optional[str] = None,
        sort: Optional[str] = None,
        requested_by: Optional[int] = None,
    ) -> Dict[str, Any]:
        params = _truthy({"take": take, "skip": skip, "filter": filter, "sort": sort, "requestedBy": requested_by})
        return await self._request("GET", "/request", params=params) or {}

    async def get_request(self, request_id: int) -> Dict[str, Any]:
        return await self._request("GET", f"/request/{int(request_id)}") or {}

    async def approve_request(self, request_id: int) -> Dict[str, Any]:
        return await self._request("POST", f"/request/{int(request_id)}/approve") or {}

    async def decline_request(self, request_id: int) -> Dict[str, Any]:
        return await self._request("POST", f"/request/{int(request_id)}/decline") or {}

    async def delete_request(self, request_id: int) -> None:
        await self._request("DELETE", f"/request/{int(request_id)}")

    async def get_users(
        self, *, take: Optional[int] = None, skip: Optional[int] = None, sort: Optional[str] = None
    ) -> Dict[str, Any]:
        params = _truthy({"take": take, "skip": skip, "sort": sort})
        return await self._request("GET", "/user", params=params) or {}

    async def get_user(self, user_id: int) -> Dict[str, Any]:
        return await self._request("GET", f"/user/{int(user_id)}") or {}

    async def get_user_requests(
        self, user_id: int, *, take: Optional[int] = None, skip: Optional[int] = None
    ) -> Dict[str, Any]:
        params = _truthy({"take": take, "skip": skip})
        return await self._request("GET", f"/user/{int(user_id)}/requests", params=params) or {}

    async def get_movie(self, tmdb_id: int) -> Dict[str, Any]:
        return await self._request("GET", f"/movie/{int(tmdb_id)}") or {}

    async def get_tv(self, tmdb_id: int) -> Dict[str, Any]:
        return await self._request("GET", f"/tv/{int(tmdb_id)}") or {}

    async def search(self, query: str, *, page: Optional[int] = None, language: Optional[str] = None) -> Any:
        params = {"query": query, **_truthy({"page": page, "language": language})}
        return await self._request("GET", "/search", params=params)


def _truthy(params: Dict[str, Any]) -> Dict[str, Any]:
    # Overseerr treats 0 / empty as "use the default", so they are not sent.
    return {k: v for k, v in params.items() if v}

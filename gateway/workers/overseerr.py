from __future__ import annotations

from typing import Any, Dict, Optional

from gateway.formatters import first_of
from integrations.overseerr_client import format_media_status, format_request_status

DEFAULT_TAKE = 20
MAX_REQUEST_TAKE = 100


def _media(r: Dict[str, Any]) -> Dict[str, Any]:
    media = r.get("media") or {}
    return {
        "tmdbId": media.get("tmdbId"),
        "tvdbId": media.get("tvdbId"),
        "status": format_media_status(media.get("status", 1)),
    }


def _requester(r: Dict[str, Any]) -> Optional[str]:
    user = r.get("requestedBy") or {}
    return first_of(user.get("username"), user.get("plexUsername"), user.get("email"))


class OverseerrWorker:
    def __init__(self, client: Any) -> None:
        self.client = client

    async def get_requests(
        self, *, filter: Optional[str] = None, take: Optional[int] = None, requested_by: Optional[int] = None
    ) -> Dict[str, Any]:
        take = min(take if take is not None else DEFAULT_TAKE, MAX_REQUEST_TAKE)
        data = await self.client.get_requests(take=take, filter=filter, requested_by=requested_by)
        results = data.get("results") or []
        requests = []
        for r in results:
            item: Dict[str, Any] = {
                "id": r.get("id"),
                "type": r.get("type"),
                "status": format_request_status(r.get("status")),
                "is4k": r.get("is4k"),
                "requestedBy": _requester(r),
                "requestedAt": r.get("createdAt"),
                "media": _media(r),
            }
            if r.get("seasonCount"):
                item["seasons"] = r["seasonCount"]
            requests.append(item)
        return {
            "totalRequests": (data.get("pageInfo") or {}).get("results"),
            "returned": len(results),
            "requests": requests,
        }

    async def get_request_count(self) -> Dict[str, Any]:
        return await self.client.get_request_count()

    async def get_users(self, *, take: Optional[int] = None, sort: Optional[str] = None) -> Dict[str, Any]:
        data = await self.client.get_users(take=take if take is not None else DEFAULT_TAKE, sort=sort)
        results = data.get("results") or []
        return {
            "totalUsers": (data.get("pageInfo") or {}).get("results"),
            "returned": len(results),
            "users": [
                {
                    "id": u.get("id"),
                    "username": first_of(u.get("username"), u.get("plexUsername"), u.get("email")),
                    "email": u.get("email"),
                    "requestCount": u.get("requestCount"),
                    "createdAt": u.get("createdAt"),
                }
                for u in results
            ],
        }

    async def get_user_requests(self, *, user_id: int, take: Optional[int] = None) -> Dict[str, Any]:
        data = await self.client.get_user_requests(int(user_id), take=take if take is not None else DEFAULT_TAKE)
        results = data.get("results") or []
        return {
            "userId": int(user_id),
            "totalRequests": (data.get("pageInfo") or {}).get("results"),
            "returned": len(results),
            "requests": [
                {
                    "id": r.get("id"),
                    "type": r.get("type"),
                    "status": format_request_status(r.get("status")),
                    "is4k": r.get("is4k"),
                    "requestedAt": r.get("createdAt"),
                    "media": _media(r),
                }
                for r in results
            ],
        }

    async def approve_request(self, *, request_id: int) -> Dict[str, Any]:
        data = await self.client.approve_request(int(request_id))
        return {
            "success": True,
            "message": "Request approved",
            "requestId": int(request_id),
            "newStatus": format_request_status(data.get("status")),
        }

    async def decline_request(self, *, request_id: int) -> Dict[str, Any]:
        data = await self.client.decline_request(int(request_id))
        return {
            "success": True,
            "message": "Request declined",
            "requestId": int(request_id),
            "newStatus": format_request_status(data.get("status")),
        }

    async def search(self, query: str) -> Any:
        return await self.client.search(query)

    async def status(self) -> Dict[str, Any]:
        return await self.client.get_status()

from __future__ import annotations

from typing import Any, Awaitable, Callable

from config.loader import Backend
from gateway.services import ServiceRegistry
from gateway.workers.overseerr import OverseerrWorker


def _worker(services: ServiceRegistry) -> OverseerrWorker:
    return OverseerrWorker(services.require(Backend.OVERSEERR))


def make_overseerr_get_requests(services: ServiceRegistry) -> Callable[[dict], Awaitable[dict]]:
    async def impl(args: dict) -> dict:
        return await _worker(services).get_requests(
            filter=args.get("filter"),
            take=args.get("take"),
            requested_by=args.get("requestedBy"),
        )

    return impl


def make_overseerr_get_request_count(services: ServiceRegistry) -> Callable[[dict], Awaitable[dict]]:
    async def impl(args: dict) -> dict:
        return await _worker(services).get_request_count()

    return impl


def make_overseerr_get_users(services: ServiceRegistry) -> Callable[[dict], Awaitable[dict]]:
    async def impl(args: dict) -> dict:
        return await _worker(services).get_users(take=args.get("take"), sort=args.get("sort"))

    return impl


def make_overseerr_get_user_requests(services: ServiceRegistry) -> Callable[[dict], Awaitable[dict]]:
    async def impl(args: dict) -> dict:
        return await _worker(services).get_user_requests(user_id=int(args["userId"]), take=args.get("take"))

    return impl


def make_overseerr_approve_request(services: ServiceRegistry) -> Callable[[dict], Awaitable[dict]]:
    async def impl(args: dict) -> dict:
        return await _worker(services).approve_request(request_id=int(args["requestId"]))

    return impl


def make_overseerr_decline_request(services: ServiceRegistry) -> Callable[[dict], Awaitable[dict]]:
    async def impl(args: dict) -> dict:
        return await _worker(services).decline_request(request_id=int(args["requestId"]))

    return impl


def make_overseerr_search(services: ServiceRegistry) -> Callable[[dict], Awaitable[Any]]:
    async def impl(args: dict) -> Any:
        return await _worker(services).search(str(args["query"]))

    return impl


def make_overseerr_status(services: ServiceRegistry) -> Callable[[dict], Awaitable[dict]]:
    async def impl(args: dict) -> dict:
        return await _worker(services).status()

    return impl

from __future__ import annotations

from typing import Any, Awaitable, Callable

from config.loader import Backend
from gateway.services import ServiceRegistry
from gateway.workers.tautulli import TautulliWorker, WatchHistoryQuery


def _worker(services: ServiceRegistry) -> TautulliWorker:
    return TautulliWorker(services.require(Backend.TAUTULLI))


def make_tautulli_get_history(services: ServiceRegistry) -> Callable[[dict], Awaitable[Any]]:
    async def impl(args: dict) -> Any:
        query = WatchHistoryQuery(
            title=args.get("title"),
            user_id=args.get("user_id"),
            length=args.get("length"),
            media_type=args.get("media_type"),
            order_column=args.get("order_column"),
            order_dir=args.get("order_dir"),
        )
        return await _worker(services).get_history(query)

    return impl


def make_tautulli_get_home_stats(services: ServiceRegistry) -> Callable[[dict], Awaitable[Any]]:
    async def impl(args: dict) -> Any:
        return await _worker(services).get_home_stats(
            time_range=args.get("time_range"),
            stats_count=args.get("stats_count"),
        )

    return impl


def make_tautulli_get_recently_added(services: ServiceRegistry) -> Callable[[dict], Awaitable[Any]]:
    async def impl(args: dict) -> Any:
        return await _worker(services).get_recently_added(count=args.get("count"), section_id=args.get("section_id"))

    return impl


def make_tautulli_terminate_session(services: ServiceRegistry) -> Callable[[dict], Awaitable[Any]]:
    async def impl(args: dict) -> Any:
        return await _worker(services).terminate_session(
            session_key=args["session_key"],
            session_id=args["session_id"],
        )

    return impl


def make_tautulli_passthrough(services: ServiceRegistry, method: str) -> Callable[[dict], Awaitable[Any]]:
    """Argument-less reads returned as Tautulli sent them."""

    async def impl(args: dict) -> Any:
        return await getattr(_worker(services), method)()

    return impl

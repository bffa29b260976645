from __future__ import annotations

from typing import Any, Awaitable, Callable

from config.loader import Backend
from gateway.services import ServiceRegistry
from gateway.workers.prowlarr import ProwlarrWorker


def _worker(services: ServiceRegistry) -> ProwlarrWorker:
    return ProwlarrWorker(services.require(Backend.PROWLARR))


def make_prowlarr_get_indexers(services: ServiceRegistry) -> Callable[[dict], Awaitable[dict]]:
    async def impl(args: dict) -> dict:
        return await _worker(services).get_indexers()

    return impl


def make_prowlarr_search(services: ServiceRegistry) -> Callable[[dict], Awaitable[Any]]:
    async def impl(args: dict) -> Any:
        return await _worker(services).search(str(args["query"]))

    return impl


def make_prowlarr_test_indexers(services: ServiceRegistry) -> Callable[[dict], Awaitable[dict]]:
    async def impl(args: dict) -> dict:
        return await _worker(services).test_indexers()

    return impl


def make_prowlarr_get_stats(services: ServiceRegistry) -> Callable[[dict], Awaitable[dict]]:
    async def impl(args: dict) -> dict:
        return await _worker(services).get_stats()

    return impl

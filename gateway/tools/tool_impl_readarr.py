from __future__ import annotations

from typing import Awaitable, Callable

from config.loader import Backend
from gateway.services import ServiceRegistry
from gateway.workers.readarr import ReadarrWorker


def _worker(services: ServiceRegistry) -> ReadarrWorker:
    return ReadarrWorker(services.require(Backend.READARR))


def make_readarr_get_authors(services: ServiceRegistry) -> Callable[[dict], Awaitable[dict]]:
    async def impl(args: dict) -> dict:
        return await _worker(services).get_authors()

    return impl


def make_readarr_get_books(services: ServiceRegistry) -> Callable[[dict], Awaitable[dict]]:
    async def impl(args: dict) -> dict:
        return await _worker(services).get_books(author_id=int(args["authorId"]))

    return impl


def make_readarr_search_book(services: ServiceRegistry) -> Callable[[dict], Awaitable[dict]]:
    async def impl(args: dict) -> dict:
        return await _worker(services).search_books(book_ids=args["bookIds"])

    return impl


def make_readarr_search_missing(services: ServiceRegistry) -> Callable[[dict], Awaitable[dict]]:
    async def impl(args: dict) -> dict:
        return await _worker(services).search_missing(author_id=int(args["authorId"]))

    return impl

from __future__ import annotations

from typing import Awaitable, Callable

from config.loader import Backend
from gateway.services import ServiceRegistry
from gateway.workers.radarr import RadarrWorker


def _worker(services: ServiceRegistry) -> RadarrWorker:
    return RadarrWorker(services.require(Backend.RADARR))


def make_radarr_get_movies(services: ServiceRegistry) -> Callable[[dict], Awaitable[dict]]:
    async def impl(args: dict) -> dict:
        return await _worker(services).get_movies(
            sort_by=args.get("sortBy"),
            sort_dir=args.get("sortDir"),
            limit=args.get("limit"),
        )

    return impl


def make_radarr_search_movie(services: ServiceRegistry) -> Callable[[dict], Awaitable[dict]]:
    async def impl(args: dict) -> dict:
        return await _worker(services).search_movie(movie_id=int(args["movieId"]))

    return impl


def make_radarr_delete_movie(services: ServiceRegistry) -> Callable[[dict], Awaitable[dict]]:
    async def impl(args: dict) -> dict:
        return await _worker(services).delete_movie(
            movie_id=int(args["movieId"]),
            delete_files=args.get("deleteFiles", True),
            add_import_exclusion=args.get("addImportExclusion", False),
        )

    return impl

from __future__ import annotations

from typing import Awaitable, Callable

from config.loader import Backend
from gateway.services import ServiceRegistry
from gateway.workers.sonarr import SonarrWorker


def _worker(services: ServiceRegistry) -> SonarrWorker:
    return SonarrWorker(services.require(Backend.SONARR))


def make_sonarr_get_series(services: ServiceRegistry) -> Callable[[dict], Awaitable[dict]]:
    async def impl(args: dict) -> dict:
        return await _worker(services).get_series(
            sort_by=args.get("sortBy"),
            sort_dir=args.get("sortDir"),
            limit=args.get("limit"),
        )

    return impl


def make_sonarr_get_episodes(services: ServiceRegistry) -> Callable[[dict], Awaitable[dict]]:
    async def impl(args: dict) -> dict:
        return await _worker(services).get_episodes(
            series_id=int(args["seriesId"]),
            season_number=args.get("seasonNumber"),
        )

    return impl


def make_sonarr_search_missing(services: ServiceRegistry) -> Callable[[dict], Awaitable[dict]]:
    async def impl(args: dict) -> dict:
        return await _worker(services).search_missing(series_id=int(args["seriesId"]))

    return impl


def make_sonarr_search_episode(services: ServiceRegistry) -> Callable[[dict], Awaitable[dict]]:
    async def impl(args: dict) -> dict:
        return await _worker(services).search_episodes(episode_ids=args["episodeIds"])

    return impl


def make_sonarr_delete_series(services: ServiceRegistry) -> Callable[[dict], Awaitable[dict]]:
    async def impl(args: dict) -> dict:
        return await _worker(services).delete_series(
            series_id=int(args["seriesId"]),
            delete_files=args.get("deleteFiles", True),
            add_import_list_exclusion=args.get("addImportListExclusion", False),
        )

    return impl


def make_sonarr_delete_season(services: ServiceRegistry) -> Callable[[dict], Awaitable[dict]]:
    async def impl(args: dict) -> dict:
        return await _worker(services).delete_season(
            series_id=int(args["seriesId"]),
            season_number=int(args["seasonNumber"]),
        )

    return impl


def make_sonarr_delete_episode_files(services: ServiceRegistry) -> Callable[[dict], Awaitable[dict]]:
    async def impl(args: dict) -> dict:
        return await _worker(services).delete_episode_files(episode_file_ids=args["episodeFileIds"])

    return impl

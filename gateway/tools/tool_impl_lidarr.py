from __future__ import annotations

from typing import Awaitable, Callable

from config.loader import Backend
from gateway.services import ServiceRegistry
from gateway.workers.lidarr import LidarrWorker


def _worker(services: ServiceRegistry) -> LidarrWorker:
    return LidarrWorker(services.require(Backend.LIDARR))


def make_lidarr_get_artists(services: ServiceRegistry) -> Callable[[dict], Awaitable[dict]]:
    async def impl(args: dict) -> dict:
        return await _worker(services).get_artists()

    return impl


def make_lidarr_get_albums(services: ServiceRegistry) -> Callable[[dict], Awaitable[dict]]:
    async def impl(args: dict) -> dict:
        return await _worker(services).get_albums(artist_id=int(args["artistId"]))

    return impl


def make_lidarr_search_album(services: ServiceRegistry) -> Callable[[dict], Awaitable[dict]]:
    async def impl(args: dict) -> dict:
        return await _worker(services).search_album(album_id=int(args["albumId"]))

    return impl


def make_lidarr_search_missing(services: ServiceRegistry) -> Callable[[dict], Awaitable[dict]]:
    async def impl(args: dict) -> dict:
        return await _worker(services).search_missing(artist_id=int(args["artistId"]))

    return impl

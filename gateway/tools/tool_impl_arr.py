from __future__ import annotations

from typing import Awaitable, Callable, Dict, Type

from config.loader import Backend
from gateway.services import ServiceRegistry
from gateway.workers.arr import ArrWorker
from gateway.workers.lidarr import LidarrWorker
from gateway.workers.radarr import RadarrWorker
from gateway.workers.readarr import ReadarrWorker
from gateway.workers.sonarr import SonarrWorker

WORKERS: Dict[Backend, Type[ArrWorker]] = {
    Backend.SONARR: SonarrWorker,
    Backend.RADARR: RadarrWorker,
    Backend.LIDARR: LidarrWorker,
    Backend.READARR: ReadarrWorker,
}


def _worker(services: ServiceRegistry, backend: Backend) -> ArrWorker:
    return WORKERS[backend](services.require(backend))


def make_get_quality_profiles(services: ServiceRegistry, backend: Backend) -> Callable[[dict], Awaitable[dict]]:
    async def impl(args: dict) -> dict:
        return await _worker(services, backend).quality_profiles()

    return impl


def make_get_health(services: ServiceRegistry, backend: Backend) -> Callable[[dict], Awaitable[dict]]:
    async def impl(args: dict) -> dict:
        return await _worker(services, backend).health()

    return impl


def make_get_root_folders(services: ServiceRegistry, backend: Backend) -> Callable[[dict], Awaitable[dict]]:
    async def impl(args: dict) -> dict:
        return await _worker(services, backend).root_folders()

    return impl


def make_get_download_clients(services: ServiceRegistry, backend: Backend) -> Callable[[dict], Awaitable[dict]]:
    async def impl(args: dict) -> dict:
        return await _worker(services, backend).download_clients()

    return impl


def make_get_naming(services: ServiceRegistry, backend: Backend) -> Callable[[dict], Awaitable[dict]]:
    async def impl(args: dict) -> dict:
        return await _worker(services, backend).naming()

    return impl


def make_get_tags(services: ServiceRegistry, backend: Backend) -> Callable[[dict], Awaitable[dict]]:
    async def impl(args: dict) -> dict:
        return await _worker(services, backend).tags()

    return impl


def make_review_setup(services: ServiceRegistry, backend: Backend) -> Callable[[dict], Awaitable[dict]]:
    async def impl(args: dict) -> dict:
        return await _worker(services, backend).review_setup()

    return impl


def make_get_queue(services: ServiceRegistry, backend: Backend) -> Callable[[dict], Awaitable[dict]]:
    async def impl(args: dict) -> dict:
        return await _worker(services, backend).queue()

    return impl


def make_get_calendar(services: ServiceRegistry, backend: Backend) -> Callable[[dict], Awaitable[dict]]:
    async def impl(args: dict) -> dict:
        return await _worker(services, backend).calendar(args.get("days"))

    return impl


def make_search(services: ServiceRegistry, backend: Backend) -> Callable[[dict], Awaitable[dict]]:
    async def impl(args: dict) -> dict:
        return await _worker(services, backend).search(str(args.get("term", "")).strip())

    return impl


# Generated for every library manager; name suffix -> factory
CONFIG_TOOL_FACTORIES = {
    "get_quality_profiles": make_get_quality_profiles,
    "get_health": make_get_health,
    "get_root_folders": make_get_root_folders,
    "get_download_clients": make_get_download_clients,
    "get_naming": make_get_naming,
    "get_tags": make_get_tags,
    "review_setup": make_review_setup,
}

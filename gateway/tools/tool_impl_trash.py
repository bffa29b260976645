from __future__ import annotations

from typing import Any, Awaitable, Callable

from config.loader import Backend
from gateway.services import ServiceRegistry
from gateway.workers.trash import TrashWorker
from integrations.trash_client import TrashClient


def _backend(service: str) -> Backend:
    return Backend.RADARR if service == "radarr" else Backend.SONARR


def make_trash_list_profiles(trash: TrashClient) -> Callable[[dict], Awaitable[Any]]:
    async def impl(args: dict) -> Any:
        return await TrashWorker(trash).list_profiles(service=args["service"])

    return impl


def make_trash_get_profile(trash: TrashClient) -> Callable[[dict], Awaitable[Any]]:
    async def impl(args: dict) -> Any:
        return await TrashWorker(trash).get_profile(service=args["service"], profile=args["profile"])

    return impl


def make_trash_list_custom_formats(trash: TrashClient) -> Callable[[dict], Awaitable[Any]]:
    async def impl(args: dict) -> Any:
        return await TrashWorker(trash).list_custom_formats(service=args["service"], category=args.get("category"))

    return impl


def make_trash_get_naming(trash: TrashClient) -> Callable[[dict], Awaitable[Any]]:
    async def impl(args: dict) -> Any:
        return await TrashWorker(trash).get_naming(service=args["service"], media_server=args["mediaServer"])

    return impl


def make_trash_get_quality_sizes(trash: TrashClient) -> Callable[[dict], Awaitable[Any]]:
    async def impl(args: dict) -> Any:
        return await TrashWorker(trash).get_quality_sizes(service=args["service"], type=args.get("type"))

    return impl


def make_trash_compare_profile(services: ServiceRegistry, trash: TrashClient) -> Callable[[dict], Awaitable[Any]]:
    async def impl(args: dict) -> Any:
        service = args["service"]
        worker = TrashWorker(trash, services.get(_backend(service)))
        return await worker.compare_profile(
            service=service,
            profile_id=int(args["profileId"]),
            trash_profile=args["trashProfile"],
        )

    return impl


def make_trash_compare_naming(services: ServiceRegistry, trash: TrashClient) -> Callable[[dict], Awaitable[Any]]:
    async def impl(args: dict) -> Any:
        service = args["service"]
        worker = TrashWorker(trash, services.get(_backend(service)))
        return await worker.compare_naming(service=service, media_server=args["mediaServer"])

    return impl

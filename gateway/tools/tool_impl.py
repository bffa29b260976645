from __future__ import annotations

from typing import Any, Awaitable, Callable, Dict

from config.loader import DISPLAY_NAMES, LIBRARY_BACKENDS, Backend
from gateway.fanout import Failure, Success, run_independent
from gateway.services import ServiceRegistry

SEARCH_ALL_LIMIT = 5


def _status_probe(backend: Backend, client: Any) -> Callable[[], Awaitable[Dict[str, Any]]]:
    async def probe() -> Dict[str, Any]:
        if backend is Backend.TAUTULLI:
            data = await client.get_server_status()
            return {"configured": True, "connected": True, "data": data}
        status = await client.get_status() or {}
        if backend is Backend.OVERSEERR:
            return {
                "configured": True,
                "connected": True,
                "version": status.get("version"),
                "updateAvailable": status.get("updateAvailable"),
            }
        return {
            "configured": True,
            "connected": True,
            "version": status.get("version"),
            "appName": status.get("appName"),
        }

    return probe


def make_arr_status(services: ServiceRegistry) -> Callable[[dict], Awaitable[dict]]:
    """Probe every configured backend at once; one dead service never hides the rest."""

    async def impl(args: dict) -> dict:
        probes = {b.value: _status_probe(b, services.get(b)) for b in services.configured()}
        outcomes = await run_independent(probes)
        report: Dict[str, Any] = {}
        for backend in Backend:
            outcome = outcomes.get(backend.value)
            if outcome is None:
                report[backend.value] = {"configured": False}
            elif isinstance(outcome, Success):
                report[backend.value] = outcome.value
            else:
                report[backend.value] = {"configured": True, "connected": False, "error": outcome.message}
        return report

    return impl


def _lookup(backend: Backend, client: Any, term: str) -> Callable[[], Awaitable[Any]]:
    async def lookup() -> Any:
        if backend is Backend.SONARR:
            return await client.search_series(term)
        if backend is Backend.RADARR:
            return await client.search_movies(term)
        if backend is Backend.LIDARR:
            return await client.search_artists(term)
        return await client.search_authors(term)

    return lookup


def make_arr_search_all(services: ServiceRegistry) -> Callable[[dict], Awaitable[dict]]:
    async def impl(args: dict) -> dict:
        term = str(args.get("term", "")).strip()
        lookups = {
            b.value: _lookup(b, services.get(b), term) for b in LIBRARY_BACKENDS if services.is_configured(b)
        }
        outcomes = await run_independent(lookups)
        results: Dict[str, Any] = {}
        for key, outcome in outcomes.items():
            if isinstance(outcome, Failure):
                results[key] = {"error": outcome.message}
            else:
                items = outcome.value or []
                results[key] = {"count": len(items), "results": items[:SEARCH_ALL_LIMIT]}
        return results

    return impl


def status_description(services: ServiceRegistry) -> str:
    names = ", ".join(DISPLAY_NAMES[b] for b in services.configured()) or "none"
    return f"Get status of all configured services. Currently configured: {names}"

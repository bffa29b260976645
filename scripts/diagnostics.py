from __future__ import annotations

import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from config.loader import DISPLAY_NAMES, Backend, http_timeout_seconds, load_runtime_config, load_settings
from gateway.services import ServiceRegistry

PROBE_TIMEOUT_SECONDS = 15.0


async def _probe(backend: Backend, client) -> str:
    if backend is Backend.TAUTULLI:
        data = await client.get_server_status()
        connected = (data or {}).get("connected")
        return f"server connected: {connected}"
    status = await client.get_status() or {}
    return f"version {status.get('version', '?')}"


async def diagnostics() -> int:
    project_root = Path(__file__).resolve().parents[1]
    settings = load_settings(project_root)
    config = load_runtime_config(project_root)
    services = ServiceRegistry.from_configs(settings.services, timeout=http_timeout_seconds(config))

    failures = 0
    for backend in Backend:
        name = DISPLAY_NAMES[backend]
        client = services.get(backend)
        if client is None:
            print(f"{name}: not configured")
            continue
        print(f"Checking {name}...")
        try:
            detail = await asyncio.wait_for(_probe(backend, client), timeout=PROBE_TIMEOUT_SECONDS)
            print(f"- OK: {detail}")
        except asyncio.TimeoutError:
            failures += 1
            print(f"- FAILED: no answer within {PROBE_TIMEOUT_SECONDS:.0f}s")
        except Exception as e:  # noqa: BLE001
            failures += 1
            print(f"- FAILED: {e}")

    if not services.configured():
        print("\nNo services configured. Set <SERVICE>_URL and <SERVICE>_API_KEY in .env")
        return 1
    return 1 if failures else 0


if __name__ == "__main__":
    raise SystemExit(asyncio.run(diagnostics()))

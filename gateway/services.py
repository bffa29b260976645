from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Type

from config.loader import DISPLAY_NAMES, Backend, ServiceConfig
from gateway.errors import ConfigurationError, ServiceNotConfigured
from integrations.http_client import DEFAULT_TIMEOUT, BaseHttpClient
from integrations.lidarr_client import LidarrClient
from integrations.overseerr_client import OverseerrClient
from integrations.prowlarr_client import ProwlarrClient
from integrations.radarr_client import RadarrClient
from integrations.readarr_client import ReadarrClient
from integrations.sonarr_client import SonarrClient
from integrations.tautulli_client import TautulliClient

logger = logging.getLogger("arr_gateway.services")

CLIENT_CLASSES: Dict[Backend, Type[BaseHttpClient]] = {
    Backend.SONARR: SonarrClient,
    Backend.RADARR: RadarrClient,
    Backend.LIDARR: LidarrClient,
    Backend.READARR: ReadarrClient,
    Backend.PROWLARR: ProwlarrClient,
    Backend.TAUTULLI: TautulliClient,
    Backend.OVERSEERR: OverseerrClient,
}


class ServiceRegistry:
    """Backend -> client map, fixed once built."""

    def __init__(self, clients: Dict[Backend, Optional[Any]]) -> None:
        self._clients: Dict[Backend, Optional[Any]] = {b: clients.get(b) for b in Backend}

    @classmethod
    def from_configs(cls, configs: Iterable[ServiceConfig], *, timeout: float = DEFAULT_TIMEOUT) -> "ServiceRegistry":
        clients: Dict[Backend, Optional[Any]] = {}
        for cfg in configs:
            if not cfg.configured:
                continue
            client_cls = CLIENT_CLASSES[cfg.backend]
            try:
                clients[cfg.backend] = client_cls(cfg.url or "", cfg.api_key or "", timeout=timeout)
            except ValueError as e:
                raise ConfigurationError(f"{cfg.backend.env_prefix}_URL: {e}") from e
        return cls(clients)

    def get(self, backend: Backend) -> Optional[Any]:
        return self._clients.get(backend)

    def require(self, backend: Backend) -> Any:
        client = self._clients.get(backend)
        if client is None:
            raise ServiceNotConfigured(backend)
        return client

    def is_configured(self, backend: Backend) -> bool:
        return self._clients.get(backend) is not None

    def configured(self) -> List[Backend]:
        return [b for b in Backend if self._clients.get(b) is not None]


def build_registry(configs: Iterable[ServiceConfig], *, timeout: float = DEFAULT_TIMEOUT) -> ServiceRegistry:
    registry = ServiceRegistry.from_configs(configs, timeout=timeout)
    present = registry.configured()
    if not present:
        hint = ", ".join(f"{b.env_prefix}_URL/{b.env_prefix}_API_KEY" for b in Backend)
        raise ConfigurationError(f"No services configured. Set at least one of: {hint}")
    logger.info("Configured services: %s", ", ".join(DISPLAY_NAMES[b] for b in present))
    return registry

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml
from dotenv import load_dotenv


class Backend(str, Enum):
    """Backend families the gateway knows about, in fixed report order."""

    SONARR = "sonarr"
    RADARR = "radarr"
    LIDARR = "lidarr"
    READARR = "readarr"
    PROWLARR = "prowlarr"
    TAUTULLI = "tautulli"
    OVERSEERR = "overseerr"

    @property
    def env_prefix(self) -> str:
        return self.value.upper()


DISPLAY_NAMES: Dict[Backend, str] = {
    Backend.SONARR: "Sonarr (TV)",
    Backend.RADARR: "Radarr (Movies)",
    Backend.LIDARR: "Lidarr (Music)",
    Backend.READARR: "Readarr (Books)",
    Backend.PROWLARR: "Prowlarr (Indexers)",
    Backend.TAUTULLI: "Tautulli (Plex)",
    Backend.OVERSEERR: "Overseerr (Requests)",
}

ARR_BACKENDS = (Backend.SONARR, Backend.RADARR, Backend.LIDARR, Backend.READARR, Backend.PROWLARR)
# Library managers: searchable by title and carrying quality/naming config
LIBRARY_BACKENDS = (Backend.SONARR, Backend.RADARR, Backend.LIDARR, Backend.READARR)
CONFIG_BACKENDS = LIBRARY_BACKENDS


@dataclass(frozen=True)
class ServiceConfig:
    backend: Backend
    display_name: str
    url: Optional[str]
    api_key: Optional[str]

    @property
    def configured(self) -> bool:
        return bool((self.url or "").strip()) and bool((self.api_key or "").strip())


@dataclass
class Settings:
    services: List[ServiceConfig]
    log_level: str

    def service(self, backend: Backend) -> ServiceConfig:
        for s in self.services:
            if s.backend is backend:
                return s
        raise KeyError(backend)


def load_settings(project_root: Path) -> Settings:
    env_path = project_root / ".env"
    load_dotenv(env_path)

    services = [
        ServiceConfig(
            backend=backend,
            display_name=DISPLAY_NAMES[backend],
            url=_clean(os.getenv(f"{backend.env_prefix}_URL")),
            api_key=_clean(os.getenv(f"{backend.env_prefix}_API_KEY")),
        )
        for backend in Backend
    ]
    runtime = load_runtime_config(project_root)
    log_level = os.getenv("ARR_GATEWAY_LOG_LEVEL") or (runtime.get("logging", {}) or {}).get("level") or "INFO"
    return Settings(services=services, log_level=str(log_level).upper())


def load_runtime_config(project_root: Path) -> dict:
    config_path = project_root / "config" / "config.yaml"
    if not config_path.exists():
        return {}
    with open(config_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def http_timeout_seconds(runtime_config: Dict[str, Any]) -> float:
    http_cfg = runtime_config.get("http", {}) or {}
    try:
        return float(http_cfg.get("timeoutSeconds", 30.0))
    except (TypeError, ValueError):
        return 30.0


def trash_cache_ttl_seconds(runtime_config: Dict[str, Any]) -> int:
    trash_cfg = runtime_config.get("trash", {}) or {}
    try:
        return int(trash_cfg.get("cacheTtlSeconds", 3600))
    except (TypeError, ValueError):
        return 3600


TRASH_RAW_URL = "https://raw.githubusercontent.com/TRaSH-Guides/Guides/master"
TRASH_API_URL = "https://api.github.com/repos/TRaSH-Guides/Guides/contents"


def trash_source_urls(runtime_config: Dict[str, Any]) -> Tuple[str, str]:
    trash_cfg = runtime_config.get("trash", {}) or {}
    raw_url = str(trash_cfg.get("baseUrl") or TRASH_RAW_URL).rstrip("/")
    api_url = str(trash_cfg.get("apiUrl") or TRASH_API_URL).rstrip("/")
    return raw_url, api_url


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None

from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional

import httpx

from integrations.errors import TransportError

logger = logging.getLogger("arr_gateway.http")

DEFAULT_TIMEOUT = 30.0


class BaseHttpClient:
    """Shared plumbing for every backend client.

    A fresh ``httpx.AsyncClient`` is opened per call so no connection state is
    held between tool invocations. Subclasses set ``service_name`` and
    ``api_path`` and may override ``_auth_headers`` / ``_auth_params``.
    """

    service_name = "Backend"
    api_path = ""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        if not base_url or not base_url.strip():
            raise ValueError("base_url cannot be empty")
        if not api_key or not api_key.strip():
            raise ValueError("api_key cannot be empty")
        if not base_url.startswith(("http://", "https://")):
            raise ValueError("base_url must start with http:// or https://")

        self.base_url = base_url.strip().rstrip("/")
        self.api_key = api_key.strip()
        self.timeout = timeout
        self._transport = transport

    def _auth_headers(self) -> Dict[str, str]:
        return {"X-Api-Key": self.api_key}

    def _auth_params(self) -> Dict[str, Any]:
        return {}

    def _new_client(self) -> httpx.AsyncClient:
        kwargs: Dict[str, Any] = {
            "base_url": self.base_url,
            "headers": {**self._auth_headers(), "Content-Type": "application/json"},
            "timeout": self.timeout,
        }
        if self._transport is not None:
            kwargs["transport"] = self._transport
        return httpx.AsyncClient(**kwargs)

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
    ) -> Any:
        url = f"{self.api_path}{path}"
        query = {**self._auth_params(), **{k: v for k, v in (params or {}).items() if v is not None}}
        t0 = time.monotonic()
        try:
            async with self._new_client() as client:
                r = await client.request(method, url, params=query or None, json=json)
        except httpx.HTTPError as e:
            self._log_req(method, url, -1, t0, error=type(e).__name__)
            raise TransportError(self.service_name, None, self._scrub(f"{type(e).__name__}: {e}")) from e

        self._log_req(method, url, r.status_code, t0)
        if r.status_code >= 400:
            raise TransportError(self.service_name, r.status_code, r.reason_phrase or "", self._scrub(r.text))
        if r.status_code == 204 or not (r.text or "").strip():
            return None
        return r.json()

    def _scrub(self, text: str) -> str:
        if not text:
            return ""
        return text.replace(self.api_key, "***")

    def _log_req(self, method: str, path: str, status: int, t0: float, error: Optional[str] = None) -> None:
        if not logger.isEnabledFor(logging.DEBUG):
            return
        extra = {
            "service": self.service_name,
            "method": method,
            "path": path,
            "status": status,
            "duration_ms": int((time.monotonic() - t0) * 1000),
        }
        if error:
            extra["error"] = error
        logger.debug("http_request", extra=extra)

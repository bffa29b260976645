from __future__ import annotations

from typing import Any, Dict, List, Optional

from integrations.http_client import BaseHttpClient


class ArrClient(BaseHttpClient):
    """Endpoints shared by every *arr application (Sonarr, Radarr, Lidarr, Readarr, Prowlarr)."""

    api_path = "/api/v3"

    # System & Status
    async def get_status(self) -> Dict[str, Any]:
        return await self._request("GET", "/system/status")

    async def get_health(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/health") or []

    async def get_disk_space(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/diskspace") or []

    # Quality & Folders
    async def get_quality_profiles(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/qualityprofile") or []

    async def get_quality_definitions(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/qualitydefinition") or []

    async def get_root_folders(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/rootfolder") or []

    # Settings
    async def get_download_clients(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/downloadclient") or []

    async def get_naming_config(self) -> Dict[str, Any]:
        return await self._request("GET", "/config/naming") or {}

    async def get_media_management(self) -> Dict[str, Any]:
        return await self._request("GET", "/config/mediamanagement") or {}

    async def get_tags(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/tag") or []

    async def get_indexers(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/indexer") or []

    # Activity
    async def get_queue(self) -> Dict[str, Any]:
        data = await self._request("GET", "/queue")
        return data or {"totalRecords": 0, "records": []}

    async def get_calendar(self, start_date: Optional[str] = None, end_date: Optional[str] = None) -> List[Dict[str, Any]]:
        params = {"start": start_date, "end": end_date}
        return await self._request("GET", "/calendar", params=params) or []

    # Commands
    async def post_command(self, name: str, **body: Any) -> Dict[str, Any]:
        data = await self._request("POST", "/command", json={"name": name, **body})
        return data or {"status": "queued"}


class ArrV1Client(ArrClient):
    api_path = "/api/v1"

    async def get_metadata_profiles(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/metadataprofile") or []

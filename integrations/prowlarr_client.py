from __future__ import annotations

from typing import Any, Dict, List

from integrations.arr_client import ArrClient


class ProwlarrClient(ArrClient):
    service_name = "Prowlarr"
    api_path = "/api/v1"

    async def search(self, query: str) -> List[Dict[str, Any]]:
        return await self._request("GET", "/search", params={"query": query}) or []

    async def test_all_indexers(self) -> List[Dict[str, Any]]:
        return await self._request("POST", "/indexer/testall") or []

    async def get_indexer_stats(self) -> Dict[str, Any]:
        return await self._request("GET", "/indexerstats") or {"indexers": []}

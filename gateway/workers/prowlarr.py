from __future__ import annotations

import asyncio
from typing import Any, Dict, List


class ProwlarrWorker:
    def __init__(self, client: Any) -> None:
        self.client = client

    @staticmethod
    def _indexer(i: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "id": i.get("id"),
            "name": i.get("name"),
            "protocol": i.get("protocol"),
            "enableRss": i.get("enableRss"),
            "enableAutomaticSearch": i.get("enableAutomaticSearch"),
            "enableInteractiveSearch": i.get("enableInteractiveSearch"),
            "priority": i.get("priority"),
        }

    async def get_indexers(self) -> Dict[str, Any]:
        indexers = await self.client.get_indexers()
        return {"count": len(indexers), "indexers": [self._indexer(i) for i in indexers]}

    async def search(self, query: str) -> Any:
        return await self.client.search(query)

    async def test_indexers(self) -> Dict[str, Any]:
        results, indexers = await asyncio.gather(self.client.test_all_indexers(), self.client.get_indexers())
        names = {i.get("id"): i.get("name") for i in indexers}
        shaped: List[Dict[str, Any]] = [
            {
                "id": r.get("id"),
                "name": names.get(r.get("id")) or "Unknown",
                "isValid": r.get("isValid"),
                "errors": [f.get("errorMessage") for f in r.get("validationFailures") or []],
            }
            for r in results
        ]
        healthy = sum(1 for r in results if r.get("isValid"))
        return {
            "count": len(results),
            "indexers": shaped,
            "healthy": healthy,
            "failed": len(results) - healthy,
        }

    async def get_stats(self) -> Dict[str, Any]:
        stats = await self.client.get_indexer_stats()
        rows = stats.get("indexers") or []

        def total(field: str) -> int:
            return sum(s.get(field) or 0 for s in rows)

        return {
            "count": len(rows),
            "indexers": [
                {
                    "name": s.get("indexerName"),
                    "queries": s.get("numberOfQueries"),
                    "grabs": s.get("numberOfGrabs"),
                    "failedQueries": s.get("numberOfFailedQueries"),
                    "failedGrabs": s.get("numberOfFailedGrabs"),
                    "avgResponseTime": f"{s.get('averageResponseTime')}ms",
                }
                for s in rows
            ],
            "totals": {
                "queries": total("numberOfQueries"),
                "grabs": total("numberOfGrabs"),
                "failedQueries": total("numberOfFailedQueries"),
                "failedGrabs": total("numberOfFailedGrabs"),
            },
        }

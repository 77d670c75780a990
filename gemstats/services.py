from __future__ import annotations

import logging
from typing import Any, Dict, List

from starlette.concurrency import run_in_threadpool

from .config import settings
from .errors import PackageNotFound
from .repository import CounterStore, Registry, repository

logger = logging.getLogger("gemstats.services")


class StatsService:
    """
    Read-only queries behind the downloads and versions endpoints.
    Store calls are blocking sqlite reads, so each one runs in the threadpool
    to keep the event loop responsive.
    """

    def __init__(self, registry: Registry, counters: CounterStore, top_limit: int = 50) -> None:
        self.registry = registry
        self.counters = counters
        self.top_limit = top_limit

    async def total(self) -> Dict[str, Any]:
        total = await run_in_threadpool(self.counters.count)
        return {"total": total}

    async def version_stats(self, full_name: str) -> Dict[str, Any]:
        rubygem_name = await run_in_threadpool(self.registry.rubygem_name_for, full_name)
        if rubygem_name is None:
            raise PackageNotFound(full_name)
        total_downloads = await run_in_threadpool(self.counters.for_rubygem, rubygem_name)
        version_downloads = await run_in_threadpool(self.counters.for_version, full_name)
        logger.debug(f"Stats for {full_name}: total={total_downloads} version={version_downloads}")
        return {
            "total_downloads": total_downloads,
            "version_downloads": version_downloads,
        }

    async def top(self) -> Dict[str, Any]:
        pairs = await run_in_threadpool(self.counters.most_downloaded_today, self.top_limit)
        counts = await run_in_threadpool(self.counters.for_versions, [v.full_name for v, _ in pairs])
        gems: List[List[Any]] = [
            [version.to_payload(counts.get(version.full_name, 0)), today_count]
            for version, today_count in pairs
        ]
        return {"gems": gems}

    async def public_versions(self, name: str) -> List[Dict[str, Any]]:
        rubygem = await run_in_threadpool(self.registry.find_rubygem, name)
        if rubygem is None:
            raise PackageNotFound(name)
        versions = await run_in_threadpool(self.registry.public_versions, rubygem)
        counts = await run_in_threadpool(self.counters.for_versions, [v.full_name for v in versions])
        return [v.to_payload(counts.get(v.full_name, 0)) for v in versions]


# Exposed singleton service for application-wide reuse
stats_service = StatsService(repository, repository, top_limit=settings.top_limit)


def get_stats_service() -> StatsService:
    return stats_service

"""
In-process stats client - no stats service needed.
"""

from datetime import datetime
from typing import Sequence, Union

from ewm.services.interfaces.stats import StatsClient
from ewm_stats.schemas import HitCreate, ViewStats, split_uris


class InMemoryStatsClient(StatsClient):
    """
    Keeps hits in a list and aggregates them the way the stats service does.

    Use when:
    - Running the event service alone in development
    - Tests that should not depend on a second service
    """

    def __init__(self):
        self.hits: list[HitCreate] = []

    async def record_hit(self, hit: HitCreate) -> None:
        self.hits.append(hit)

    async def query_stats(
        self,
        start: datetime,
        end: datetime,
        uris: Union[str, Sequence[str], None] = None,
        unique: bool = False,
    ) -> list[ViewStats]:
        wanted = set(split_uris(uris))
        ips_by_key: dict[tuple[str, str], list[str]] = {}
        for hit in self.hits:
            if hit.timestamp < start or hit.timestamp > end:
                continue
            if wanted and hit.uri not in wanted:
                continue
            ips_by_key.setdefault((hit.app, hit.uri), []).append(hit.ip)

        stats = [
            ViewStats(app=app, uri=uri, hits=len(set(ips)) if unique else len(ips))
            for (app, uri), ips in ips_by_key.items()
        ]
        stats.sort(key=lambda item: item.hits, reverse=True)
        return stats

"""
Stats client interface.
Lets the event service talk to the real stats service or to an in-process one.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Sequence, Union

from ewm_stats.schemas import HitCreate, ViewStats


class StatsClient(ABC):
    """
    Interface for the two calls the event service makes to the stats service.

    Implementations:
    - HttpStatsClient: the stats service over HTTP
    - InMemoryStatsClient: hits kept in process memory
    """

    @abstractmethod
    async def record_hit(self, hit: HitCreate) -> None:
        """
        Record one page view.

        Args:
            hit: app name, request URI, caller IP and timestamp
        """
        pass

    @abstractmethod
    async def query_stats(
        self,
        start: datetime,
        end: datetime,
        uris: Union[str, Sequence[str], None] = None,
        unique: bool = False,
    ) -> list[ViewStats]:
        """
        Aggregate hits per (app, uri) between start and end inclusive.

        Args:
            start: window start
            end: window end
            uris: one URI, a comma-joined set, or a list; None means all
            unique: count distinct IPs instead of raw hits

        Returns:
            Aggregates ordered by hits, highest first

        Raises:
            StatsServiceError: on transport failure or a malformed response
        """
        pass

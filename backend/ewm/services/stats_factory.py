"""
Stats client factory.
Configures which stats client implementation the event service uses.
"""

from typing import Optional

from ewm.core.config import get_settings
from ewm.infrastructure.stats_client import HttpStatsClient
from ewm.services.interfaces.stats import StatsClient
from ewm.services.interfaces.memory_stats import InMemoryStatsClient


def build_stats_client() -> StatsClient:
    """
    Build the configured stats client.

    - http: the stats service at STATS_SERVER_URL (default)
    - memory: in-process aggregation, for running without the stats service
    """
    settings = get_settings()
    if settings.STATS_CLIENT == "memory":
        return InMemoryStatsClient()
    return HttpStatsClient(settings.STATS_SERVER_URL)


# Singleton instance
_client: Optional[StatsClient] = None


def get_stats_client() -> StatsClient:
    """Get stats client singleton. Used as a FastAPI dependency."""
    global _client
    if _client is None:
        _client = build_stats_client()
    return _client

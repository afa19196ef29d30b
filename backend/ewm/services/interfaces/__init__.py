"""
Service interfaces for dependency inversion.
Allows swapping implementations without changing business logic.
"""

from .stats import StatsClient
from .memory_stats import InMemoryStatsClient

__all__ = ['StatsClient', 'InMemoryStatsClient']

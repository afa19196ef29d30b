"""
Infrastructure layer - external system integrations.
Keeps business logic clean from implementation details.
"""

from .stats_client import HttpStatsClient

__all__ = ['HttpStatsClient']

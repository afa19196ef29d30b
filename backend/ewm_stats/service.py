"""
Hit storage and aggregation.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ewm.core.dates import ensure_range
from ewm.core.logging import get_logger
from ewm_stats.models import Hit
from ewm_stats.schemas import HitCreate, ViewStats

logger = get_logger(__name__)


async def save_hit(db: AsyncSession, hit: HitCreate) -> Hit:
    row = Hit(app=hit.app, uri=hit.uri, ip=hit.ip, timestamp=hit.timestamp)
    db.add(row)
    await db.flush()
    logger.info("stats_hit_recorded", app=hit.app, uri=hit.uri, ip=hit.ip)
    return row


async def get_stats(
    db: AsyncSession,
    start: datetime,
    end: datetime,
    uris: Optional[list[str]] = None,
    unique: bool = False,
) -> list[ViewStats]:
    """
    Hit counts per (app, uri) with timestamps in [start, end], busiest first.
    With `unique` each IP address counts once per URI.
    """
    ensure_range(start, end)

    hits = func.count(func.distinct(Hit.ip)) if unique else func.count(Hit.id)
    hits = hits.label("hits")
    query = (
        select(Hit.app, Hit.uri, hits)
        .where(Hit.timestamp >= start, Hit.timestamp <= end)
        .group_by(Hit.app, Hit.uri)
        .order_by(hits.desc(), Hit.uri)
    )
    if uris:
        query = query.where(Hit.uri.in_(uris))

    result = await db.execute(query)
    return [ViewStats(app=app, uri=uri, hits=count) for app, uri, count in result.all()]

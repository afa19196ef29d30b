"""
Stats endpoints: hit recording and aggregated counts.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ewm.core.dates import parse_datetime
from ewm.core.exceptions import ValidationError
from ewm_stats import service
from ewm_stats.db import get_db
from ewm_stats.schemas import HitCreate, ViewStats, split_uris

router = APIRouter(tags=["Stats"])


@router.post("/hit", status_code=status.HTTP_201_CREATED)
async def record_hit_endpoint(
    hit: HitCreate,
    db: AsyncSession = Depends(get_db),
):
    await service.save_hit(db, hit)


@router.get("/stats", response_model=list[ViewStats])
async def get_stats_endpoint(
    start: str = Query(...),
    end: str = Query(...),
    uris: Optional[list[str]] = Query(None),
    unique: bool = Query(False),
    db: AsyncSession = Depends(get_db),
):
    """`uris` may be repeated, comma-joined or both; omitted means every URI."""
    start_at = parse_datetime(start)
    end_at = parse_datetime(end)
    if start_at is None or end_at is None:
        raise ValidationError("start and end are required")
    return await service.get_stats(db, start_at, end_at, split_uris(uris), unique)

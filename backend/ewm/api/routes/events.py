"""
Event endpoints for initiators, administrators and the public catalogue.

Public reads are never cached: each one records a hit with the stats service
and refreshes the stored view counts.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from ewm.api.middleware import client_ip
from ewm.db.session import get_db
from ewm.schemas.event import (
    EventAdminUpdate,
    EventCreate,
    EventFullResponse,
    EventShortResponse,
    EventUserUpdate,
)
from ewm.services import event_service
from ewm.services.interfaces.stats import StatsClient
from ewm.services.stats_factory import get_stats_client

private_router = APIRouter(prefix="/users/{user_id}/events", tags=["Private: Events"])
admin_router = APIRouter(prefix="/admin/events", tags=["Admin: Events"])
public_router = APIRouter(prefix="/events", tags=["Public: Events"])


@private_router.post("", response_model=EventFullResponse, status_code=status.HTTP_201_CREATED)
async def create_event_endpoint(
    user_id: int,
    event_data: EventCreate,
    db: AsyncSession = Depends(get_db),
):
    return await event_service.create_event(db, user_id, event_data)


@private_router.get("", response_model=list[EventShortResponse])
async def list_user_events_endpoint(
    user_id: int,
    offset: int = Query(0, ge=0, alias="from"),
    limit: int = Query(10, ge=1, alias="size"),
    db: AsyncSession = Depends(get_db),
):
    return await event_service.list_user_events(db, user_id, offset, limit)


@private_router.get("/{event_id}", response_model=EventFullResponse)
async def get_user_event_endpoint(
    user_id: int,
    event_id: int,
    db: AsyncSession = Depends(get_db),
):
    return await event_service.get_user_event(db, user_id, event_id)


@private_router.patch("/{event_id}", response_model=EventFullResponse)
async def update_user_event_endpoint(
    user_id: int,
    event_id: int,
    update: EventUserUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Initiator edits a pending or canceled event, or moves it to/from review."""
    return await event_service.update_event_by_user(db, user_id, event_id, update)


@admin_router.get("", response_model=list[EventFullResponse])
async def search_admin_events_endpoint(
    users: Optional[list[int]] = Query(None),
    states: Optional[list[str]] = Query(None),
    categories: Optional[list[int]] = Query(None),
    range_start: Optional[str] = Query(None, alias="rangeStart"),
    range_end: Optional[str] = Query(None, alias="rangeEnd"),
    offset: int = Query(0, ge=0, alias="from"),
    limit: int = Query(10, ge=1, alias="size"),
    db: AsyncSession = Depends(get_db),
):
    return await event_service.search_events_admin(
        db,
        users=users,
        states=states,
        categories=categories,
        range_start=range_start,
        range_end=range_end,
        offset=offset,
        limit=limit,
    )


@admin_router.patch("/{event_id}", response_model=EventFullResponse)
async def update_admin_event_endpoint(
    event_id: int,
    update: EventAdminUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Edit, publish or reject an event."""
    return await event_service.update_event_by_admin(db, event_id, update)


@public_router.get("", response_model=list[EventShortResponse])
async def search_public_events_endpoint(
    request: Request,
    text: Optional[str] = Query(None),
    categories: Optional[list[int]] = Query(None),
    paid: Optional[bool] = Query(None),
    range_start: Optional[str] = Query(None, alias="rangeStart"),
    range_end: Optional[str] = Query(None, alias="rangeEnd"),
    only_available: bool = Query(False, alias="onlyAvailable"),
    sort: Optional[str] = Query(None),
    offset: int = Query(0, ge=0, alias="from"),
    limit: int = Query(10, ge=1, alias="size"),
    db: AsyncSession = Depends(get_db),
    stats: StatsClient = Depends(get_stats_client),
):
    return await event_service.search_events_public(
        db,
        stats,
        uri=request.url.path,
        ip=client_ip(request),
        text=text,
        categories=categories,
        paid=paid,
        range_start=range_start,
        range_end=range_end,
        only_available=only_available,
        sort=sort,
        offset=offset,
        limit=limit,
    )


@public_router.get("/{event_id}", response_model=EventFullResponse)
async def get_public_event_endpoint(
    event_id: int,
    request: Request,
    db: AsyncSession = Depends(get_db),
    stats: StatsClient = Depends(get_stats_client),
):
    return await event_service.get_published_event(
        db, stats, event_id, uri=request.url.path, ip=client_ip(request)
    )

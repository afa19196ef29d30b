"""
Event repository with the admin and public search queries.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ewm.domain.lifecycle import EventSort, State
from ewm.models.event import Event


@dataclass(frozen=True)
class AdminEventFilter:
    users: Optional[list[int]] = None
    states: Optional[list[State]] = None
    categories: Optional[list[int]] = None
    range_start: Optional[datetime] = None
    range_end: Optional[datetime] = None


@dataclass(frozen=True)
class PublicEventFilter:
    text: Optional[str] = None
    categories: Optional[list[int]] = None
    paid: Optional[bool] = None
    range_start: Optional[datetime] = None
    range_end: Optional[datetime] = None
    only_available: bool = False
    sort: Optional[EventSort] = None


class EventRepository:
    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def get(self, event_id: int) -> Optional[Event]:
        return await self._db.get(Event, event_id)

    async def get_many(self, event_ids: Iterable[int]) -> list[Event]:
        ids = set(event_ids)
        if not ids:
            return []
        result = await self._db.execute(select(Event).where(Event.id.in_(ids)).order_by(Event.id))
        return list(result.scalars().all())

    async def get_by_initiator(self, initiator_id: int, event_id: int) -> Optional[Event]:
        result = await self._db.execute(
            select(Event).where(Event.id == event_id, Event.initiator_id == initiator_id)
        )
        return result.scalar_one_or_none()

    async def list_by_initiator(self, initiator_id: int, offset: int, limit: int) -> list[Event]:
        result = await self._db.execute(
            select(Event)
            .where(Event.initiator_id == initiator_id)
            .order_by(Event.id)
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def search_admin(self, params: AdminEventFilter, offset: int, limit: int) -> list[Event]:
        query = select(Event)
        if params.users:
            query = query.where(Event.initiator_id.in_(params.users))
        if params.states:
            query = query.where(Event.state.in_(params.states))
        if params.categories:
            query = query.where(Event.category_id.in_(params.categories))
        if params.range_start is not None:
            query = query.where(Event.event_date >= params.range_start)
        if params.range_end is not None:
            query = query.where(Event.event_date <= params.range_end)

        result = await self._db.execute(query.order_by(Event.id).offset(offset).limit(limit))
        return list(result.scalars().all())

    async def search_public(self, params: PublicEventFilter, offset: int, limit: int) -> list[Event]:
        """Published events matching the filter. Uses ix_events_state_date."""
        query = select(Event).where(Event.state == State.PUBLISHED)
        if params.text:
            pattern = f"%{params.text}%"
            query = query.where(
                or_(Event.annotation.ilike(pattern), Event.description.ilike(pattern))
            )
        if params.categories:
            query = query.where(Event.category_id.in_(params.categories))
        if params.paid is not None:
            query = query.where(Event.paid == params.paid)
        if params.range_start is not None:
            query = query.where(Event.event_date >= params.range_start)
        if params.range_end is not None:
            query = query.where(Event.event_date <= params.range_end)
        if params.only_available:
            query = query.where(
                or_(
                    Event.participant_limit == 0,
                    Event.confirmed_requests < Event.participant_limit,
                )
            )

        if params.sort == EventSort.EVENT_DATE:
            query = query.order_by(Event.event_date.asc(), Event.id)
        elif params.sort == EventSort.VIEWS:
            query = query.order_by(Event.views.desc(), Event.id)
        else:
            query = query.order_by(Event.id)

        result = await self._db.execute(query.offset(offset).limit(limit))
        return list(result.scalars().all())

    async def add(self, event: Event) -> Event:
        self._db.add(event)
        await self._db.flush()
        await self._db.refresh(event)
        return event

    async def save(self, event: Event) -> Event:
        await self._db.flush()
        return event

    async def save_all(self, events: list[Event]) -> list[Event]:
        await self._db.flush()
        return events

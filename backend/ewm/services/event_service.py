"""
Event service: creation, owner/admin updates and the admin/public searches.

State changes go through ewm.domain.lifecycle.next_state. Every check runs
before the first field is touched, so a rejected update leaves the event as
it was.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ewm.core.dates import ensure_range, now, parse_datetime
from ewm.core.exceptions import ConflictError, NotFoundError, ValidationError
from ewm.core.logging import get_logger
from ewm.core.metrics import record_state_transition
from ewm.domain.lifecycle import (
    EventSort,
    State,
    ensure_participant_limit,
    next_state,
)
from ewm.models import Event
from ewm.repositories import AdminEventFilter, EventRepository, LocationRepository, PublicEventFilter
from ewm.schemas.event import (
    EventAdminUpdate,
    EventCreate,
    EventFullResponse,
    EventShortResponse,
    EventUpdate,
    EventUserUpdate,
)
from ewm.services import cache_service, event_mapper, views_service
from ewm.services.interfaces.stats import StatsClient
from ewm.services.lookups import (
    get_category_or_not_found,
    get_event_or_not_found,
    get_user_or_not_found,
)

logger = get_logger(__name__)


def _ensure_future(event_date: datetime) -> None:
    if event_date <= now():
        raise ValidationError(f"Event date must be in the future, got {event_date}")


async def create_event(db: AsyncSession, user_id: int, event_data: EventCreate) -> EventFullResponse:
    """Create a PENDING event owned by `user_id`."""
    ensure_participant_limit(event_data.participant_limit)
    await get_user_or_not_found(db, user_id)
    _ensure_future(event_data.event_date)
    await get_category_or_not_found(db, event_data.category)

    location = await LocationRepository(db).add(event_data.location.lat, event_data.location.lon)
    event = Event(
        title=event_data.title,
        annotation=event_data.annotation,
        description=event_data.description,
        category_id=event_data.category,
        location_id=location.id,
        initiator_id=user_id,
        state=State.PENDING,
        event_date=event_data.event_date,
        created_on=now(),
        paid=event_data.paid,
        participant_limit=event_data.participant_limit,
        request_moderation=event_data.request_moderation,
        confirmed_requests=0,
        views=0,
    )
    event = await EventRepository(db).add(event)

    logger.info("event_created", event_id=event.id, initiator_id=user_id, title=event.title)
    return await event_mapper.to_full_response(db, event)


async def list_user_events(
    db: AsyncSession, user_id: int, offset: int, limit: int
) -> list[EventShortResponse]:
    await get_user_or_not_found(db, user_id)
    events = await EventRepository(db).list_by_initiator(user_id, offset, limit)
    return await event_mapper.to_short_responses(db, events)


async def get_user_event(db: AsyncSession, user_id: int, event_id: int) -> EventFullResponse:
    await get_user_or_not_found(db, user_id)
    event = await EventRepository(db).get_by_initiator(user_id, event_id)
    if event is None:
        raise NotFoundError("Event", event_id)
    return await event_mapper.to_full_response(db, event)


async def update_event_by_user(
    db: AsyncSession, user_id: int, event_id: int, update: EventUserUpdate
) -> EventFullResponse:
    """
    Initiator's partial update.
    Raises 409 when the caller is not the initiator or the event is already published.
    """
    ensure_participant_limit(update.participant_limit)
    await get_user_or_not_found(db, user_id)
    event = await get_event_or_not_found(db, event_id)

    if event.initiator_id != user_id:
        raise ConflictError(f"User {user_id} is not the initiator of event {event_id}")
    if event.state == State.PUBLISHED:
        raise ConflictError(f"Event {event_id} is already published and cannot be changed")

    event = await _apply_update(db, event, update)
    return await event_mapper.to_full_response(db, event)


async def update_event_by_admin(
    db: AsyncSession, event_id: int, update: EventAdminUpdate
) -> EventFullResponse:
    """Administrator's partial update, publishing or rejecting a pending event."""
    ensure_participant_limit(update.participant_limit)
    event = await get_event_or_not_found(db, event_id)
    event = await _apply_update(db, event, update)
    return await event_mapper.to_full_response(db, event)


async def _apply_update(db: AsyncSession, event: Event, update: EventUpdate) -> Event:
    new_state: Optional[State] = None
    if update.state_action is not None:
        new_state = next_state(event.state, update.state_action)

    if update.category is not None:
        await get_category_or_not_found(db, update.category)
    if update.event_date is not None:
        _ensure_future(update.event_date)
    if (
        update.participant_limit is not None
        and update.participant_limit > 0
        and update.participant_limit < event.confirmed_requests
    ):
        raise ConflictError(
            f"participantLimit {update.participant_limit} is below the "
            f"{event.confirmed_requests} already confirmed requests"
        )

    if update.title is not None and update.title.strip():
        event.title = update.title
    if update.annotation is not None and update.annotation.strip():
        event.annotation = update.annotation
    if update.description is not None and update.description.strip():
        event.description = update.description
    if update.category is not None:
        event.category_id = update.category
    if update.event_date is not None:
        event.event_date = update.event_date
    if update.location is not None:
        locations = LocationRepository(db)
        location = await locations.get(event.location_id)
        await locations.move(location, update.location.lat, update.location.lon)
    if update.paid is not None:
        event.paid = update.paid
    if update.participant_limit is not None:
        event.participant_limit = update.participant_limit
    if update.request_moderation is not None:
        event.request_moderation = update.request_moderation

    if new_state is not None:
        previous = event.state
        event.state = new_state
        if new_state == State.PUBLISHED:
            event.published_on = now()
        record_state_transition(update.state_action.value)
        logger.info(
            "event_state_changed",
            event_id=event.id,
            action=update.state_action.value,
            from_state=previous.value,
            to_state=new_state.value,
        )

    event = await EventRepository(db).save(event)
    await cache_service.invalidate_compilations()
    logger.info("event_updated", event_id=event.id)
    return event


async def search_events_admin(
    db: AsyncSession,
    *,
    users: Optional[list[int]] = None,
    states: Optional[list[str]] = None,
    categories: Optional[list[int]] = None,
    range_start: Optional[str] = None,
    range_end: Optional[str] = None,
    offset: int = 0,
    limit: int = 10,
) -> list[EventFullResponse]:
    start = parse_datetime(range_start)
    end = parse_datetime(range_end)
    parsed_states = [State.parse(state) for state in states] if states else None
    ensure_range(start, end)

    params = AdminEventFilter(
        users=users,
        states=parsed_states,
        categories=categories,
        range_start=start,
        range_end=end,
    )
    events = await EventRepository(db).search_admin(params, offset, limit)
    return await event_mapper.to_full_responses(db, events)


async def search_events_public(
    db: AsyncSession,
    stats: StatsClient,
    *,
    uri: str,
    ip: str,
    text: Optional[str] = None,
    categories: Optional[list[int]] = None,
    paid: Optional[bool] = None,
    range_start: Optional[str] = None,
    range_end: Optional[str] = None,
    only_available: bool = False,
    sort: Optional[str] = None,
    offset: int = 0,
    limit: int = 10,
) -> list[EventShortResponse]:
    """
    Published events for the public catalogue.

    Without a date range only upcoming events are listed. The listing request
    is recorded as a hit and the views of every returned event are refreshed
    and persisted.
    """
    start = parse_datetime(range_start)
    end = parse_datetime(range_end)
    ensure_range(start, end)
    parsed_sort = EventSort.parse(sort) if sort else None
    if start is None and end is None:
        start = now()

    params = PublicEventFilter(
        text=text,
        categories=categories,
        paid=paid,
        range_start=start,
        range_end=end,
        only_available=only_available,
        sort=parsed_sort,
    )
    events = await EventRepository(db).search_public(params, offset, limit)

    await views_service.record_hit(stats, uri, ip)
    events = await views_service.refresh_events_views(db, stats, events)
    if parsed_sort == EventSort.VIEWS:
        # the page was selected on stored counts; order it by the fresh ones
        events.sort(key=lambda e: (-e.views, e.id))
    return await event_mapper.to_short_responses(db, events)


async def get_published_event(
    db: AsyncSession, stats: StatsClient, event_id: int, *, uri: str, ip: str
) -> EventFullResponse:
    """Public event page: 404 unless published; records the view and refreshes the count."""
    event = await get_event_or_not_found(db, event_id)
    if event.state != State.PUBLISHED:
        raise NotFoundError("Event", event_id)

    await views_service.record_hit(stats, uri, ip)
    event = await views_service.refresh_event_views(db, stats, event)
    return await event_mapper.to_full_response(db, event)

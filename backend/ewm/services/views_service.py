"""
View counting through the stats service.

Every public view of an event is recorded as a hit, and the event's stored
`views` is overwritten with the unique-IP hit count of its canonical URI
(/events/{id}) since the start of history. Showing an event therefore writes
to it: refresh_event_views / refresh_events_views are that write, kept
explicit so callers can see it.

The hit and the count query are two independent calls; a hit recorded without
a subsequent count is picked up by the next view.
"""

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from ewm.core.config import get_settings
from ewm.core.dates import now
from ewm.core.exceptions import StatsServiceError
from ewm.core.logging import get_logger
from ewm.core.metrics import record_views_refreshed
from ewm.models import Event
from ewm.repositories import EventRepository
from ewm.services.interfaces.stats import StatsClient
from ewm_stats.schemas import HitCreate

logger = get_logger(__name__)

START_OF_HISTORY = datetime(1970, 1, 1)
EVENTS_PATH = "/events/"


def event_uri(event_id: int) -> str:
    return f"{EVENTS_PATH}{event_id}"


def event_id_from_uri(uri: str) -> int:
    """Trailing numeric id of a canonical event URI.

    Raises:
        StatsServiceError: If the URI does not end in a numeric id.
    """
    tail = uri.rstrip("/").rsplit("/", 1)[-1]
    if not tail.isdigit():
        raise StatsServiceError(f"Failed to parse event id from URI: {uri}")
    return int(tail)


async def record_hit(stats: StatsClient, uri: str, ip: str) -> None:
    hit = HitCreate(app=get_settings().STATS_APP_NAME, uri=uri, ip=ip, timestamp=now())
    await stats.record_hit(hit)


async def fetch_event_views(stats: StatsClient, event_id: int) -> int:
    """Unique-IP views of one event, 0 when the stats service has no record."""
    result = await stats.query_stats(START_OF_HISTORY, now(), event_uri(event_id), unique=True)
    if not result:
        return 0
    return result[0].hits


async def fetch_views(stats: StatsClient, event_ids: list[int]) -> dict[int, int]:
    """Unique-IP views for a batch of events with a single stats query.

    Events the stats service does not mention are absent from the mapping.
    """
    if not event_ids:
        return {}
    result = await stats.query_stats(
        START_OF_HISTORY, now(), [event_uri(event_id) for event_id in event_ids], unique=True
    )
    views: dict[int, int] = {}
    for item in result:
        views.setdefault(event_id_from_uri(item.uri), item.hits)
    return views


async def refresh_event_views(db: AsyncSession, stats: StatsClient, event: Event) -> Event:
    """Refresh and persist the view count of one event."""
    event.views = await fetch_event_views(stats, event.id)
    await EventRepository(db).save(event)
    record_views_refreshed(1)
    return event


async def refresh_events_views(db: AsyncSession, stats: StatsClient, events: list[Event]) -> list[Event]:
    """Refresh and persist the view counts of a page of events."""
    views = await fetch_views(stats, [event.id for event in events])
    missing = [event.id for event in events if event.id not in views]
    if missing:
        logger.debug("views_missing_from_stats", event_ids=missing)
    for event in events:
        event.views = views.get(event.id, 0)
    await EventRepository(db).save_all(events)
    record_views_refreshed(len(events))
    return events

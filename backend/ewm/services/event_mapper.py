"""
Builds event response schemas from ORM rows.

Categories, initiators and locations are fetched with one IN query per
entity type for the whole batch.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from ewm.models import Event
from ewm.repositories import CategoryRepository, LocationRepository, UserRepository
from ewm.schemas.category import CategoryResponse
from ewm.schemas.event import EventFullResponse, EventShortResponse, LocationSchema
from ewm.schemas.user import UserShortResponse


def _short_fields(event: Event, categories: dict, users: dict) -> dict:
    return {
        "id": event.id,
        "title": event.title,
        "annotation": event.annotation,
        "category": CategoryResponse.model_validate(categories[event.category_id]),
        "initiator": UserShortResponse.model_validate(users[event.initiator_id]),
        "event_date": event.event_date,
        "paid": event.paid,
        "confirmed_requests": event.confirmed_requests,
        "views": event.views,
    }


async def to_short_responses(db: AsyncSession, events: list[Event]) -> list[EventShortResponse]:
    categories = await CategoryRepository(db).get_many(e.category_id for e in events)
    users = await UserRepository(db).get_many(e.initiator_id for e in events)
    return [EventShortResponse(**_short_fields(e, categories, users)) for e in events]


async def to_full_responses(db: AsyncSession, events: list[Event]) -> list[EventFullResponse]:
    categories = await CategoryRepository(db).get_many(e.category_id for e in events)
    users = await UserRepository(db).get_many(e.initiator_id for e in events)
    locations = await LocationRepository(db).get_many(e.location_id for e in events)

    responses = []
    for event in events:
        location = locations[event.location_id]
        responses.append(
            EventFullResponse(
                **_short_fields(event, categories, users),
                description=event.description,
                location=LocationSchema(lat=location.lat, lon=location.lon),
                state=event.state,
                created_on=event.created_on,
                published_on=event.published_on,
                participant_limit=event.participant_limit,
                request_moderation=event.request_moderation,
            )
        )
    return responses


async def to_full_response(db: AsyncSession, event: Event) -> EventFullResponse:
    return (await to_full_responses(db, [event]))[0]

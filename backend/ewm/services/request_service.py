"""
Participation request service: submission, cancellation and moderation.

CAPACITY ACCOUNTING
===================

`events.confirmed_requests` is a cache. After every batch that can change
the number of confirmed requests it is recomputed with a COUNT over the
requests table inside the same transaction and stored, never incremented in
place. Capacity checks count confirmed requests afresh rather than reading
the cached column. If a concurrent transaction still slips past, the CHECK
constraint `participant_limit = 0 OR confirmed_requests <= participant_limit`
(or the unique (event, requester) constraint) fails at flush and the
operation ends in a 409.

Moderation is all-or-nothing: every precondition (ownership, limit not yet
reached, all requests known, belonging to the event and PENDING) is checked
before the first status is changed.
"""

from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ewm.core.dates import now
from ewm.core.exceptions import ConflictError, NotFoundError
from ewm.core.logging import get_logger
from ewm.core.metrics import record_moderation, record_participation_request
from ewm.domain.capacity import allocate, moderation_required
from ewm.domain.lifecycle import RequestStatus, State, has_free_slots
from ewm.models import Event, ParticipationRequest
from ewm.repositories import EventRepository, RequestRepository
from ewm.schemas.request import (
    ParticipationRequestResponse,
    RequestStatusUpdate,
    RequestStatusUpdateResult,
)
from ewm.services import cache_service
from ewm.services.lookups import (
    get_event_or_not_found,
    get_request_or_not_found,
    get_user_or_not_found,
)

logger = get_logger(__name__)


def _to_response(request: ParticipationRequest) -> ParticipationRequestResponse:
    return ParticipationRequestResponse.model_validate(request)


@contextmanager
def _conflict_on_constraint(message: str):
    """Re-raise a constraint violation at flush time as a 409."""
    try:
        yield
    except IntegrityError as exc:
        logger.warning("constraint_violation", message=message, error=str(exc.orig))
        raise ConflictError(message) from exc


async def count_confirmed(db: AsyncSession, event_id: int) -> int:
    return await RequestRepository(db).count_by_status(event_id, RequestStatus.CONFIRMED)


async def sync_confirmed_requests(db: AsyncSession, event: Event) -> Event:
    """Recompute the event's confirmed request count from the requests table and store it."""
    event.confirmed_requests = await count_confirmed(db, event.id)
    event = await EventRepository(db).save(event)
    await cache_service.invalidate_compilations()
    return event


async def create_request(db: AsyncSession, user_id: int, event_id: int) -> ParticipationRequestResponse:
    """
    Submit a participation request.

    Confirmed straight away when the event needs no moderation (moderation off
    or no participant limit), PENDING otherwise.
    """
    await get_user_or_not_found(db, user_id)
    event = await get_event_or_not_found(db, event_id)
    requests = RequestRepository(db)

    if event.initiator_id == user_id:
        raise ConflictError(f"User {user_id} cannot request participation in their own event")
    if event.state != State.PUBLISHED:
        raise ConflictError(f"Event {event_id} is not published")
    if await requests.find(event_id, user_id) is not None:
        raise ConflictError(f"User {user_id} has already requested participation in event {event_id}")
    if event.participant_limit > 0:
        confirmed = await count_confirmed(db, event_id)
        if not has_free_slots(event.participant_limit, confirmed):
            raise ConflictError(f"The participant limit of event {event_id} has been reached")

    if moderation_required(event.request_moderation, event.participant_limit):
        status = RequestStatus.PENDING
    else:
        status = RequestStatus.CONFIRMED

    with _conflict_on_constraint(
        f"Participation request of user {user_id} for event {event_id} conflicts with existing data"
    ):
        request = await requests.add(
            ParticipationRequest(
                event_id=event_id,
                requester_id=user_id,
                status=status,
                created=now(),
            )
        )
        if status == RequestStatus.CONFIRMED:
            await sync_confirmed_requests(db, event)

    record_participation_request(status.value)
    logger.info(
        "participation_requested",
        request_id=request.id,
        event_id=event_id,
        requester_id=user_id,
        status=status.value,
    )
    return _to_response(request)


async def list_user_requests(db: AsyncSession, user_id: int) -> list[ParticipationRequestResponse]:
    await get_user_or_not_found(db, user_id)
    requests = await RequestRepository(db).list_by_requester(user_id)
    return [_to_response(r) for r in requests]


async def cancel_request(db: AsyncSession, user_id: int, request_id: int) -> ParticipationRequestResponse:
    """Requester withdraws a pending or confirmed request."""
    await get_user_or_not_found(db, user_id)
    request = await get_request_or_not_found(db, request_id)
    if request.requester_id != user_id:
        raise NotFoundError("Request", request_id)
    if request.status in (RequestStatus.REJECTED, RequestStatus.CANCELED):
        raise ConflictError(f"Request {request_id} is already {request.status.value}")

    was_confirmed = request.status == RequestStatus.CONFIRMED
    request.status = RequestStatus.CANCELED
    await RequestRepository(db).save_all([request])
    if was_confirmed:
        event = await get_event_or_not_found(db, request.event_id)
        await sync_confirmed_requests(db, event)

    logger.info("participation_canceled", request_id=request_id, requester_id=user_id)
    return _to_response(request)


async def list_event_requests(
    db: AsyncSession, user_id: int, event_id: int
) -> list[ParticipationRequestResponse]:
    """Requests for an event, visible to its initiator only."""
    await get_user_or_not_found(db, user_id)
    event = await get_event_or_not_found(db, event_id)
    if event.initiator_id != user_id:
        raise ConflictError(f"User {user_id} is not the initiator of event {event_id}")
    requests = await RequestRepository(db).list_by_event(event_id)
    return [_to_response(r) for r in requests]


async def moderate_requests(
    db: AsyncSession, user_id: int, event_id: int, update: RequestStatusUpdate
) -> RequestStatusUpdateResult:
    """
    Confirm or reject a batch of pending requests for the caller's event.

    Free slots are counted once at the start of the batch. When confirmation
    is asked for, requests are confirmed in the given order until the slots
    run out and the rest of the batch is rejected.
    """
    await get_user_or_not_found(db, user_id)
    event = await get_event_or_not_found(db, event_id)
    if event.initiator_id != user_id:
        raise ConflictError(f"User {user_id} is not the initiator of event {event_id}")

    if not moderation_required(event.request_moderation, event.participant_limit):
        return RequestStatusUpdateResult()

    confirmed = await count_confirmed(db, event_id)
    if confirmed >= event.participant_limit:
        raise ConflictError("The participant limit has been reached")

    request_ids = list(dict.fromkeys(update.request_ids))
    requests = RequestRepository(db)
    loaded = await requests.get_many(request_ids)
    for request_id in request_ids:
        request = loaded.get(request_id)
        if request is None or request.event_id != event_id:
            raise NotFoundError("Request", request_id)
    not_pending = [rid for rid in request_ids if loaded[rid].status != RequestStatus.PENDING]
    if not_pending:
        raise ConflictError(f"Request must have status PENDING, offending ids: {not_pending}")

    allocation = allocate(request_ids, update.status, event.participant_limit, confirmed)
    for request_id in allocation.confirmed:
        loaded[request_id].status = RequestStatus.CONFIRMED
    for request_id in allocation.rejected:
        loaded[request_id].status = RequestStatus.REJECTED

    with _conflict_on_constraint(f"The participant limit of event {event_id} has been reached"):
        await requests.save_all([loaded[rid] for rid in request_ids])
        event = await sync_confirmed_requests(db, event)

    record_moderation(len(allocation.confirmed), len(allocation.rejected))
    logger.info(
        "requests_moderated",
        event_id=event_id,
        target=update.status.value,
        confirmed=len(allocation.confirmed),
        rejected=len(allocation.rejected),
        confirmed_total=event.confirmed_requests,
        participant_limit=event.participant_limit,
    )
    return RequestStatusUpdateResult(
        confirmed_requests=[_to_response(loaded[rid]) for rid in allocation.confirmed],
        rejected_requests=[_to_response(loaded[rid]) for rid in allocation.rejected],
    )

"""Capacity allocation for bulk moderation of participation requests."""

from dataclasses import dataclass, field
from typing import Sequence

from ewm.domain.lifecycle import RequestStatus


@dataclass(frozen=True)
class Allocation:
    """Partition of a moderation batch, both lists in processing order."""

    confirmed: list = field(default_factory=list)
    rejected: list = field(default_factory=list)


def moderation_required(request_moderation: bool, participant_limit: int) -> bool:
    """Requests need explicit moderation only for moderated, capped events.

    Otherwise they are confirmed on submission and a moderation call is a no-op.
    """
    return request_moderation and participant_limit > 0


def allocate(
    request_ids: Sequence[int],
    target: RequestStatus,
    participant_limit: int,
    confirmed_requests: int,
) -> Allocation:
    """Split `request_ids` into confirmed and rejected, in the given order.

    Slots available at the start of the batch are handed out first come first
    served when the target is CONFIRMED. Once they run out, the remaining
    requests of the batch are rejected even though confirmation was asked for.
    A REJECTED target rejects everything.
    """
    if target not in (RequestStatus.CONFIRMED, RequestStatus.REJECTED):
        raise ValueError(f"Moderation target must be CONFIRMED or REJECTED, got {target}")

    available = max(0, participant_limit - confirmed_requests)
    allocation = Allocation()
    for request_id in request_ids:
        if target == RequestStatus.CONFIRMED and available > 0:
            allocation.confirmed.append(request_id)
            available -= 1
        else:
            allocation.rejected.append(request_id)
    return allocation

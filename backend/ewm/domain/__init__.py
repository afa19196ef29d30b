from ewm.domain.capacity import Allocation, allocate, moderation_required
from ewm.domain.lifecycle import (
    ADMIN_ACTIONS,
    USER_ACTIONS,
    EventSort,
    RequestStatus,
    State,
    StateAction,
    ensure_participant_limit,
    has_free_slots,
    next_state,
)

__all__ = [
    "Allocation",
    "allocate",
    "moderation_required",
    "ADMIN_ACTIONS",
    "USER_ACTIONS",
    "EventSort",
    "RequestStatus",
    "State",
    "StateAction",
    "ensure_participant_limit",
    "has_free_slots",
    "next_state",
]

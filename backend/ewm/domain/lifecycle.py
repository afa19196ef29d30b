"""Event and participation request lifecycles.

Pure functions only: no database access, no clock reads.
"""

import enum

from ewm.core.exceptions import ConflictError, ValidationError


class State(str, enum.Enum):
    """Event moderation state."""

    PENDING = "PENDING"
    PUBLISHED = "PUBLISHED"
    CANCELED = "CANCELED"

    @classmethod
    def parse(cls, value: str) -> "State":
        try:
            return cls(value.upper())
        except ValueError:
            raise ValidationError(f"Unknown state: {value}") from None


class StateAction(str, enum.Enum):
    SEND_TO_REVIEW = "SEND_TO_REVIEW"
    CANCEL_REVIEW = "CANCEL_REVIEW"
    PUBLISH_EVENT = "PUBLISH_EVENT"
    REJECT_EVENT = "REJECT_EVENT"


ADMIN_ACTIONS = frozenset({StateAction.PUBLISH_EVENT, StateAction.REJECT_EVENT})
USER_ACTIONS = frozenset({StateAction.SEND_TO_REVIEW, StateAction.CANCEL_REVIEW})


class RequestStatus(str, enum.Enum):
    """Participation request status."""

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    REJECTED = "REJECTED"
    CANCELED = "CANCELED"


class EventSort(str, enum.Enum):
    EVENT_DATE = "EVENT_DATE"
    VIEWS = "VIEWS"

    @classmethod
    def parse(cls, value: str) -> "EventSort":
        try:
            return cls(value.upper())
        except ValueError:
            raise ValidationError(f"Unknown sort: {value}") from None


def next_state(current: State, action: StateAction) -> State:
    """Return the state an event moves to when `action` is applied.

    PUBLISH_EVENT, REJECT_EVENT and CANCEL_REVIEW are only legal from PENDING.
    SEND_TO_REVIEW returns a pending or canceled event to PENDING; a published
    event can never go back to review.

    Raises:
        ConflictError: If the transition is illegal from `current`.
    """
    if action == StateAction.SEND_TO_REVIEW:
        if current == State.PUBLISHED:
            raise ConflictError("A published event cannot be sent to review")
        return State.PENDING

    if current != State.PENDING:
        raise ConflictError(
            f"Cannot apply {action.value} to an event in state {current.value}, "
            f"the event must be PENDING"
        )

    if action == StateAction.PUBLISH_EVENT:
        return State.PUBLISHED
    if action in (StateAction.REJECT_EVENT, StateAction.CANCEL_REVIEW):
        return State.CANCELED

    raise ValueError(f"Unhandled state action: {action}")


def ensure_participant_limit(limit) -> None:
    if limit is not None and limit < 0:
        raise ValidationError("participantLimit must not be negative")


def has_free_slots(participant_limit: int, confirmed_requests: int) -> bool:
    """True when the event accepts another confirmed participant (0 = unlimited)."""
    return participant_limit == 0 or confirmed_requests < participant_limit

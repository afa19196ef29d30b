"""
Tests for the event state machine.
"""

import pytest

from ewm.core.exceptions import ConflictError, ValidationError
from ewm.domain.lifecycle import (
    EventSort,
    State,
    StateAction,
    ensure_participant_limit,
    has_free_slots,
    next_state,
)


def test_publish_pending_event():
    assert next_state(State.PENDING, StateAction.PUBLISH_EVENT) == State.PUBLISHED


def test_reject_and_cancel_review_cancel_the_event():
    assert next_state(State.PENDING, StateAction.REJECT_EVENT) == State.CANCELED
    assert next_state(State.PENDING, StateAction.CANCEL_REVIEW) == State.CANCELED


@pytest.mark.parametrize("current", [State.PENDING, State.CANCELED])
def test_send_to_review_returns_to_pending(current):
    assert next_state(current, StateAction.SEND_TO_REVIEW) == State.PENDING


def test_published_event_cannot_go_back_to_review():
    with pytest.raises(ConflictError):
        next_state(State.PUBLISHED, StateAction.SEND_TO_REVIEW)


@pytest.mark.parametrize(
    "current, action",
    [
        (State.PUBLISHED, StateAction.PUBLISH_EVENT),
        (State.CANCELED, StateAction.PUBLISH_EVENT),
        (State.PUBLISHED, StateAction.REJECT_EVENT),
        (State.CANCELED, StateAction.CANCEL_REVIEW),
    ],
)
def test_actions_require_pending(current, action):
    with pytest.raises(ConflictError) as exc_info:
        next_state(current, action)
    assert exc_info.value.status_code == 409


def test_unknown_state_name_is_a_validation_error():
    assert State.parse("published") == State.PUBLISHED
    with pytest.raises(ValidationError):
        State.parse("ARCHIVED")


def test_unknown_sort_is_a_validation_error():
    assert EventSort.parse("VIEWS") == EventSort.VIEWS
    with pytest.raises(ValidationError):
        EventSort.parse("POPULARITY")


def test_negative_participant_limit_rejected():
    ensure_participant_limit(None)
    ensure_participant_limit(0)
    with pytest.raises(ValidationError):
        ensure_participant_limit(-1)


def test_zero_limit_means_unlimited():
    assert has_free_slots(0, 1000)
    assert has_free_slots(3, 2)
    assert not has_free_slots(3, 3)

"""
Tests for capacity allocation during bulk moderation.
"""

import random

import pytest

from ewm.domain.capacity import allocate, moderation_required
from ewm.domain.lifecycle import RequestStatus


def test_batch_larger_than_free_slots_rejects_the_rest():
    """Limit 3 with 2 confirmed: one of three requests fits, two are rejected."""
    allocation = allocate([11, 12, 13], RequestStatus.CONFIRMED, 3, 2)
    assert allocation.confirmed == [11]
    assert allocation.rejected == [12, 13]


def test_allocation_follows_given_order():
    allocation = allocate([30, 10, 20], RequestStatus.CONFIRMED, 2, 0)
    assert allocation.confirmed == [30, 10]
    assert allocation.rejected == [20]


def test_reject_target_rejects_everything():
    allocation = allocate([1, 2], RequestStatus.REJECTED, 10, 0)
    assert allocation.confirmed == []
    assert allocation.rejected == [1, 2]


def test_full_event_confirms_nothing():
    allocation = allocate([1, 2], RequestStatus.CONFIRMED, 2, 2)
    assert allocation.confirmed == []
    assert allocation.rejected == [1, 2]


@pytest.mark.parametrize("target", [RequestStatus.PENDING, RequestStatus.CANCELED])
def test_invalid_target(target):
    with pytest.raises(ValueError):
        allocate([1], target, 5, 0)


def test_moderation_required_only_for_moderated_capped_events():
    assert moderation_required(True, 5)
    assert not moderation_required(True, 0)
    assert not moderation_required(False, 5)


def test_confirmed_never_exceeds_limit_over_batch_sequences():
    rng = random.Random(42)
    for _ in range(200):
        limit = rng.randint(1, 10)
        confirmed = 0
        next_id = 1
        for _ in range(rng.randint(1, 6)):
            size = rng.randint(1, 5)
            batch = list(range(next_id, next_id + size))
            next_id += size
            target = rng.choice([RequestStatus.CONFIRMED, RequestStatus.REJECTED])
            allocation = allocate(batch, target, limit, confirmed)
            assert sorted(allocation.confirmed + allocation.rejected) == batch
            confirmed += len(allocation.confirmed)
            assert confirmed <= limit

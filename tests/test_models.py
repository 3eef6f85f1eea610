"""Tests for data model classes."""
import dataclasses

import pytest

from flashdeck.models import ItemSchedule, ReviewLogEntry, ReviewState


def test_review_state_defaults():
    s = ReviewState(interval_days=0, ease=2.5, step=0, due_at=1000)
    assert s.last_grade is None
    assert s.is_learning
    assert not s.is_mature


def test_review_state_mature_from_step_three():
    assert ReviewState(interval_days=1, ease=2.5, step=3, due_at=0).is_mature
    assert ReviewState(interval_days=0, ease=2.5, step=2, due_at=0).is_learning


def test_review_state_is_immutable():
    s = ReviewState(interval_days=0, ease=2.5, step=0, due_at=0)
    with pytest.raises(dataclasses.FrozenInstanceError):
        s.step = 1


def test_log_entry_from_review():
    s = ReviewState(interval_days=3, ease=2.7, step=3, due_at=5000, last_grade=5)
    entry = ReviewLogEntry.from_review(item_id=9, reviewed_at=1000, state=s)
    assert entry == ReviewLogEntry(item_id=9, reviewed_at=1000, grade=5, interval_days=3, ease=2.7, step=3)
    with pytest.raises(dataclasses.FrozenInstanceError):
        entry.grade = 1


def test_item_schedule_defaults():
    sched = ItemSchedule(item_id=1, ease=2.5, interval_days=0, step=0, due_at=0)
    assert sched.last_grade is None
    assert sched.total_reviews == 0

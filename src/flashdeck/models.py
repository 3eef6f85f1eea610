"""Data classes for review scheduling."""
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ReviewState:
    interval_days: int
    ease: float
    step: int
    due_at: int
    last_grade: Optional[int] = None

    @property
    def is_mature(self) -> bool:
        return self.step >= 3

    @property
    def is_learning(self) -> bool:
        return not self.is_mature


@dataclass(frozen=True)
class ReviewLogEntry:
    item_id: int
    reviewed_at: int
    grade: int
    interval_days: int
    ease: float
    step: int

    @classmethod
    def from_review(cls, item_id: int, reviewed_at: int, state: ReviewState) -> "ReviewLogEntry":
        return cls(
            item_id=item_id,
            reviewed_at=reviewed_at,
            grade=state.last_grade,
            interval_days=state.interval_days,
            ease=state.ease,
            step=state.step,
        )


@dataclass
class ItemSchedule:
    item_id: int
    ease: float
    interval_days: int
    step: int
    due_at: int
    last_grade: Optional[int] = None
    total_reviews: int = 0
    suspended: bool = False

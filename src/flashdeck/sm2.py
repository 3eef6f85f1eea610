"""SM-2 spaced repetition scheduler."""
import logging
import math
import random
import time
from dataclasses import dataclass, replace
from typing import Optional

from flashdeck.models import ReviewState

logger = logging.getLogger(__name__)

HOUR_MS = 60 * 60 * 1000
DAY_MS = 24 * HOUR_MS

# Steps 0..2 are learning; the item matures once step reaches this value.
MATURE_STEP = 3
PASSING_GRADE = 3


@dataclass(frozen=True)
class SchedulerConfig:
    ease_min: float = 1.30
    ease_max: float = 3.00
    ease_init: float = 2.50
    # ease delta = delta_base - diff * (delta_a + diff * delta_b), diff = 5 - grade
    delta_base: float = 0.10
    delta_a: float = 0.08
    delta_b: float = 0.02
    failure_penalty: float = 0.20
    align_due_at_to_3am: bool = True
    enable_fuzz: bool = True
    fuzz_percent_min: float = 0.05
    fuzz_percent_max: float = 0.15


DEFAULT_CONFIG = SchedulerConfig()


def now_millis() -> int:
    return int(time.time() * 1000)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def clamp_grade(grade: int) -> int:
    return max(0, min(5, int(grade)))


def initial_state(now: int, config: SchedulerConfig = DEFAULT_CONFIG) -> ReviewState:
    """State of an item that has never been graded."""
    return ReviewState(interval_days=0, ease=config.ease_init, step=0, due_at=now)


def apply_grade(state: ReviewState, grade: int, config: SchedulerConfig = DEFAULT_CONFIG) -> ReviewState:
    """Apply one grading event to a review state.

    Args:
        state: Prior state (never mutated)
        grade: Rating 0-5, clamped into range
        config: Ease bounds and delta coefficients

    Returns:
        New ReviewState with updated interval_days, ease, step and last_grade.
        due_at is carried over unchanged; see review() for scheduling.
    """
    g = clamp_grade(grade)
    ease = state.ease if state.ease > 0 else config.ease_init
    step = state.step
    interval = state.interval_days

    if g < PASSING_GRADE:
        # Failure: back to the start of learning
        ease = _clamp(ease - config.failure_penalty, config.ease_min, config.ease_max)
        return replace(state, interval_days=0, ease=ease, step=0, last_grade=g)

    diff = 5 - g
    delta = config.delta_base - diff * (config.delta_a + diff * config.delta_b)
    ease = _clamp(ease + delta, config.ease_min, config.ease_max)

    if step < MATURE_STEP:
        step += 1
        if step >= MATURE_STEP and interval <= 0:
            interval = 1
        return replace(state, interval_days=interval, ease=ease, step=step, last_grade=g)

    if interval <= 0:
        interval = 1
    elif interval == 1:
        interval = 3
    else:
        interval = max(1, _round_half_up(interval * ease))
    return replace(state, interval_days=interval, ease=ease, step=step, last_grade=g)


def next_due_at(
    interval_days: int,
    now: int,
    config: SchedulerConfig = DEFAULT_CONFIG,
    rng: Optional[random.Random] = None,
) -> int:
    """Compute the due timestamp (ms) for an interval counted from now.

    Day alignment uses UTC day boundaries. Jitter is only applied when
    interval_days > 0, drawn from rng (a fresh random.Random if omitted).
    """
    base = now + max(0, interval_days) * DAY_MS

    if config.align_due_at_to_3am:
        base = base - base % DAY_MS + 3 * HOUR_MS

    if config.enable_fuzz and interval_days > 0:
        if rng is None:
            rng = random.Random()
        p = rng.uniform(config.fuzz_percent_min, config.fuzz_percent_max)
        jitter = _round_half_up(interval_days * DAY_MS * p)
        base += jitter if rng.random() < 0.5 else -jitter

    return base


def review(
    prior: Optional[ReviewState],
    grade: int,
    now: int,
    config: Optional[SchedulerConfig] = None,
    rng: Optional[random.Random] = None,
) -> ReviewState:
    """Grade an item and schedule its next review.

    A missing prior state is treated as a new item. The returned state's
    due_at is always derived from its interval_days and now.
    """
    if config is None:
        config = DEFAULT_CONFIG
    if prior is None:
        prior = initial_state(now, config)
    updated = apply_grade(prior, grade, config)
    due_at = next_due_at(updated.interval_days, now, config, rng)
    logger.debug(
        "grade=%s step %s->%s interval %s->%s ease %.2f->%.2f",
        updated.last_grade, prior.step, updated.step,
        prior.interval_days, updated.interval_days, prior.ease, updated.ease,
    )
    return replace(updated, due_at=due_at)

"""Streak-based difficulty controller.

The controller never holds state of its own: ``record_answer`` takes a
``PerformanceState`` and returns the next one, and selection takes its
randomness from an injected ``random.Random`` so the ranking step can be
checked deterministically.
"""
from __future__ import annotations

from dataclasses import replace
from typing import List, Optional, Sequence, TypeVar
import logging
import random

from .types import PerformanceState, CandidateQuestion
from .grades import grade_profile, grade_band, base_difficulty_for_grade, adjacent_bands
from .textutil import clamp, round_half_up
from .config import (
    STEP_UP_STREAK,
    STEP_DOWN_STREAK,
    MODIFIER_MIN,
    MODIFIER_MAX,
    TIME_LIMIT_MIN,
    TIME_LIMIT_MAX,
    TIME_STEP_SEC,
    DIFFICULTY_MIN,
    DIFFICULTY_MAX,
    SCORE_BONUS_PER_STEP,
    SCORE_PENALTY_PER_STEP,
    make_rng,
)

__all__ = [
    "init_state",
    "record_answer",
    "adjusted_time_limit",
    "target_difficulty",
    "rank_questions",
    "select_questions",
    "adjusted_score",
]

Q = TypeVar("Q", bound=CandidateQuestion)

log = logging.getLogger(__name__)


def init_state() -> PerformanceState:
    return PerformanceState()


def record_answer(state: PerformanceState, is_correct: bool, response_time_ms: float) -> PerformanceState:
    """Return the state after one answered item.

    Three correct in a row step the modifier up, two misses step it down.
    The streak that triggered a step is spent.  Steps stop at the modifier
    bounds, and the streak then keeps counting.
    """

    assert response_time_ms >= 0, "response time must be non-negative"
    n = state.items_answered + 1
    avg = (state.average_response_time_ms * (n - 1) + float(response_time_ms)) / n
    modifier = state.difficulty_modifier
    correct_streak = state.correct_streak
    incorrect_streak = state.incorrect_streak

    if is_correct:
        correct_streak += 1
        incorrect_streak = 0
        if correct_streak >= STEP_UP_STREAK and modifier < MODIFIER_MAX:
            modifier += 1
            correct_streak = 0
    else:
        incorrect_streak += 1
        correct_streak = 0
        if incorrect_streak >= STEP_DOWN_STREAK and modifier > MODIFIER_MIN:
            modifier -= 1
            incorrect_streak = 0

    if modifier != state.difficulty_modifier:
        log.info("difficulty_modifier %+d->%+d after %d items", state.difficulty_modifier, modifier, n)

    return replace(
        state,
        correct_streak=correct_streak,
        incorrect_streak=incorrect_streak,
        average_response_time_ms=avg,
        items_answered=n,
        difficulty_modifier=modifier,
    )


def adjusted_time_limit(base_time_limit_sec: Optional[float], grade: str, difficulty_modifier: int) -> int:
    """Per-item time limit in seconds; harder streams get less time."""

    if base_time_limit_sec:
        assert base_time_limit_sec > 0, "time limit must be positive"
        seconds = float(base_time_limit_sec)
    else:
        seconds = float(grade_profile(grade).base_time_limit_sec)
    seconds -= TIME_STEP_SEC * int(difficulty_modifier)
    return int(clamp(round_half_up(seconds), TIME_LIMIT_MIN, TIME_LIMIT_MAX))


def target_difficulty(grade: str, difficulty_modifier: int) -> int:
    return int(clamp(base_difficulty_for_grade(grade) + int(difficulty_modifier), DIFFICULTY_MIN, DIFFICULTY_MAX))


def _item_key(it: object) -> object:
    qid = getattr(it, "id", None)
    return ("id", qid) if qid is not None else ("obj", id(it))


def _unique(items: Sequence[Q]) -> List[Q]:
    """Drop repeats by ``id`` attribute, or by identity for records without one."""

    seen: set[object] = set()
    out: List[Q] = []
    for it in items:
        key = _item_key(it)
        if key in seen:
            continue
        seen.add(key)
        out.append(it)
    return out


def rank_questions(pool: Sequence[Q], grade: str, difficulty_modifier: int, count: int) -> List[Q]:
    """Deterministic candidate ordering before the shuffle.

    Primary-band items come first, sorted by distance from the target
    difficulty.  When the band holds fewer than ``count`` items, the bands
    exactly one index away are appended in pool order.
    """

    assert count >= 0, "count must be non-negative"
    band = grade_band(grade)
    target = target_difficulty(grade, difficulty_modifier)
    items = _unique(pool)
    primary = [q for q in items if q.grade_band == band]
    primary.sort(key=lambda q: abs(int(q.difficulty_level) - target))
    if len(primary) >= count:
        return primary
    neighbours = set(adjacent_bands(band))
    return primary + [q for q in items if q.grade_band in neighbours]


def select_questions(
    pool: Sequence[Q],
    grade: str,
    difficulty_modifier: int,
    count: int,
    rng: Optional[random.Random] = None,
) -> List[Q]:
    """Pick up to ``count`` questions near the target difficulty.

    The result may be shorter than ``count`` when the primary and adjacent
    bands run out; callers handle a short list.
    """

    candidates = rank_questions(pool, grade, difficulty_modifier, count)
    (rng or make_rng()).shuffle(candidates)
    picked = candidates[:count]
    log.debug(
        "select grade=%s band=%s target=%d pool=%d candidates=%d picked=%d",
        grade,
        grade_band(grade),
        target_difficulty(grade, difficulty_modifier),
        len(pool),
        len(candidates),
        len(picked),
    )
    return picked


def adjusted_score(raw_score: float, difficulty_modifier: int) -> float:
    """Normalise a raw 0..100 score for the difficulty the child worked at.

    Harder streams earn a bonus per step; easier streams lose a smaller
    amount per step.
    """

    mod = int(difficulty_modifier)
    bonus = SCORE_BONUS_PER_STEP * mod if mod > 0 else 0
    easy = SCORE_PENALTY_PER_STEP * mod if mod < 0 else 0
    return float(clamp(float(raw_score) + bonus + easy, 0.0, 100.0))

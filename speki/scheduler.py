"""Scheduling: memory strength, stability updates and review classification.

Strength decays exponentially from 1.0 at the moment of review and reaches
0.9 exactly when the elapsed time equals the card's stability:

    strength = exp(ln(0.9) * elapsed / stability)

Every function here is pure; `now` is seconds since the epoch.
"""

import math
import time
from datetime import timedelta

from speki.models import Card, Grade, Review

DEFAULT_INTERVAL = timedelta(days=1)
MIN_REVIEW_GAP = 60
RECALL_THRESHOLD = 0.9

GRADE_FACTORS = {
    Grade.NONE: 0.1,
    Grade.LATE: 0.25,
    Grade.SOME: 2.0,
    Grade.PERFECT: 3.0,
}

PENDING = "pending"
UNFINISHED = "unfinished"
DUE = "due"


def _now(now: float | None) -> float:
    return time.time() if now is None else now


def grade_factor(grade: Grade) -> float:
    return GRADE_FACTORS[grade]


def elapsed_since_review(card: Card, now: float | None = None) -> float | None:
    last = card.last_review()
    if last is None:
        return None
    return _now(now) - last.timestamp


def strength(card: Card, now: float | None = None) -> float | None:
    """Estimated recall probability, or None if never reviewed or no stability."""
    elapsed = elapsed_since_review(card, now)
    stability = card.meta.stability
    if elapsed is None or stability is None:
        return None
    stability_secs = stability.total_seconds()
    if stability_secs <= 0:
        return 0.0
    return math.exp(math.log(RECALL_THRESHOLD) * max(elapsed, 0.0) / stability_secs)


def next_stability(card: Card, grade: Grade, now: float | None = None) -> timedelta:
    elapsed = elapsed_since_review(card, now)
    if elapsed is None:
        interval = DEFAULT_INTERVAL
    else:
        interval = timedelta(seconds=max(elapsed, MIN_REVIEW_GAP))
    return interval * grade_factor(grade)


def record_review(card: Card, grade: Grade, now: float | None = None,
                  time_spent: int = 0) -> Card:
    """Append a review and replace the card's stability. Mutates and returns `card`."""
    now = _now(now)
    card.meta.stability = next_stability(card, grade, now)
    card.history.append(Review(timestamp=int(now), grade=grade, time_spent=int(time_spent)))
    return card


def is_pending(card: Card) -> bool:
    return card.meta.stability is None and not card.meta.suspended and card.meta.finished


def is_unfinished(card: Card) -> bool:
    return not card.meta.finished and not card.meta.suspended


def is_due(card: Card, now: float | None = None) -> bool:
    if not card.meta.finished or card.meta.suspended or card.meta.stability is None:
        return False
    elapsed = elapsed_since_review(card, now)
    if elapsed is None or elapsed <= MIN_REVIEW_GAP:
        return False
    return card.meta.stability.total_seconds() < elapsed


def classify(card: Card, now: float | None = None) -> str | None:
    """One of PENDING, UNFINISHED, DUE, or None when nothing is to be done."""
    if is_unfinished(card):
        return UNFINISHED
    if is_pending(card):
        return PENDING
    if is_due(card, now):
        return DUE
    return None

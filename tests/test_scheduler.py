"""Tests for speki.scheduler."""

import math
import random
from datetime import timedelta

import pytest

from speki import scheduler
from speki.models import Card, Grade, Review

DAY = 86400
T0 = 1_700_000_000


def _reviewed(stability_days, last_ts=T0, **meta):
    card = Card.new("q", "a")
    card.meta.stability = timedelta(days=stability_days)
    card.history = [Review(timestamp=last_ts, grade=Grade.SOME)]
    for k, v in meta.items():
        setattr(card.meta, k, v)
    return card


def test_strength_undefined_without_review():
    assert scheduler.strength(Card.new("q", "a"), T0) is None


def test_strength_undefined_without_stability():
    card = Card.new("q", "a")
    card.history = [Review(timestamp=T0, grade=Grade.SOME)]
    assert scheduler.strength(card, T0 + DAY) is None


@pytest.mark.parametrize("days", [0.01, 1, 3, 42.5, 365])
def test_strength_is_one_at_review_time(days):
    assert scheduler.strength(_reviewed(days), T0) == 1.0


@pytest.mark.parametrize("days", [0.01, 1, 3, 42.5, 365])
def test_strength_is_point_nine_after_stability(days):
    elapsed = days * DAY
    assert scheduler.strength(_reviewed(days), T0 + elapsed) == pytest.approx(0.9)


def test_grade_factor_monotonic():
    grades = [Grade.NONE, Grade.LATE, Grade.SOME, Grade.PERFECT]
    card = _reviewed(2, last_ts=T0)
    results = [scheduler.next_stability(card, g, T0 + 5 * DAY) for g in grades]
    assert results == sorted(results)
    assert len(set(results)) == 4
    assert scheduler.grade_factor(Grade.NONE) < 1 < scheduler.grade_factor(Grade.PERFECT)


def test_first_review_uses_one_day_default():
    card = Card.new("2+2", "4")
    t0 = T0 + DAY
    scheduler.record_review(card, Grade.PERFECT, t0)
    assert card.meta.stability == timedelta(days=3)
    assert card.history == [Review(timestamp=t0, grade=Grade.PERFECT, time_spent=0)]

    at_2d = scheduler.strength(card, t0 + 2 * DAY)
    assert at_2d == pytest.approx(math.exp(math.log(0.9) * 2 / 3))
    assert at_2d == pytest.approx(0.932, abs=1e-3)
    assert not scheduler.is_due(card, t0 + 2 * DAY)

    assert scheduler.strength(card, t0 + 4 * DAY) < 0.9
    assert scheduler.is_due(card, t0 + 4 * DAY)


def test_later_review_uses_elapsed_interval():
    card = _reviewed(1, last_ts=T0)
    scheduler.record_review(card, Grade.SOME, T0 + 4 * DAY, time_spent=7)
    assert card.meta.stability == timedelta(days=8)
    assert card.history[-1].time_spent == 7
    assert len(card.history) == 2


def test_stability_is_replaced_not_accumulated():
    card = _reviewed(30, last_ts=T0)
    scheduler.record_review(card, Grade.NONE, T0 + 10 * DAY)
    assert card.meta.stability == timedelta(days=1)


def test_immediate_rereview_never_zero_stability():
    card = _reviewed(1, last_ts=T0)
    scheduler.record_review(card, Grade.NONE, T0)
    assert card.meta.stability.total_seconds() > 0


def test_cooldown_blocks_due():
    card = _reviewed(0.0001, last_ts=T0)
    assert not scheduler.is_due(card, T0 + 30)
    assert scheduler.is_due(card, T0 + 61)


def test_classification():
    assert scheduler.classify(Card.new("q", "a"), T0) == scheduler.PENDING
    assert scheduler.classify(Card.new("q", "a", finished=False), T0) == scheduler.UNFINISHED
    assert scheduler.classify(_reviewed(1), T0 + 2 * DAY) == scheduler.DUE
    assert scheduler.classify(_reviewed(10), T0 + 2 * DAY) is None


def test_suspended_excluded_everywhere():
    fresh = Card.new("q", "a")
    fresh.meta.suspended = True
    assert scheduler.classify(fresh, T0) is None
    assert scheduler.classify(_reviewed(1, suspended=True), T0 + 5 * DAY) is None
    assert scheduler.classify(_reviewed(1, suspended=True, finished=False), T0) is None


def test_unfinished_is_not_due_even_when_weak():
    card = _reviewed(1, finished=False)
    assert not scheduler.is_due(card, T0 + 10 * DAY)
    assert scheduler.is_unfinished(card)


def test_classes_are_disjoint():
    rng = random.Random(1234)
    now = T0 + 50 * DAY
    for _ in range(500):
        card = Card.new("q", "a")
        card.meta.suspended = rng.random() < 0.3
        card.meta.finished = rng.random() < 0.7
        if rng.random() < 0.6:
            card.meta.stability = timedelta(days=rng.uniform(0.001, 60))
        if rng.random() < 0.7:
            card.history = [Review(timestamp=int(now - rng.uniform(0, 40 * DAY)),
                                   grade=rng.choice(list(Grade)))]
        flags = [scheduler.is_pending(card), scheduler.is_unfinished(card),
                 scheduler.is_due(card, now)]
        assert sum(flags) <= 1

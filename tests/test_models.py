"""Tests for speki.models dataclasses."""

from datetime import timedelta

import pytest

from speki.models import AudioSource, Card, Grade, Meta, Review, Side


def test_card_defaults():
    c = Card.new("2+2", "4")
    assert c.front.text == "2+2"
    assert c.back.text == "4"
    assert c.meta.finished is True
    assert c.meta.suspended is False
    assert c.meta.stability is None
    assert c.meta.tags == []
    assert c.history == []
    assert c.last_review() is None


def test_ids_are_unique():
    assert Card.new("a", "b").id != Card.new("a", "b").id


def test_grade_parse():
    assert Grade.parse("1") is Grade.NONE
    assert Grade.parse("4") is Grade.PERFECT
    assert Grade.parse(" Late ") is Grade.LATE
    with pytest.raises(ValueError):
        Grade.parse("5")


def test_meta_stability_persisted_in_days():
    meta = Meta(id="x", stability=timedelta(days=3))
    d = meta.to_dict()
    assert d["stability"] == 3.0
    assert Meta.from_dict(d).stability == timedelta(days=3)


def test_meta_without_stability_omits_key():
    assert "stability" not in Meta(id="x").to_dict()


def test_meta_defaults_for_missing_keys():
    meta = Meta.from_dict({"id": "abc"})
    assert meta.finished is True
    assert meta.suspended is False
    assert meta.dependencies == []
    assert meta.tags == []


def test_side_audio():
    side = Side(text="hallo", audio=AudioSource(local_name="hallo.mp3", url_backup="http://x/1"))
    d = side.to_dict()
    assert d["audio"] == {"local_name": "hallo.mp3", "url_backup": "http://x/1"}
    assert Side.from_dict(d) == side
    assert "audio" not in Side(text="plain").to_dict()


def test_audio_from_parts():
    assert AudioSource.from_parts(None, "") is None
    assert AudioSource.from_parts("", "http://x") == AudioSource(None, "http://x")


def test_card_dict_roundtrip_keeps_history_order():
    card = Card.new("front", "back", tags=["t1"])
    card.meta.dependencies = ["dep-1"]
    card.meta.stability = timedelta(days=1.5)
    card.history = [
        Review(timestamp=300, grade=Grade.SOME, time_spent=4),
        Review(timestamp=100, grade=Grade.NONE),
        Review(timestamp=200, grade=Grade.PERFECT),
    ]
    assert Card.from_dict(card.to_dict()) == card


def test_review_dict():
    r = Review(timestamp=10, grade=Grade.LATE, time_spent=3)
    assert r.to_dict() == {"timestamp": 10, "grade": "late", "time_spent": 3}
    assert Review.from_dict({"timestamp": 10, "grade": "late"}).time_spent == 0

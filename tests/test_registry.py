"""Tests for the mood registry and its two-step delete protocol."""

from __future__ import annotations

import pytest

from moodgrid.ledger import CalendarLedger
from moodgrid.models import DEFAULT_MOODS, Mood
from moodgrid.registry import Deleted, MoodRegistry, RequiresConfirmation

CALM = Mood("Calm", "😌", "#34d399")


@pytest.fixture()
def reg() -> MoodRegistry:
    return MoodRegistry.default()


# ---- add ----


def test_default_seed_order(reg):
    assert reg.names() == ["Happy", "Sad"]
    assert reg.list() == DEFAULT_MOODS


def test_add_appends_in_order(reg):
    assert reg.add(CALM) is True
    assert reg.names() == ["Happy", "Sad", "Calm"]


def test_add_duplicate_name_is_rejected(reg):
    assert reg.add(Mood("Happy", "🥳", "#a78bfa")) is False
    assert len(reg) == 2
    assert reg.find_by_name("Happy").emoji == "😃"


def test_add_name_match_is_case_sensitive(reg):
    assert reg.add(Mood("happy", "🙂", "#a78bfa")) is True
    assert len(reg) == 3


@pytest.mark.parametrize(
    "mood",
    [Mood("", "😌", "#34d399"), Mood("Calm", "", "#34d399"), Mood("Calm", "😌", "")],
)
def test_add_incomplete_is_rejected(reg, mood):
    assert reg.add(mood) is False
    assert len(reg) == 2


# ---- lookup ----


def test_find_by_name(reg):
    assert reg.find_by_name("Sad") == DEFAULT_MOODS[1]
    assert reg.find_by_name("Missing") is None
    assert reg.find_by_name(None) is None


def test_index_of(reg):
    assert reg.index_of("Sad") == 1
    assert reg.index_of("Missing") is None


# ---- delete ----


def test_delete_unused_needs_no_confirmation(reg):
    ledger = CalendarLedger({"2024-03-05": "Sad"})
    outcome = reg.delete(0, ledger)
    assert outcome == Deleted(index=0, mood=DEFAULT_MOODS[0])
    assert reg.names() == ["Sad"]


def test_delete_in_use_requires_confirmation(reg):
    ledger = CalendarLedger({"2024-03-05": "Happy", "2024-03-06": "Happy"})
    outcome = reg.delete(0, ledger)
    assert isinstance(outcome, RequiresConfirmation)
    assert outcome.mood.name == "Happy"
    assert outcome.uses == 2
    # declining = never calling confirm_delete
    assert reg.names() == ["Happy", "Sad"]


def test_confirm_delete_removes(reg):
    outcome = reg.confirm_delete(1)
    assert outcome.mood.name == "Sad"
    assert reg.names() == ["Happy"]


def test_delete_bad_index_raises(reg):
    with pytest.raises(IndexError):
        reg.delete(5, CalendarLedger())
    with pytest.raises(IndexError):
        reg.confirm_delete(-1)


# ---- persistence records ----


def test_from_records_rejects_duplicates():
    recs = [CALM.to_record(), CALM.to_record()]
    assert MoodRegistry.from_records(recs) is None


def test_records_roundtrip(reg):
    reg.add(CALM)
    assert MoodRegistry.from_records(reg.to_records()) == reg

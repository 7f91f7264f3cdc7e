"""Tests for the calendar ledger."""

from __future__ import annotations

from datetime import date, datetime

import pytest

from moodgrid.ledger import CalendarLedger, date_key
from moodgrid.models import NO_COLOR
from moodgrid.registry import MoodRegistry


@pytest.fixture()
def reg() -> MoodRegistry:
    return MoodRegistry.default()


def test_date_key_normalizes():
    assert date_key(date(2024, 3, 5)) == "2024-03-05"
    assert date_key(datetime(2024, 3, 5, 23, 59)) == "2024-03-05"
    assert date_key(" 2024-03-05 ") == "2024-03-05"


@pytest.mark.parametrize("bad", ["2024-3-5", "20240305", "2024-02-30", "yesterday"])
def test_date_key_rejects_bad_strings(bad):
    with pytest.raises(ValueError):
        date_key(bad)


def test_set_mood_last_write_wins():
    ledger = CalendarLedger()
    for name in ("Happy", "Sad", "Happy", "Sad"):
        ledger.set_mood("2024-03-05", name)
    assert ledger.entries() == {"2024-03-05": "Sad"}


def test_set_mood_without_selection_is_noop():
    ledger = CalendarLedger({"2024-03-05": "Happy"})
    ledger.set_mood("2024-03-05", None)
    ledger.set_mood("2024-03-06", "")
    assert ledger.entries() == {"2024-03-05": "Happy"}


def test_many_dates_same_mood():
    ledger = CalendarLedger()
    ledger.set_mood(date(2024, 3, 5), "Happy")
    ledger.set_mood(date(2024, 3, 6), "Happy")
    assert ledger.dates_for("Happy") == ["2024-03-05", "2024-03-06"]
    assert ledger.references("Happy")
    assert not ledger.references("Sad")


def test_color_for(reg):
    ledger = CalendarLedger({"2024-03-05": "Happy", "2024-03-06": "Sad"})
    assert ledger.color_for("2024-03-05", reg) == "#facc15"
    assert ledger.color_for(date(2024, 3, 6), reg) == "#60a5fa"


def test_color_for_missing_entry(reg):
    assert CalendarLedger().color_for("2024-03-05", reg) == NO_COLOR


def test_color_for_dangling_reference(reg):
    ledger = CalendarLedger({"2024-03-05": "Excited"})
    assert ledger.color_for("2024-03-05", reg) == NO_COLOR
    assert ledger.dangling(reg) == ["2024-03-05"]


def test_entries_is_a_copy():
    ledger = CalendarLedger({"2024-03-05": "Happy"})
    ledger.entries()["2024-03-06"] = "Sad"
    assert len(ledger) == 1


def test_from_records_strict():
    assert CalendarLedger.from_records({"2024-03-05": "Happy"}) == CalendarLedger({"2024-03-05": "Happy"})
    assert CalendarLedger.from_records({"nope": "Happy"}) is None
    assert CalendarLedger.from_records({"2024-03-05": None}) is None
    assert CalendarLedger.from_records(None) is None


def test_salvage_splits_good_and_bad_entries():
    ledger, rejected = CalendarLedger.salvage(
        {"2024-03-05": "Happy", "2024-3-6": "Sad", "nope": "Sad", "2024-03-07": None}
    )
    assert ledger.entries() == {"2024-03-05": "Happy", "2024-03-06": "Sad"}
    assert rejected == {"nope": "Sad", "2024-03-07": None}

"""Tests for timeparse.parse_day and timeparse.parse_month."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from moodgrid.months import YearMonth
from moodgrid.timeparse import parse_day, parse_month


# ---- parse_day ----


def test_none_and_blank_are_today():
    assert parse_day(None) == date.today()
    assert parse_day("  ") == date.today()
    assert parse_day("Today") == date.today()


def test_keywords():
    assert parse_day("yesterday") == date.today() - timedelta(days=1)
    assert parse_day("tomorrow") == date.today() + timedelta(days=1)


def test_relative():
    assert parse_day("3 days ago") == date.today() - timedelta(days=3)
    assert parse_day("1 day ago") == date.today() - timedelta(days=1)
    assert parse_day("2 weeks ago") == date.today() - timedelta(days=14)


def test_iso_and_slashes():
    assert parse_day("2024-03-05") == date(2024, 3, 5)
    assert parse_day("2024/03/05") == date(2024, 3, 5)


def test_bad_day_raises():
    with pytest.raises(ValueError):
        parse_day("the day after the party")
    with pytest.raises(ValueError):
        parse_day("2024-02-30")


# ---- parse_month ----


def test_month_defaults_to_current():
    assert parse_month(None) == YearMonth.current()
    assert parse_month("this month") == YearMonth.current()


def test_month_relative():
    assert parse_month("last month") == YearMonth.current().shift(-1)
    assert parse_month("next month") == YearMonth.current().shift(1)


def test_month_explicit():
    assert parse_month("2024-03") == YearMonth(2024, 3)
    assert parse_month("2024/03") == YearMonth(2024, 3)


def test_bad_month_raises():
    with pytest.raises(ValueError):
        parse_month("march-ish")

"""Shared low-level helpers used by both cli.py and gui.py."""

from __future__ import annotations

from datetime import date, datetime


def _now_local() -> datetime:
    return datetime.now().astimezone()


def _today() -> date:
    return _now_local().date()


def _fmt_day(d: date) -> str:
    # Windows-safe formatting
    try:
        return d.strftime("%a %-d %b %Y")
    except ValueError:
        return d.strftime("%a %d %b %Y").replace(" 0", " ")

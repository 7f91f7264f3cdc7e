from __future__ import annotations

import re
from datetime import date, datetime, timedelta

from ._util import _today
from .months import YearMonth


def parse_day(value: str | None) -> date:
    """
    Parse a flexible day reference into a date (host-local calendar).
    Accepts:
      - None / blank / "today" -> today
      - "yesterday", "tomorrow"
      - relative: "3 days ago", "1 day ago", "2 weeks ago"
      - ISO "2024-03-05", or "2024/03/05"
    Raises ValueError with a hint on anything else.
    """
    today = _today()
    if not value or not value.strip():
        return today

    s = value.strip().lower()

    if s == "today":
        return today
    if s == "yesterday":
        return today - timedelta(days=1)
    if s == "tomorrow":
        return today + timedelta(days=1)

    m = re.fullmatch(r"(\d+)\s*(day|days|week|weeks)\s*ago", s)
    if m:
        n = int(m.group(1))
        if "week" in m.group(2):
            n *= 7
        return today - timedelta(days=n)

    for fmt in ("%Y-%m-%d", "%Y/%m/%d"):
        try:
            return datetime.strptime(s, fmt).date()
        except ValueError:
            continue

    raise ValueError(
        f"Could not parse day {value!r}. Try ISO like '2024-03-05', "
        f"'today', 'yesterday' or '3 days ago'."
    )


def parse_month(value: str | None) -> YearMonth:
    """
    Parse a month reference.
    Accepts:
      - None / blank / "this month" -> current month
      - "last month", "next month"
      - "2024-03", "2024/03"
    """
    current = YearMonth.current()
    if not value or not value.strip():
        return current

    s = value.strip().lower()
    if s in ("this month", "this", "now"):
        return current
    if s in ("last month", "last", "prev"):
        return current.shift(-1)
    if s in ("next month", "next"):
        return current.shift(1)

    try:
        return YearMonth.parse(s.replace("/", "-"))
    except ValueError:
        raise ValueError(
            f"Could not parse month {value!r}. Try '2024-03', 'this month' or 'last month'."
        ) from None

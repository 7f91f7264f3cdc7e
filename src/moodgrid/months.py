from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date

from ._util import _now_local

MIN_YEAR = 1
MAX_YEAR = 9999


@dataclass(frozen=True, order=True)
class YearMonth:
    """A calendar month with no day component; the view cursor of the app."""

    year: int
    month: int

    def __post_init__(self) -> None:
        if not (MIN_YEAR <= self.year <= MAX_YEAR):
            raise ValueError(f"year must be {MIN_YEAR}..{MAX_YEAR}, got {self.year}")
        if not (1 <= self.month <= 12):
            raise ValueError(f"month must be 1..12, got {self.month}")

    @classmethod
    def current(cls) -> YearMonth:
        today = _now_local().date()
        return cls(today.year, today.month)

    @classmethod
    def of(cls, day: date) -> YearMonth:
        return cls(day.year, day.month)

    @classmethod
    def parse(cls, value: str) -> YearMonth:
        s = value.strip()
        parts = s.split("-")
        if len(parts) != 2 or not (parts[0].isdigit() and parts[1].isdigit()) or len(parts[0]) != 4:
            raise ValueError(f"Not a YYYY-MM month: {value!r}")
        return cls(int(parts[0]), int(parts[1]))

    @property
    def key(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    @property
    def label(self) -> str:
        return f"{calendar.month_name[self.month]} {self.year}"

    def shift(self, months: int) -> YearMonth:
        idx = self.year * 12 + (self.month - 1) + months
        # navigation stops at the ends of the calendar module range
        idx = max(MIN_YEAR * 12, min(MAX_YEAR * 12 + 11, idx))
        return YearMonth(idx // 12, idx % 12 + 1)

    def days(self) -> int:
        return calendar.monthrange(self.year, self.month)[1]

    def date(self, day: int) -> date:
        if not (1 <= day <= self.days()):
            raise ValueError(f"{self.label} has no day {day}")
        return date(self.year, self.month, day)

    def first_weekday(self) -> int:
        """Weekday of day 1, Monday=0."""
        return calendar.monthrange(self.year, self.month)[0]

    def contains(self, key: str) -> bool:
        return key.startswith(self.key + "-")

    def __str__(self) -> str:
        return self.key

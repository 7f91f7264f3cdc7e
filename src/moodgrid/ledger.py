from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING, Any, Iterator

from .models import NO_COLOR

if TYPE_CHECKING:
    from .registry import MoodRegistry


def date_key(value: date | str) -> str:
    """
    Normalize a calendar day to its ledger key (ISO YYYY-MM-DD).
    Raises ValueError for strings that are not a valid ISO date.
    """
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    s = str(value).strip()
    # fromisoformat accepts "20240305" on newer Pythons; keys must stay dashed
    if len(s) != 10:
        raise ValueError(f"Not a YYYY-MM-DD date: {value!r}")
    return date.fromisoformat(s).isoformat()


class CalendarLedger:
    """Date -> mood name. One mood per day, last write wins."""

    def __init__(self, entries: dict[str, str] | None = None):
        self._entries: dict[str, str] = {}
        for day, name in (entries or {}).items():
            self._entries[date_key(day)] = name

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CalendarLedger):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        return f"CalendarLedger({self._entries!r})"

    def set_mood(self, day: date | str, mood_name: str | None) -> None:
        if not mood_name:
            return
        self._entries[date_key(day)] = mood_name

    def mood_for(self, day: date | str) -> str | None:
        return self._entries.get(date_key(day))

    def color_for(self, day: date | str, registry: MoodRegistry) -> str:
        mood = registry.find_by_name(self.mood_for(day))
        if mood is None:
            return NO_COLOR
        return mood.color

    def entries(self) -> dict[str, str]:
        return dict(self._entries)

    def dates_for(self, mood_name: str) -> list[str]:
        return [d for d, n in self._entries.items() if n == mood_name]

    def references(self, mood_name: str) -> bool:
        return mood_name in self._entries.values()

    def dangling(self, registry: MoodRegistry) -> list[str]:
        return [d for d, n in self._entries.items() if registry.find_by_name(n) is None]

    # ---- persistence ----

    def to_records(self) -> dict[str, str]:
        return self.entries()

    @classmethod
    def from_records(cls, records: Any) -> CalendarLedger | None:
        """Strict load: None unless every key is an ISO date and every value a string."""
        if not isinstance(records, dict):
            return None
        if not all(isinstance(v, str) for v in records.values()):
            return None
        try:
            return cls(records)
        except ValueError:
            return None

    @classmethod
    def salvage(cls, records: dict[str, Any]) -> tuple[CalendarLedger, dict[str, Any]]:
        """
        Lenient load: keep every entry with an ISO date key and a string mood,
        return the rest separately so the caller can report or back them up.
        """
        ledger = cls()
        rejected: dict[str, Any] = {}
        for day, name in records.items():
            if not isinstance(name, str) or not name:
                rejected[day] = name
                continue
            try:
                key = date_key(day)
            except ValueError:
                try:
                    # hand-edited "2024-3-29"
                    key = datetime.strptime(str(day).strip(), "%Y-%m-%d").date().isoformat()
                except ValueError:
                    rejected[day] = name
                    continue
            ledger._entries[key] = name
        return ledger, rejected

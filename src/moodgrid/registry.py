from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Union

from .ledger import CalendarLedger
from .models import DEFAULT_MOODS, Mood


# -------------------------
# Delete outcomes
# -------------------------

@dataclass(frozen=True)
class RequiresConfirmation:
    """The mood is still referenced by the ledger; nothing was removed."""

    index: int
    mood: Mood
    uses: int


@dataclass(frozen=True)
class Deleted:
    index: int
    mood: Mood


DeleteOutcome = Union[RequiresConfirmation, Deleted]


# -------------------------
# Registry
# -------------------------

class MoodRegistry:
    """
    Ordered, name-unique collection of moods.
    Insertion order is display order (lists, calendar legend, chart).
    """

    def __init__(self, moods: Iterable[Mood] = ()):
        self._moods: list[Mood] = []
        for m in moods:
            self.add(m)

    @classmethod
    def default(cls) -> MoodRegistry:
        return cls(DEFAULT_MOODS)

    def __len__(self) -> int:
        return len(self._moods)

    def __iter__(self) -> Iterator[Mood]:
        return iter(self._moods)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MoodRegistry):
            return NotImplemented
        return self._moods == other._moods

    def __repr__(self) -> str:
        return f"MoodRegistry({self._moods!r})"

    # ---- queries ----

    def list(self) -> tuple[Mood, ...]:
        return tuple(self._moods)

    def names(self) -> list[str]:
        return [m.name for m in self._moods]

    def find_by_name(self, name: str | None) -> Mood | None:
        for m in self._moods:
            if m.name == name:
                return m
        return None

    def index_of(self, name: str) -> int | None:
        for i, m in enumerate(self._moods):
            if m.name == name:
                return i
        return None

    # ---- mutations ----

    def add(self, candidate: Mood) -> bool:
        if not candidate.is_complete():
            return False
        if self.find_by_name(candidate.name) is not None:
            return False
        self._moods.append(candidate)
        return True

    def delete(self, index: int, ledger: CalendarLedger) -> DeleteOutcome:
        """
        First step of the delete protocol.
        - mood unused by the ledger -> removed, returns Deleted
        - mood in use -> registry untouched, returns RequiresConfirmation;
          the caller asks the user and then calls confirm_delete()
        """
        mood = self._at(index)
        uses = len(ledger.dates_for(mood.name))
        if uses:
            return RequiresConfirmation(index=index, mood=mood, uses=uses)
        return self.confirm_delete(index)

    def confirm_delete(self, index: int) -> Deleted:
        mood = self._at(index)
        del self._moods[index]
        return Deleted(index=index, mood=mood)

    def _at(self, index: int) -> Mood:
        # negative indexes would silently address from the end
        if index < 0 or index >= len(self._moods):
            raise IndexError(f"no mood at position {index} (have {len(self._moods)})")
        return self._moods[index]

    # ---- persistence ----

    def to_records(self) -> list[dict[str, str]]:
        return [m.to_record() for m in self._moods]

    @classmethod
    def from_records(cls, records: Any) -> MoodRegistry | None:
        """
        Strict load: returns None if the payload is not a list of complete,
        uniquely named mood records. No partial recovery.
        """
        if not isinstance(records, list):
            return None
        reg = cls()
        for r in records:
            mood = Mood.from_record(r)
            if mood is None or not reg.add(mood):
                return None
        return reg

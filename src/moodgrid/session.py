from __future__ import annotations

import logging
from pathlib import Path

from . import export
from .ledger import CalendarLedger
from .models import PRESET_COLORS, Mood
from .months import YearMonth
from .registry import DeleteOutcome, Deleted, MoodRegistry
from .stats import MoodStat, modal_mood, monthly_counts
from .storage import Store

log = logging.getLogger(__name__)

THEMES = ("light", "dark")


class MoodSession:
    """
    Everything one user works with at a time: the registry, the ledger and
    the transient view state (displayed month, mood selected for painting,
    theme). Mutations never write to disk on their own; call save().
    """

    def __init__(
        self,
        registry: MoodRegistry,
        ledger: CalendarLedger,
        store: Store | None = None,
        month: YearMonth | None = None,
    ):
        self.registry = registry
        self.ledger = ledger
        self.store = store
        self.month = month or YearMonth.current()
        self.selected: str | None = None
        self.theme = THEMES[0]

    @classmethod
    def load(cls, store: Store, month: YearMonth | None = None) -> MoodSession:
        return cls(store.load_registry(), store.load_ledger(), store=store, month=month)

    def save(self) -> None:
        if self.store is None:
            return
        self.store.save(self.registry, self.ledger)

    # -------------------------
    # Mood registry
    # -------------------------

    def select_mood(self, name: str | None) -> None:
        if name is None or self.registry.find_by_name(name) is not None:
            self.selected = name
        else:
            log.debug("Ignoring selection of unknown mood %r", name)

    def add_mood(self, name: str, emoji: str, color: str = PRESET_COLORS[0]) -> bool:
        added = self.registry.add(Mood(name.strip(), emoji.strip(), color.strip()))
        if not added:
            log.debug("Rejected mood %r (incomplete or duplicate)", name)
        return added

    def delete_mood(self, index: int) -> DeleteOutcome:
        outcome = self.registry.delete(index, self.ledger)
        if isinstance(outcome, Deleted):
            self._forget_selection(outcome.mood)
        return outcome

    def confirm_delete(self, index: int) -> Deleted:
        outcome = self.registry.confirm_delete(index)
        self._forget_selection(outcome.mood)
        dangling = len(self.ledger.dates_for(outcome.mood.name))
        if dangling:
            log.info("Deleted mood %r; %d calendar days keep the old name", outcome.mood.name, dangling)
        return outcome

    def _forget_selection(self, mood: Mood) -> None:
        if self.selected == mood.name:
            self.selected = None

    # -------------------------
    # Calendar
    # -------------------------

    def paint_day(self, day: int) -> bool:
        """Assign the selected mood to a day of the displayed month."""
        if not self.selected:
            return False
        target = self.month.date(day)
        self.ledger.set_mood(target, self.selected)
        return True

    def color_for_day(self, day: int) -> str:
        return self.ledger.color_for(self.month.date(day), self.registry)

    def navigate_month(self, step: int) -> YearMonth:
        self.month = self.month.shift(step)
        return self.month

    def toggle_theme(self) -> str:
        self.theme = THEMES[1] if self.theme == THEMES[0] else THEMES[0]
        return self.theme

    # -------------------------
    # Views
    # -------------------------

    def stats(self) -> list[MoodStat]:
        return monthly_counts(self.ledger, self.registry, self.month)

    def modal(self) -> MoodStat | None:
        return modal_mood(self.stats())

    def csv_text(self) -> str:
        return export.csv_text(self.ledger)

    def export_csv(self, out_path: Path) -> int:
        return export.write_csv(out_path, self.ledger)

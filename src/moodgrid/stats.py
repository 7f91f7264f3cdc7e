from __future__ import annotations

from dataclasses import dataclass

from .ledger import CalendarLedger
from .months import YearMonth
from .registry import MoodRegistry


@dataclass(frozen=True)
class MoodStat:
    name: str
    emoji: str
    value: int
    color: str


def monthly_counts(ledger: CalendarLedger, registry: MoodRegistry, month: YearMonth) -> list[MoodStat]:
    """
    Tally the ledger entries of one month per mood name.
    One record per registry mood with a non-zero tally, in registry order.
    Dangling mood names (not in the registry) are dropped.
    """
    tally: dict[str, int] = {}
    for day, name in ledger.entries().items():
        if month.contains(day):
            tally[name] = tally.get(name, 0) + 1

    return [
        MoodStat(name=m.name, emoji=m.emoji, value=tally[m.name], color=m.color)
        for m in registry
        if tally.get(m.name)
    ]


def modal_mood(stats: list[MoodStat]) -> MoodStat | None:
    # strict > keeps the first maximum: ties go to registry order
    best: MoodStat | None = None
    for s in stats:
        if best is None or s.value > best.value:
            best = s
    return best


def share(stats: list[MoodStat]) -> list[tuple[MoodStat, float]]:
    """Each stat with its percentage of the month's counted days."""
    total = sum(s.value for s in stats)
    if not total:
        return []
    return [(s, 100.0 * s.value / total) for s in stats]

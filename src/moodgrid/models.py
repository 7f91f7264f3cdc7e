from __future__ import annotations

from dataclasses import dataclass
from typing import Any

PRESET_COLORS = ["#facc15", "#60a5fa", "#f87171", "#34d399", "#a78bfa"]

# Color reported for days with no entry or a mood that no longer exists.
NO_COLOR = "transparent"


@dataclass(frozen=True)
class Mood:
    name: str
    emoji: str
    color: str

    def is_complete(self) -> bool:
        return bool(self.name) and bool(self.emoji) and bool(self.color)

    def to_record(self) -> dict[str, str]:
        return {"name": self.name, "emoji": self.emoji, "color": self.color}

    @classmethod
    def from_record(cls, record: Any) -> Mood | None:
        """
        Build a Mood from a persisted dict.
        Returns None unless all three fields are non-empty strings.
        """
        if not isinstance(record, dict):
            return None
        fields = [record.get("name"), record.get("emoji"), record.get("color")]
        if not all(isinstance(f, str) and f for f in fields):
            return None
        return cls(*fields)


DEFAULT_MOODS = (
    Mood("Happy", "😃", "#facc15"),
    Mood("Sad", "😢", "#60a5fa"),
)

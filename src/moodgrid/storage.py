from __future__ import annotations

import json
import logging
import os
import time
from pathlib import Path
from typing import Any

from .ledger import CalendarLedger
from .registry import MoodRegistry

log = logging.getLogger(__name__)

MOODS_KEY = "moods"
CALENDAR_KEY = "calendarData"


def _ensure_parent(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def _backup(path: Path, txt: str, tag: str = "") -> Path:
    backup = path.with_suffix(f".{tag}corrupt-{int(time.time())}.json")
    backup.write_text(txt, encoding="utf-8")
    return backup


def load_json(path: Path) -> dict[str, Any]:
    """
    Safe load:
    - creates parent dirs
    - if missing/empty -> writes {}
    - if corrupt or not an object -> backs up raw text then resets to {}
    Always returns a dict.
    """
    path = Path(path)
    _ensure_parent(path)

    if not path.exists():
        save_json(path, {})
        return {}

    txt = path.read_text(encoding="utf-8").strip()
    if not txt:
        save_json(path, {})
        return {}

    try:
        data = json.loads(txt)
    except json.JSONDecodeError:
        backup = _backup(path, txt)
        log.warning("Corrupt data file %s backed up to %s", path, backup)
        save_json(path, {})
        return {}

    if not isinstance(data, dict):
        backup = _backup(path, txt)
        log.warning("Data file %s does not hold a JSON object; backed up to %s", path, backup)
        save_json(path, {})
        return {}
    return data


def save_json(path: Path, data: Any) -> None:
    """
    Atomic-ish save:
    - write to temp file in same directory
    - flush + fsync
    - os.replace to target
    - chmod 0600 best-effort
    """
    path = Path(path)
    _ensure_parent(path)

    tmp = path.with_name(path.name + ".tmp")

    payload = json.dumps(
        data,
        indent=2,
        sort_keys=True,
        ensure_ascii=False,
    ) + "\n"

    with open(tmp, "w", encoding="utf-8") as f:
        f.write(payload)
        f.flush()
        os.fsync(f.fileno())

    os.replace(tmp, path)

    try:
        os.chmod(path, 0o600)
    except OSError:
        pass


class Store:
    """
    Key-value view over one JSON data file.
    The registry and the ledger live under independent keys; a malformed
    value for one key falls back to its default without touching the other,
    and unreadable calendar entries are dropped one by one. Whatever is
    dropped is backed up next to the data file before the next save.
    """

    def __init__(self, data_path: Path):
        self.data_path = Path(data_path)

    def get(self, key: str) -> Any:
        return load_json(self.data_path).get(key)

    def set(self, key: str, value: Any) -> None:
        data = load_json(self.data_path)
        data[key] = value
        save_json(self.data_path, data)

    def _backup_value(self, key: str, raw: Any) -> Path:
        txt = json.dumps(raw, indent=2, ensure_ascii=False) + "\n"
        return _backup(self.data_path, txt, tag=f"{key}.")

    def load_registry(self) -> MoodRegistry:
        raw = self.get(MOODS_KEY)
        reg = MoodRegistry.from_records(raw)
        if reg is None:
            if raw is not None:
                backup = self._backup_value(MOODS_KEY, raw)
                log.warning(
                    "Unusable %r value in %s backed up to %s; using default moods",
                    MOODS_KEY, self.data_path, backup,
                )
            return MoodRegistry.default()
        return reg

    def load_ledger(self) -> CalendarLedger:
        raw = self.get(CALENDAR_KEY)
        if raw is None:
            return CalendarLedger()
        if not isinstance(raw, dict):
            backup = self._backup_value(CALENDAR_KEY, raw)
            log.warning(
                "Unusable %r value in %s backed up to %s; starting with an empty calendar",
                CALENDAR_KEY, self.data_path, backup,
            )
            return CalendarLedger()

        ledger, rejected = CalendarLedger.salvage(raw)
        if rejected:
            backup = self._backup_value(CALENDAR_KEY, raw)
            log.warning(
                "Dropped unreadable %r entries %s from %s; original backed up to %s",
                CALENDAR_KEY, sorted(map(str, rejected)), self.data_path, backup,
            )
        return ledger

    def save_registry(self, registry: MoodRegistry) -> None:
        self.set(MOODS_KEY, registry.to_records())

    def save_ledger(self, ledger: CalendarLedger) -> None:
        self.set(CALENDAR_KEY, ledger.to_records())

    def save(self, registry: MoodRegistry, ledger: CalendarLedger) -> None:
        # one write for both keys
        data = load_json(self.data_path)
        data[MOODS_KEY] = registry.to_records()
        data[CALENDAR_KEY] = ledger.to_records()
        save_json(self.data_path, data)
        log.debug("Saved %d moods and %d days to %s", len(registry), len(ledger), self.data_path)

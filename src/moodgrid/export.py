from __future__ import annotations

import csv
import io
from pathlib import Path

from .ledger import CalendarLedger

CSV_FIELDS = ["Date", "Mood"]
DEFAULT_CSV_NAME = "mood-data.csv"


def _write_rows(f, ledger: CalendarLedger) -> int:
    w = csv.writer(f, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    w.writerow(CSV_FIELDS)
    rows = list(ledger.entries().items())
    w.writerows(rows)
    return len(rows)


def csv_text(ledger: CalendarLedger) -> str:
    """Header plus one Date,Mood row per ledger entry, in ledger order."""
    buf = io.StringIO()
    _write_rows(buf, ledger)
    return buf.getvalue()


def write_csv(out_path: Path, ledger: CalendarLedger) -> int:
    """Write the export file; returns the number of data rows."""
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with out_path.open("w", newline="", encoding="utf-8") as f:
        return _write_rows(f, ledger)

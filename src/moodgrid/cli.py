from __future__ import annotations

import argparse
import logging
import stat
from pathlib import Path

from ._util import _fmt_day
from .export import DEFAULT_CSV_NAME
from .models import PRESET_COLORS
from .months import YearMonth
from .paths import data_path_reason, resolve_data_path
from .registry import RequiresConfirmation
from .safety import assert_safe_data_path
from .session import MoodSession
from .stats import share
from .storage import CALENDAR_KEY, MOODS_KEY, Store, load_json
from .timeparse import parse_day, parse_month

WEEKDAY_HEADER = ["Mo", "Tu", "We", "Th", "Fr", "Sa", "Su"]


# -------------------------
# Helpers
# -------------------------

def _session(args: argparse.Namespace, month: YearMonth | None = None) -> MoodSession:
    return MoodSession.load(Store(args.data_path), month=month)


def _month_arg(value: str | None) -> YearMonth:
    try:
        return parse_month(value)
    except ValueError as e:
        raise SystemExit(str(e)) from None


def _bar(value: int, total: int, width: int = 30) -> str:
    if total <= 0:
        return ""
    n = int(round(width * value / total))
    return "▇" * max(1, n)


def _confirm(prompt: str) -> bool:
    try:
        answer = input(f"{prompt} [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")


def _resolve_mood_index(session: MoodSession, name: str | None, index: int | None) -> int:
    if name is not None:
        idx = session.registry.index_of(name)
        if idx is None:
            raise SystemExit(f"No mood named {name!r}. Known: {', '.join(session.registry.names()) or '(none)'}")
        return idx
    if index is None:
        raise SystemExit("Pass --name or --index to pick the mood to delete.")
    # 1-based on the command line, matching `mood list`
    if index < 1 or index > len(session.registry):
        raise SystemExit(f"--index must be between 1 and {len(session.registry)}")
    return index - 1


# -------------------------
# MOOD commands
# -------------------------

def cmd_mood_list(args: argparse.Namespace) -> None:
    session = _session(args)
    moods = session.registry.list()
    if not moods:
        print("No moods defined yet. Add one with `moodgrid mood add`.")
        return

    print("=== Moods ===")
    for i, m in enumerate(moods, start=1):
        uses = len(session.ledger.dates_for(m.name))
        print(f"{i:>2}. {m.emoji} {m.name}  {m.color}  ({uses} days)")


def cmd_mood_add(args: argparse.Namespace) -> None:
    session = _session(args)
    if not session.add_mood(args.name, args.emoji, args.color):
        if session.registry.find_by_name(args.name.strip()) is not None:
            raise SystemExit(f"A mood named {args.name.strip()!r} already exists.")
        raise SystemExit("--name, --emoji and --color must all be non-empty.")
    session.save()
    print(f"{args.emoji.strip()} Added mood {args.name.strip()!r}")


def cmd_mood_delete(args: argparse.Namespace) -> None:
    session = _session(args)
    idx = _resolve_mood_index(session, args.name, args.index)

    outcome = session.delete_mood(idx)
    if isinstance(outcome, RequiresConfirmation):
        prompt = (
            f"{outcome.mood.emoji} {outcome.mood.name} is used on {outcome.uses} calendar days. "
            "Delete anyway?"
        )
        if not (args.yes or _confirm(prompt)):
            print("Kept mood; nothing changed.")
            return
        outcome = session.confirm_delete(idx)

    session.save()
    print(f"🗑️ Deleted mood {outcome.mood.name!r}")


# -------------------------
# DAY commands
# -------------------------

def cmd_day_set(args: argparse.Namespace) -> None:
    try:
        day = parse_day(args.date)
    except ValueError as e:
        raise SystemExit(str(e)) from None

    session = _session(args, month=YearMonth.of(day))
    mood = session.registry.find_by_name(args.mood)
    if mood is None:
        raise SystemExit(f"No mood named {args.mood!r}. Known: {', '.join(session.registry.names()) or '(none)'}")

    session.select_mood(mood.name)
    session.paint_day(day.day)
    session.save()
    print(f"{mood.emoji} {_fmt_day(day)} → {mood.name}")


def cmd_day_show(args: argparse.Namespace) -> None:
    try:
        day = parse_day(args.date)
    except ValueError as e:
        raise SystemExit(str(e)) from None

    session = _session(args)
    name = session.ledger.mood_for(day)
    if name is None:
        print(f"{_fmt_day(day)}: no mood logged")
        return
    mood = session.registry.find_by_name(name)
    if mood is None:
        print(f"{_fmt_day(day)}: {name} (deleted mood)")
        return
    print(f"{_fmt_day(day)}: {mood.emoji} {mood.name} {mood.color}")


# -------------------------
# Views
# -------------------------

def cmd_calendar(args: argparse.Namespace) -> None:
    session = _session(args, month=_month_arg(args.month))
    month = session.month

    print(f"=== {month.label} ===")
    print(" ".join(f"{d:>3}" for d in WEEKDAY_HEADER))

    cells = ["   "] * month.first_weekday()
    for day in range(1, month.days() + 1):
        name = session.ledger.mood_for(month.date(day))
        mood = session.registry.find_by_name(name)
        if mood is not None:
            cells.append(f" {mood.emoji}")
        else:
            cells.append(f"{day:>3}")

    for start in range(0, len(cells), 7):
        print(" ".join(cells[start:start + 7]))

    legend = [f"{m.emoji} {m.name}" for m in session.registry]
    if legend:
        print("\n" + "  ".join(legend))


def cmd_stats(args: argparse.Namespace) -> None:
    session = _session(args, month=_month_arg(args.month))
    stats = session.stats()

    if not stats:
        print(f"No mood data for {session.month.label} yet.")
        return

    total = sum(s.value for s in stats)
    print(f"=== Mood Distribution ({session.month.label}) ===")
    for s, pct in share(stats):
        print(f"{s.emoji} {s.name:<12} {s.value:>3}  {pct:5.1f}%  {_bar(s.value, total)}")

    top = session.modal()
    if top is not None:
        print(f"\nMost common mood this month: {top.emoji} {top.name}")


def cmd_export(args: argparse.Namespace) -> None:
    session = _session(args)
    out_path = Path(args.csv).expanduser().resolve()
    if out_path.is_dir():
        out_path = out_path / DEFAULT_CSV_NAME
    n = session.export_csv(out_path)

    if n:
        print(f"📄 Exported {n} days → {out_path}")
    else:
        print(f"📄 Exported header-only CSV (calendar is empty) → {out_path}")


# -------------------------
# Core commands
# -------------------------

def cmd_init(args: argparse.Namespace) -> None:
    session = _session(args)
    session.save()
    print(f"✅ Initialized data file: {args.data_path}")


def cmd_where(args: argparse.Namespace) -> None:
    print(args.data_path)
    print(f"↳ using {data_path_reason(args.data_arg, args.profile)}")


def cmd_doctor(args: argparse.Namespace) -> None:
    print("=== moodgrid Doctor ===")

    assert_safe_data_path(args.data_path, args.allow_repo_data_path)
    print("✅ Data path safety guard: OK")

    data = load_json(args.data_path)
    print("✅ JSON readable: OK")

    store = Store(args.data_path)
    for key in (MOODS_KEY, CALENDAR_KEY):
        if key not in data:
            print(f"ℹ️ {key!r} not saved yet (defaults in use)")

    session = MoodSession.load(store)
    print(f"🙂 Moods: {len(session.registry)}")
    print(f"📅 Days logged: {len(session.ledger)}")
    dangling = session.ledger.dangling(session.registry)
    if dangling:
        print(f"⚠️ {len(dangling)} days point at deleted moods (shown uncolored)")

    try:
        mode = args.data_path.stat().st_mode
        perms = stat.S_IMODE(mode)
        print(f"🔐 File permissions: {oct(perms)} (target 0o600)")
    except FileNotFoundError:
        print("⚠️ Data file missing (run `moodgrid init`)")

    print("=== Done ===")


def cmd_gui(args: argparse.Namespace) -> None:
    from .gui import run_gui

    run_gui(args.data_path)


def main(argv=None) -> None:
    p = argparse.ArgumentParser(prog="moodgrid", description="Mood calendar: pick a mood for each day")
    p.add_argument("--data", default=None, help="Path to data JSON (overrides env/default)")
    p.add_argument("--profile", default=None, help="Profile name (e.g. dev/test)")
    p.add_argument("--allow-repo-data-path", action="store_true", help="Override safety guard (not recommended)")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")

    sub = p.add_subparsers(dest="cmd", required=True)
    sub.add_parser("init", help="Initialize data store safely").set_defaults(func=cmd_init)
    sub.add_parser("where", help="Show which data file is active and why").set_defaults(func=cmd_where)
    sub.add_parser("doctor", help="Run safety + health checks").set_defaults(func=cmd_doctor)
    sub.add_parser("gui", help="Open the calendar window").set_defaults(func=cmd_gui)

    # ---- mood ----
    mood = sub.add_parser("mood", help="Define the moods you can pick from")
    mood_sub = mood.add_subparsers(dest="mood_cmd", required=True)

    mood_list = mood_sub.add_parser("list", help="List moods in display order")
    mood_list.set_defaults(func=cmd_mood_list)

    mood_add = mood_sub.add_parser("add", help="Add a mood")
    mood_add.add_argument("--name", required=True)
    mood_add.add_argument("--emoji", required=True)
    mood_add.add_argument("--color", default=PRESET_COLORS[0],
                          help=f"Hex color (presets: {', '.join(PRESET_COLORS)})")
    mood_add.set_defaults(func=cmd_mood_add)

    mood_delete = mood_sub.add_parser("delete", help="Delete a mood (asks first if days use it)")
    which = mood_delete.add_mutually_exclusive_group(required=True)
    which.add_argument("--name", default=None)
    which.add_argument("--index", type=int, default=None, help="Position as shown by `mood list`")
    mood_delete.add_argument("--yes", action="store_true", help="Delete without asking even if in use")
    mood_delete.set_defaults(func=cmd_mood_delete)

    # ---- day ----
    day = sub.add_parser("day", help="Log the mood of a day")
    day_sub = day.add_subparsers(dest="day_cmd", required=True)

    day_set = day_sub.add_parser("set", help="Set (or overwrite) the mood of a day")
    day_set.add_argument("date", help="YYYY-MM-DD, today, yesterday, or '3 days ago'")
    day_set.add_argument("mood", help="Mood name")
    day_set.set_defaults(func=cmd_day_set)

    day_show = day_sub.add_parser("show", help="Show the mood logged for a day")
    day_show.add_argument("date", nargs="?", default=None, help="Defaults to today")
    day_show.set_defaults(func=cmd_day_show)

    # ---- views ----
    cal = sub.add_parser("calendar", help="Month grid with logged moods")
    cal.add_argument("--month", default=None, help="YYYY-MM, 'last month' (default: this month)")
    cal.set_defaults(func=cmd_calendar)

    st = sub.add_parser("stats", help="Mood distribution for a month")
    st.add_argument("--month", default=None, help="YYYY-MM, 'last month' (default: this month)")
    st.set_defaults(func=cmd_stats)

    ex = sub.add_parser("export", help="Export every logged day to CSV (Date,Mood)")
    ex.add_argument("--csv", default=DEFAULT_CSV_NAME, help=f"Output CSV path (default: ./{DEFAULT_CSV_NAME})")
    ex.set_defaults(func=cmd_export)

    args = p.parse_args(argv)
    args.data_arg = args.data
    args.data_path = resolve_data_path(args.data, args.profile)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    assert_safe_data_path(args.data_path, args.allow_repo_data_path)

    args.func(args)

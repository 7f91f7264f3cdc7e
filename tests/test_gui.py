"""Tests for Tk color handling; skipped where no display is available."""

from __future__ import annotations

import pytest

tk = pytest.importorskip("tkinter")

from moodgrid.gui import MoodGridApp, resolve_color  # noqa: E402
from moodgrid.ledger import CalendarLedger  # noqa: E402
from moodgrid.models import Mood  # noqa: E402
from moodgrid.months import YearMonth  # noqa: E402
from moodgrid.registry import MoodRegistry  # noqa: E402
from moodgrid.session import MoodSession  # noqa: E402


@pytest.fixture()
def root():
    try:
        r = tk.Tk()
    except tk.TclError:
        pytest.skip("no display")
    r.withdraw()
    yield r
    r.destroy()


def test_resolve_color_keeps_valid_colors(root):
    assert resolve_color(root, "#facc15", "#ffffff") == "#facc15"
    assert resolve_color(root, "red", "#ffffff") == "red"


def test_resolve_color_falls_back_on_unknown_names(root):
    assert resolve_color(root, "sky blue-ish", "#ffffff") == "#ffffff"
    assert resolve_color(root, "", "#ffffff") == "#ffffff"


def test_app_starts_with_unknown_stored_color():
    reg = MoodRegistry([Mood("Odd", "🌀", "not a color"), Mood("Sad", "😢", "#60a5fa")])
    ledger = CalendarLedger({"2024-03-05": "Odd", "2024-03-06": "Sad"})
    session = MoodSession(reg, ledger, month=YearMonth(2024, 3))
    try:
        app = MoodGridApp(session)
    except tk.TclError as e:
        if "display" in str(e).lower():
            pytest.skip("no display")
        raise
    try:
        app.update_idletasks()
        app._draw_chart()
    finally:
        app.destroy()


def test_add_mood_rejects_unknown_color():
    session = MoodSession(MoodRegistry.default(), CalendarLedger(), month=YearMonth(2024, 3))
    try:
        app = MoodGridApp(session)
    except tk.TclError as e:
        if "display" in str(e).lower():
            pytest.skip("no display")
        raise
    try:
        app.bell = lambda: None
        app.new_name.set("Odd")
        app.new_emoji.set("🌀")
        app.new_color.set("not a color")
        app._add_mood()
        assert session.registry.find_by_name("Odd") is None
        assert app.new_name.get() == "Odd"
    finally:
        app.destroy()

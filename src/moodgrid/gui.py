from __future__ import annotations

import math
import tkinter as tk
from pathlib import Path
from tkinter import filedialog, messagebox, ttk

from .export import DEFAULT_CSV_NAME
from .models import NO_COLOR, PRESET_COLORS
from .paths import resolve_data_path
from .registry import RequiresConfirmation
from .safety import assert_safe_data_path
from .session import MoodSession
from .stats import share
from .storage import Store

WEEKDAYS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


def resolve_color(widget: tk.Misc, color: str, fallback: str) -> str:
    """Return color if Tk can draw it, else fallback. Mood colors are free-form text."""
    try:
        widget.winfo_rgb(color)
    except tk.TclError:
        return fallback
    return color


# -------------------------
# Theme palettes
# -------------------------

THEME_COLORS = {
    "light": {
        "bg": "#ffffff",
        "fg": "#000000",
        "panel": "#f3f4f6",
        "cell": "#ffffff",
        "cell_fg": "#111827",
        "muted": "#666666",
    },
    "dark": {
        "bg": "#111827",
        "fg": "#ffffff",
        "panel": "#1f2937",
        "cell": "#374151",
        "cell_fg": "#f9fafb",
        "muted": "#9ca3af",
    },
}


class MoodGridApp(tk.Tk):
    def __init__(self, session: MoodSession):
        super().__init__()
        self.title("Mood Tracker")
        self.geometry("900x640")
        self.session = session

        self._day_cells: list[tk.Label] = []
        self._chart_redraw_job: str | None = None

        self._build_header()
        self._build_body()
        self._apply_theme()
        self._refresh_all()

    # -------- Crash guard --------

    def report_callback_exception(self, exc, val, tb):  # type: ignore[override]
        import traceback

        traceback.print_exception(exc, val, tb)
        try:
            messagebox.showerror("Crash prevented", f"{exc.__name__}: {val}")
        except tk.TclError:
            pass

    def _safe_cmd(self, fn):
        def wrapped(*args, **kwargs):
            try:
                return fn(*args, **kwargs)
            except Exception as e:
                import traceback

                traceback.print_exc()
                try:
                    messagebox.showerror("Crash prevented", f"{type(e).__name__}: {e}")
                except tk.TclError:
                    pass
                return None

        return wrapped

    def _commit(self) -> None:
        self.session.save()
        self._refresh_all()

    # -------------------------
    # Header
    # -------------------------

    def _build_header(self) -> None:
        self.header = tk.Frame(self, padx=10, pady=10)
        self.header.pack(fill="x")

        self.title_label = tk.Label(self.header, text="Mood Tracker", font=("TkDefaultFont", 16, "bold"))
        self.title_label.pack(side="left")

        path = self.session.store.data_path if self.session.store else ""
        self.path_label = tk.Label(self.header, text=str(path))
        self.path_label.pack(side="left", padx=12)

        self.theme_btn = ttk.Button(self.header, command=self._safe_cmd(self._toggle_theme))
        self.theme_btn.pack(side="right", padx=4)
        ttk.Button(self.header, text="Export CSV…", command=self._safe_cmd(self._export_csv)).pack(
            side="right", padx=4
        )

    # -------------------------
    # Body: moods | calendar + chart
    # -------------------------

    def _build_body(self) -> None:
        self.body = tk.Frame(self, padx=10, pady=6)
        self.body.pack(fill="both", expand=True)

        self.left = tk.Frame(self.body)
        self.left.pack(side="left", fill="y", padx=(0, 10))
        self.right = tk.Frame(self.body)
        self.right.pack(side="right", fill="both", expand=True)

        self._build_mood_panel(self.left)
        self._build_calendar_panel(self.right)
        self._build_chart_panel(self.right)

    def _build_mood_panel(self, parent: tk.Frame) -> None:
        self.mood_title = tk.Label(parent, text="Moods", font=("TkDefaultFont", 12, "bold"))
        self.mood_title.pack(anchor="w", pady=(0, 6))

        self.mood_list = tk.Listbox(parent, height=12, exportselection=False, width=28)
        self.mood_list.pack(fill="y", pady=(0, 6))
        self.mood_list.bind("<<ListboxSelect>>", lambda _e: self._safe_cmd(self._on_select_mood)())

        ttk.Button(parent, text="Delete selected", command=self._safe_cmd(self._delete_selected)).pack(fill="x")

        ttk.Separator(parent).pack(fill="x", pady=10)

        self.new_name = tk.StringVar()
        self.new_emoji = tk.StringVar()
        self.new_color = tk.StringVar(value=PRESET_COLORS[0])

        self.form_labels: list[tk.Label] = []
        for label, var in (("Name", self.new_name), ("Emoji", self.new_emoji)):
            lbl = tk.Label(parent, text=label)
            lbl.pack(anchor="w")
            self.form_labels.append(lbl)
            ttk.Entry(parent, textvariable=var, width=28).pack(anchor="w", pady=(0, 6))

        lbl = tk.Label(parent, text="Color")
        lbl.pack(anchor="w")
        self.form_labels.append(lbl)
        swatches = tk.Frame(parent)
        swatches.pack(anchor="w", pady=(0, 6))
        for c in PRESET_COLORS:
            tk.Button(
                swatches,
                bg=c,
                activebackground=c,
                width=2,
                relief="flat",
                command=lambda c=c: self.new_color.set(c),
            ).pack(side="left", padx=1)
        ttk.Entry(parent, textvariable=self.new_color, width=12).pack(anchor="w", pady=(0, 6))

        ttk.Button(parent, text="Add Mood", command=self._safe_cmd(self._add_mood)).pack(fill="x")

        self.selected_var = tk.StringVar(value="Pick a mood, then click days")
        self.selected_label = tk.Label(parent, textvariable=self.selected_var, wraplength=200, justify="left")
        self.selected_label.pack(anchor="w", pady=(10, 0))

    def _build_calendar_panel(self, parent: tk.Frame) -> None:
        self.cal_frame = tk.Frame(parent, padx=8, pady=8)
        self.cal_frame.pack(fill="x")

        nav = tk.Frame(self.cal_frame)
        nav.pack(fill="x", pady=(0, 6))
        self.cal_nav = nav
        ttk.Button(nav, text="← Previous", command=self._safe_cmd(lambda: self._navigate(-1))).pack(side="left")
        ttk.Button(nav, text="Next →", command=self._safe_cmd(lambda: self._navigate(1))).pack(side="right")
        self.month_var = tk.StringVar()
        self.month_label = tk.Label(nav, textvariable=self.month_var, font=("TkDefaultFont", 12, "bold"))
        self.month_label.pack(side="top")

        self.grid_frame = tk.Frame(self.cal_frame)
        self.grid_frame.pack(fill="x")
        for col in range(7):
            self.grid_frame.columnconfigure(col, weight=1, uniform="day")

    def _build_chart_panel(self, parent: tk.Frame) -> None:
        self.chart_frame = tk.Frame(parent, padx=8, pady=8)
        self.chart_frame.pack(fill="both", expand=True, pady=(10, 0))

        self.chart_title = tk.Label(self.chart_frame, text="Mood Distribution", font=("TkDefaultFont", 12, "bold"))
        self.chart_title.pack(anchor="w")

        self.chart = tk.Canvas(self.chart_frame, height=240, highlightthickness=0)
        self.chart.pack(fill="both", expand=True)
        self.chart.bind("<Configure>", self._schedule_chart_redraw)

        self.modal_var = tk.StringVar()
        self.modal_label = tk.Label(self.chart_frame, textvariable=self.modal_var)
        self.modal_label.pack()

    # -------------------------
    # Actions
    # -------------------------

    def _on_select_mood(self) -> None:
        sel = self.mood_list.curselection()
        if not sel:
            return
        mood = self.session.registry.list()[sel[0]]
        self.session.select_mood(mood.name)
        self.selected_var.set(f"Painting with {mood.emoji} {mood.name}")

    def _add_mood(self) -> None:
        color = self.new_color.get().strip()
        if resolve_color(self, color, "") != color:
            self.bell()
            return
        if not self.session.add_mood(self.new_name.get(), self.new_emoji.get(), color):
            # keep the form filled so the user can fix it
            self.bell()
            return
        self.new_name.set("")
        self.new_emoji.set("")
        self.new_color.set(PRESET_COLORS[0])
        self._commit()

    def _delete_selected(self) -> None:
        sel = self.mood_list.curselection()
        if not sel:
            return
        idx = sel[0]
        outcome = self.session.delete_mood(idx)
        if isinstance(outcome, RequiresConfirmation):
            if not messagebox.askyesno(
                "Mood in use",
                f"{outcome.mood.emoji} {outcome.mood.name} is used on {outcome.uses} days in the calendar. "
                "Delete anyway?",
            ):
                return
            self.session.confirm_delete(idx)
        if self.session.selected is None:
            self.selected_var.set("Pick a mood, then click days")
        self._commit()

    def _paint(self, day: int) -> None:
        if self.session.paint_day(day):
            self._commit()

    def _navigate(self, step: int) -> None:
        self.session.navigate_month(step)
        self._refresh_calendar()
        self._draw_chart()

    def _toggle_theme(self) -> None:
        self.session.toggle_theme()
        self._apply_theme()
        self._refresh_all()

    def _export_csv(self) -> None:
        path = filedialog.asksaveasfilename(
            title="Export mood data",
            defaultextension=".csv",
            initialfile=DEFAULT_CSV_NAME,
            filetypes=[("CSV files", "*.csv"), ("All files", "*.*")],
        )
        if not path:
            return
        try:
            n = self.session.export_csv(Path(path))
        except OSError as e:
            messagebox.showerror("Export failed", str(e))
            return
        messagebox.showinfo("Exported", f"Saved {n} days → {path}")

    # -------------------------
    # Rendering
    # -------------------------

    def _colors(self) -> dict[str, str]:
        return THEME_COLORS[self.session.theme]

    def _apply_theme(self) -> None:
        c = self._colors()
        self.configure(bg=c["bg"])
        for frame in (self.header, self.body, self.left, self.right):
            frame.configure(bg=c["bg"])
        for frame in (self.cal_frame, self.chart_frame):
            frame.configure(bg=c["panel"])
        self.cal_nav.configure(bg=c["panel"])
        self.grid_frame.configure(bg=c["panel"])
        self.chart.configure(bg=c["panel"])

        labels = [self.title_label, self.mood_title, self.selected_label, *self.form_labels]
        for lbl in labels:
            lbl.configure(bg=c["bg"], fg=c["fg"])
        self.path_label.configure(bg=c["bg"], fg=c["muted"])
        for lbl in (self.month_label, self.chart_title, self.modal_label):
            lbl.configure(bg=c["panel"], fg=c["fg"])
        self.mood_list.configure(bg=c["cell"], fg=c["cell_fg"], selectbackground="#6366f1")

        self.theme_btn.configure(text="☀️ Light Mode" if self.session.theme == "dark" else "🌙 Dark Mode")

    def _refresh_all(self) -> None:
        self._refresh_mood_list()
        self._refresh_calendar()
        self._draw_chart()

    def _refresh_mood_list(self) -> None:
        c = self._colors()
        self.mood_list.delete(0, tk.END)
        for i, m in enumerate(self.session.registry):
            self.mood_list.insert(tk.END, f"{m.emoji} {m.name}")
            self.mood_list.itemconfigure(i, foreground=resolve_color(self, m.color, c["cell_fg"]))
            if m.name == self.session.selected:
                self.mood_list.selection_set(i)

    def _refresh_calendar(self) -> None:
        c = self._colors()
        month = self.session.month
        self.month_var.set(month.label)

        for w in self.grid_frame.winfo_children():
            w.destroy()
        self._day_cells = []

        for col, name in enumerate(WEEKDAYS):
            tk.Label(self.grid_frame, text=name, bg=c["panel"], fg=c["muted"]).grid(row=0, column=col)

        offset = month.first_weekday()
        for day in range(1, month.days() + 1):
            pos = offset + day - 1
            color = self.session.color_for_day(day)
            if color == NO_COLOR:
                bg, fg = c["cell"], c["cell_fg"]
            else:
                bg, fg = resolve_color(self, color, c["cell"]), "#ffffff"
            cell = tk.Label(
                self.grid_frame,
                text=str(day),
                bg=bg,
                fg=fg,
                height=2,
                relief="ridge",
                borderwidth=1,
                cursor="hand2",
            )
            cell.grid(row=1 + pos // 7, column=pos % 7, sticky="nsew", padx=1, pady=1)
            cell.bind("<Button-1>", lambda _e, d=day: self._safe_cmd(self._paint)(d))
            self._day_cells.append(cell)

    def _schedule_chart_redraw(self, _evt=None) -> None:
        if self._chart_redraw_job is not None:
            try:
                self.after_cancel(self._chart_redraw_job)
            except tk.TclError:
                pass
        self._chart_redraw_job = self.after(120, self._draw_chart)

    def _draw_chart(self) -> None:
        canvas = self.chart
        canvas.delete("all")
        c = self._colors()

        stats = self.session.stats()
        w = max(1, canvas.winfo_width())
        h = max(1, canvas.winfo_height())

        if not stats:
            canvas.create_text(w // 2, h // 2, text="No mood data for this month yet", fill=c["muted"])
            self.modal_var.set("")
            return

        radius = max(10, min(h, w // 2) // 2 - 12)
        cx, cy = radius + 20, h // 2
        box = (cx - radius, cy - radius, cx + radius, cy + radius)

        start = 90.0
        slices = share(stats)
        for i, (s, pct) in enumerate(slices):
            fill = resolve_color(self, s.color, c["muted"])
            extent = -360.0 * pct / 100.0
            if len(slices) == 1:
                canvas.create_oval(*box, fill=fill, outline=c["panel"])
            else:
                canvas.create_arc(*box, start=start, extent=extent, fill=fill, outline=c["panel"])

            # label at the slice midpoint
            mid = math.radians(start + extent / 2)
            lx = cx + 0.65 * radius * math.cos(mid)
            ly = cy - 0.65 * radius * math.sin(mid)
            canvas.create_text(lx, ly, text=s.emoji)
            start += extent

            # legend, registry order
            ly = 20 + i * 22
            lx = cx + radius + 40
            canvas.create_rectangle(lx, ly - 6, lx + 12, ly + 6, fill=fill, outline="")
            canvas.create_text(
                lx + 20, ly, text=f"{s.emoji} {s.name}: {s.value} ({pct:.0f}%)", anchor="w", fill=c["fg"]
            )

        top = self.session.modal()
        if top is not None:
            self.modal_var.set(f"Most common mood this month: {top.emoji} {top.name}")


# -------------------------
# GUI Entrypoint
# -------------------------


def run_gui(data_path: Path | None = None) -> None:
    if data_path is None:
        data_path = resolve_data_path(None, None)
        assert_safe_data_path(data_path, allow_repo_data_path=False)
    app = MoodGridApp(MoodSession.load(Store(data_path)))
    app.mainloop()


if __name__ == "__main__":
    run_gui()

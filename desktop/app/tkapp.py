"""Tkinter desktop application for the expense tracker."""

from __future__ import annotations

import argparse
import tkinter as tk
from pathlib import Path
from tkinter import messagebox, ttk
from typing import Callable, Iterable, Optional

from common.config import Settings
from common.display import (
    CHART_CAPTION,
    INNER_RADIUS_RATIO,
    TONE_COLORS,
    amount_tone,
    build_segments,
    format_currency,
    polar_arc,
)
from common.exceptions import RecordNotFoundError, ValidationError
from common.logging_setup import configure_logging, get_logger
from common.models import BUSINESS, PERSONAL, ExpenseItem, ViewMode
from common.services import ExpenseStore
from common.storage import JSONStorage
from common.validators import CATEGORY_MAX_LENGTH, NAME_MAX_LENGTH, parse_amount, validate_str


PRIMARY_BG = "#0f172a"
SECONDARY_BG = "#1e293b"
ACCENT_BG = "#1d4ed8"
ACCENT_ACTIVE_BG = "#2563eb"
TEXT_PRIMARY = "#e2e8f0"
TEXT_MUTED = "#94a3b8"

CHART_SIZE = 300

logger = get_logger("desktop")


class AddExpenseDialog(tk.Toplevel):
    """Modal sheet collecting name, type and amount."""

    def __init__(self, master: tk.Misc, on_submit: Callable[[ExpenseItem], None]) -> None:
        super().__init__(master, bg=SECONDARY_BG, padx=16, pady=16)
        self.title("Add Expense")
        self.resizable(False, False)
        self.transient(master)
        self.on_submit = on_submit

        self.name_var = tk.StringVar()
        self.type_var = tk.StringVar(value=PERSONAL)
        self.amount_var = tk.StringVar()

        ttk.Label(self, text="Name", style="FormLabel.TLabel").grid(row=0, column=0, sticky="w")
        name_entry = ttk.Entry(self, textvariable=self.name_var, style="App.TEntry")
        name_entry.grid(row=1, column=0, sticky="ew", pady=(0, 8))

        ttk.Label(self, text="Type", style="FormLabel.TLabel").grid(row=2, column=0, sticky="w")
        ttk.Combobox(
            self,
            textvariable=self.type_var,
            values=[PERSONAL, BUSINESS],
            state="readonly",
            style="App.TCombobox",
        ).grid(row=3, column=0, sticky="ew", pady=(0, 8))

        ttk.Label(self, text="Amount", style="FormLabel.TLabel").grid(row=4, column=0, sticky="w")
        ttk.Entry(self, textvariable=self.amount_var, style="App.TEntry").grid(
            row=5, column=0, sticky="ew", pady=(0, 8)
        )

        ttk.Button(self, text="Save", command=self.submit, style="Primary.TButton").grid(
            row=6, column=0, sticky="e"
        )
        self.columnconfigure(0, weight=1)
        name_entry.focus_set()
        self.grab_set()

    def submit(self) -> None:
        try:
            item = ExpenseItem.create(
                name=validate_str(self.name_var.get(), "name", NAME_MAX_LENGTH),
                category=validate_str(self.type_var.get(), "type", CATEGORY_MAX_LENGTH),
                amount=parse_amount(self.amount_var.get(), "amount"),
            )
        except ValidationError as exc:
            messagebox.showerror("Invalid Expense", str(exc), parent=self)
            return
        self.on_submit(item)
        self.destroy()


class ExpenseTrackerApp(tk.Tk):
    """Main application window."""

    def __init__(self, settings: Settings) -> None:
        super().__init__()
        self.title("Expense Tracker")
        self.geometry("640x820")
        self.minsize(520, 680)
        self.configure(bg=PRIMARY_BG)

        self._configure_styles()

        self.settings = settings
        self.store = ExpenseStore(JSONStorage(settings.data_dir), key=settings.storage_key)
        self.mode = ViewMode.BOTH

        self._build_layout()
        self.refresh_all()

    def _configure_styles(self) -> None:
        style = ttk.Style(self)
        try:
            style.theme_use("clam")
        except tk.TclError:
            pass

        style.configure("TFrame", background=PRIMARY_BG)
        style.configure("TLabel", background=PRIMARY_BG, foreground=TEXT_PRIMARY)
        style.configure("Panel.TFrame", background=SECONDARY_BG, relief="flat")
        style.configure("Header.TFrame", background=PRIMARY_BG)
        style.configure("FormLabel.TLabel", background=SECONDARY_BG, foreground=TEXT_MUTED, font=("Segoe UI", 9))
        style.configure("Header.TLabel", background=PRIMARY_BG, foreground=TEXT_PRIMARY, font=("Segoe UI", 20, "bold"))

        style.configure(
            "App.TEntry",
            fieldbackground=SECONDARY_BG,
            background=SECONDARY_BG,
            foreground=TEXT_PRIMARY,
            insertcolor=TEXT_PRIMARY,
            bordercolor=ACCENT_BG,
        )
        style.configure(
            "App.TCombobox",
            fieldbackground=SECONDARY_BG,
            background=SECONDARY_BG,
            foreground=TEXT_PRIMARY,
            arrowcolor=TEXT_PRIMARY,
        )
        style.map("App.TCombobox", fieldbackground=[("readonly", SECONDARY_BG)])

        style.configure(
            "Primary.TButton",
            background=ACCENT_BG,
            foreground=TEXT_PRIMARY,
            bordercolor=ACCENT_BG,
            padding=(18, 6),
        )
        style.map("Primary.TButton", background=[("active", ACCENT_ACTIVE_BG)])

        style.configure(
            "Secondary.TButton",
            background=SECONDARY_BG,
            foreground=TEXT_PRIMARY,
            bordercolor=SECONDARY_BG,
            padding=(14, 6),
        )
        style.map("Secondary.TButton", background=[("active", ACCENT_BG)])

        style.configure(
            "App.Treeview",
            background=SECONDARY_BG,
            fieldbackground=SECONDARY_BG,
            foreground=TEXT_PRIMARY,
            bordercolor=SECONDARY_BG,
            rowheight=36,
        )
        style.configure("App.Treeview.Heading", background=SECONDARY_BG, foreground=TEXT_MUTED, relief="flat")
        style.map("App.Treeview", background=[("selected", ACCENT_BG)], foreground=[("selected", TEXT_PRIMARY)])

    def _build_layout(self) -> None:
        self.columnconfigure(0, weight=1)
        self.rowconfigure(3, weight=1)

        header = ttk.Frame(self, padding=20, style="Header.TFrame")
        header.grid(row=0, column=0, sticky="ew")
        header.columnconfigure(0, weight=1)
        ttk.Label(header, text="Expense Tracker", style="Header.TLabel").grid(row=0, column=0, sticky="w")
        ttk.Button(
            header, text="+ Add Expense", command=self.open_add_dialog, style="Primary.TButton"
        ).grid(row=0, column=1, sticky="e")

        modes = ttk.Frame(self, padding=(20, 0), style="Header.TFrame")
        modes.grid(row=1, column=0)
        for column, mode in enumerate((ViewMode.PERSONAL, ViewMode.BUSINESS, ViewMode.BOTH)):
            ttk.Button(
                modes, text=mode.title, command=lambda m=mode: self.set_mode(m), style="Primary.TButton"
            ).grid(row=0, column=column, padx=10)

        self.canvas = tk.Canvas(
            self, width=CHART_SIZE, height=CHART_SIZE, bg=PRIMARY_BG, highlightthickness=0
        )
        self.canvas.grid(row=2, column=0, pady=16)

        table_frame = ttk.Frame(self, style="Panel.TFrame", padding=8)
        table_frame.grid(row=3, column=0, sticky="nsew", padx=20)
        table_frame.columnconfigure(0, weight=1)
        table_frame.rowconfigure(0, weight=1)

        columns = ("name", "type", "amount")
        self.tree = ttk.Treeview(
            table_frame, columns=columns, show="headings", height=8, style="App.Treeview"
        )
        for key, label in (("name", "Name"), ("type", "Type"), ("amount", "Amount")):
            self.tree.heading(key, text=label, anchor="w")
            self.tree.column(key, width=180 if key == "name" else 140, anchor="w")
        for tone, color in TONE_COLORS.items():
            self.tree.tag_configure(tone, foreground=color)

        vsb = ttk.Scrollbar(table_frame, orient="vertical", command=self.tree.yview)
        self.tree.configure(yscroll=vsb.set)
        self.tree.grid(row=0, column=0, sticky="nsew")
        vsb.grid(row=0, column=1, sticky="ns")

        ttk.Button(
            table_frame, text="Delete Selected", command=self.delete_selected, style="Secondary.TButton"
        ).grid(row=1, column=0, columnspan=2, sticky="e", pady=8)

    def set_mode(self, mode: ViewMode) -> None:
        self.mode = mode
        self.refresh_all()

    def open_add_dialog(self) -> None:
        AddExpenseDialog(self, self.add_expense)

    def add_expense(self, item: ExpenseItem) -> None:
        self.store.add(item)
        self.refresh_all()

    def delete_selected(self) -> None:
        # Row iids are positions in the list shown under the current mode.
        positions = [int(iid) for iid in self.tree.selection()]
        if not positions:
            messagebox.showinfo("No selection", "Please select an expense to delete.", parent=self)
            return
        try:
            self.store.remove(positions, self.mode)
        except RecordNotFoundError as exc:
            messagebox.showwarning("Not Found", str(exc), parent=self)
        self.refresh_all()

    def refresh_all(self) -> None:
        self.populate()
        self.draw_chart()

    def populate(self) -> None:
        self.tree.delete(*self.tree.get_children())
        for position, item in enumerate(self.store.view(self.mode)):
            values = (item.name, item.category, format_currency(item.amount, self.settings.currency))
            self.tree.insert("", "end", iid=str(position), values=values, tags=(amount_tone(item.amount),))

    def draw_chart(self) -> None:
        self.canvas.delete("all")
        pad = 10
        outer = (pad, pad, CHART_SIZE - pad, CHART_SIZE - pad)
        for segment in build_segments(self.store.chart_items(self.mode), self.mode):
            if segment.extent <= 0:
                continue
            start, extent = polar_arc(segment.start, segment.extent)
            if segment.extent >= 360:
                self.canvas.create_oval(*outer, fill=segment.color, outline="")
            else:
                self.canvas.create_arc(
                    *outer, start=start, extent=extent, fill=segment.color, outline="", style=tk.PIESLICE
                )

        # Punch out the inner ring to leave a donut.
        radius = (CHART_SIZE - 2 * pad) / 2
        inner = radius * INNER_RADIUS_RATIO
        center = CHART_SIZE / 2
        self.canvas.create_oval(
            center - inner, center - inner, center + inner, center + inner, fill=PRIMARY_BG, outline=""
        )
        self.canvas.create_text(
            center, center - 10, text=self.store.scope_label(self.mode), fill=TEXT_PRIMARY,
            font=("Segoe UI", 20, "bold"),
        )
        self.canvas.create_text(
            center, center + 18, text=CHART_CAPTION, fill=TEXT_MUTED, font=("Segoe UI", 9)
        )


def main(argv: Optional[Iterable[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Tkinter desktop app for the expense tracker")
    parser.add_argument(
        "--data-dir",
        default=None,
        type=Path,
        help="Directory containing JSON storage files (default: $EXPENSE_TRACKER_DATA_DIR or ./data)",
    )
    args = parser.parse_args(list(argv) if argv is not None else None)

    settings = Settings.from_env().with_data_dir(args.data_dir)
    configure_logging(settings.log_level)
    logger.info("Opening expense data in %s", settings.data_dir)
    app = ExpenseTrackerApp(settings)
    app.mainloop()


if __name__ == "__main__":  # pragma: no cover - manual execution
    main()

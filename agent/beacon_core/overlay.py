"""
SummaryOverlay — small always-on-top Tk panel showing the latest summary.

Created and managed on the Tkinter main thread. It never touches the
scheduler's state beyond latest_summary(), polled via root.after().
"""

import tkinter as tk

from .constants import OVERLAY_TITLE, OVERLAY_MAX_ROWS, OVERLAY_REFRESH_MS, THEME
from .config import log


def render_lines(summary, max_rows=OVERLAY_MAX_ROWS):
    """
    Overlay body as (left, right) rows, title first.
    Empty summary → a single "No data yet" row.
    """
    lines = [(OVERLAY_TITLE, "")]
    if not summary:
        lines.append(("No data yet", ""))
        return lines

    lines.append(("Top worlds", ""))
    for entry in summary[:max_rows]:
        lines.append((f"W{entry.location_id}", str(entry.count)))
    return lines


class SummaryOverlay:
    """
    Lifecycle (all on main thread):
      run()       → creates Tk root, starts refresh loop, blocks in mainloop
      _refresh()  → re-renders rows from scheduler.latest_summary()
      stop()      → quits mainloop
    """

    def __init__(self, scheduler, config_store):
        self._scheduler = scheduler
        self._config_store = config_store
        self._root = None
        self._body = None
        self._last_lines = None

    def run(self):
        self._root = tk.Tk()
        self._root.title(OVERLAY_TITLE)
        self._root.configure(bg=THEME["bg_card"])
        self._root.attributes("-topmost", True)
        self._root.resizable(False, False)
        self._root.geometry("+20+20")

        self._body = tk.Frame(self._root, bg=THEME["bg_card"], padx=12, pady=8)
        self._body.pack(fill="both", expand=True)

        self._root.protocol("WM_DELETE_WINDOW", self.stop)
        self._root.after(0, self._refresh)
        log.info("Overlay shown")
        try:
            self._root.mainloop()
        finally:
            try:
                self._root.destroy()
            except tk.TclError:
                pass

    def stop(self):
        if self._root is not None:
            self._root.quit()

    def _refresh(self):
        try:
            self._redraw()
        except tk.TclError as e:
            log.error("Overlay redraw error: %s", e)
        self._root.after(OVERLAY_REFRESH_MS, self._refresh)

    def _redraw(self):
        if not self._config_store.config.showOverlay:
            lines = []
        else:
            lines = render_lines(self._scheduler.latest_summary())
        if lines == self._last_lines:
            return
        self._last_lines = lines

        for child in self._body.winfo_children():
            child.destroy()
        if not lines:
            self._root.withdraw()
            return
        self._root.deiconify()

        for row, (left, right) in enumerate(lines):
            is_title = row == 0
            tk.Label(
                self._body, text=left,
                font=("Segoe UI", 11, "bold") if is_title else ("Segoe UI", 10),
                fg=THEME["text_primary"] if is_title else THEME["text_muted"],
                bg=THEME["bg_card"], anchor="w",
            ).grid(row=row, column=0, sticky="w")
            if right:
                tk.Label(
                    self._body, text=right, font=("Segoe UI", 10, "bold"),
                    fg=THEME["success"], bg=THEME["bg_card"], anchor="e",
                ).grid(row=row, column=1, sticky="e", padx=(16, 0))

"""
tkinter collaborators: the archive file dialog and the end-of-run log window.
"""

from __future__ import annotations

import tkinter as tk
from tkinter import filedialog

from loguru import logger
from PIL import ImageTk

from .badge import make_status_badge
from .installer import LogEntry, LogLevel
from .sinks import ConsoleLogSink


# Dark theme colours
C_BG_DARK   = "#0d1117"
C_BG_MID    = "#161b22"
C_BG_LIGHT  = "#21262d"
C_FG_MAIN   = "#c9d1d9"
C_FG_DIM    = "#8b949e"
C_ACCENT    = "#58a6ff"
C_GREEN     = "#3fb950"
C_RED       = "#f85149"
C_YELLOW    = "#d29922"

WINDOW_TITLE = "Prism Instance Installer"


def _centre(win: tk.Misc):
    win.update_idletasks()
    w = win.winfo_reqwidth()
    h = win.winfo_reqheight()
    sw, sh = win.winfo_screenwidth(), win.winfo_screenheight()
    win.geometry(f"{w}x{h}+{(sw - w) // 2}+{(sh - h) // 2}")


# ---------------------------------------------------------------------------
# File picker
# ---------------------------------------------------------------------------

class TkFilePicker:

    def pick_file(self, pattern: str, title: str) -> str | None:
        try:
            root = tk.Tk()
        except tk.TclError as exc:
            logger.warning("No display for the file dialog ({}).", exc)
            return None
        root.withdraw()
        try:
            chosen = filedialog.askopenfilename(
                parent=root,
                title=title,
                filetypes=[("Instance archives", pattern)],
            )
        finally:
            root.destroy()
        # cancel gives "" or () depending on the platform
        return chosen or None


# ---------------------------------------------------------------------------
# Log window
# ---------------------------------------------------------------------------

class LogWindow:
    """
    Collects the run log and shows it in a modal window when the run ends.

    The window shows a success or failure badge, every line coloured by
    level, and a Close button. Without a display the log goes to stdout.
    """

    _LEVEL_COLOURS = {
        LogLevel.INFO:  C_FG_MAIN,
        LogLevel.WARN:  C_YELLOW,
        LogLevel.ERROR: C_RED,
    }

    def __init__(self):
        self.entries: list[LogEntry] = []

    def append(self, level: LogLevel, message: str) -> None:
        self.entries.append(LogEntry(level, message))

    def flush_and_present(self) -> None:
        try:
            root = tk.Tk()
        except tk.TclError as exc:
            logger.warning("No display for the log window ({}); printing instead.", exc)
            console = ConsoleLogSink()
            for entry in self.entries:
                console.append(entry.level, entry.message)
            console.flush_and_present()
            return

        self._build(root)
        _centre(root)
        root.mainloop()

    def _build(self, root: tk.Tk):
        ok = not any(e.level is LogLevel.ERROR for e in self.entries)

        root.title(WINDOW_TITLE)
        root.configure(bg=C_BG_DARK)
        root.minsize(560, 360)

        # ── Header ─────────────────────────────────────────────────────
        hdr = tk.Frame(root, bg=C_BG_DARK)
        hdr.pack(fill=tk.X, padx=12, pady=(12, 6))

        self._badge = ImageTk.PhotoImage(make_status_badge(ok), master=root)  # keep a reference
        tk.Label(hdr, image=self._badge, bg=C_BG_DARK).pack(side=tk.LEFT, padx=(0, 10))

        titles = tk.Frame(hdr, bg=C_BG_DARK)
        titles.pack(side=tk.LEFT, fill=tk.X, expand=True)
        tk.Label(titles, text="INSTANCE INSTALL",
                 bg=C_BG_DARK, fg=C_ACCENT,
                 font=("Helvetica", 12, "bold")).pack(anchor=tk.W)
        tk.Label(titles,
                 text="Completed successfully" if ok else "Failed  —  see the log below",
                 bg=C_BG_DARK, fg=C_GREEN if ok else C_RED,
                 font=("Helvetica", 9)).pack(anchor=tk.W)

        # ── Log text ───────────────────────────────────────────────────
        wrap = tk.Frame(root, bg=C_BG_MID, bd=0)
        wrap.pack(fill=tk.BOTH, expand=True, padx=12, pady=4)

        sb = tk.Scrollbar(wrap, bg=C_BG_MID, troughcolor=C_BG_DARK,
                          activebackground=C_ACCENT, relief=tk.FLAT, width=10)
        text = tk.Text(
            wrap,
            bg=C_BG_MID, fg=C_FG_MAIN,
            font=("Courier", 9),
            width=90, height=20,
            wrap=tk.WORD,
            yscrollcommand=sb.set,
            relief=tk.FLAT, borderwidth=0,
            highlightthickness=0,
        )
        sb.config(command=text.yview)
        sb.pack(side=tk.RIGHT, fill=tk.Y)
        text.pack(side=tk.LEFT, fill=tk.BOTH, expand=True, padx=3, pady=3)

        for level, colour in self._LEVEL_COLOURS.items():
            text.tag_configure(level.value, foreground=colour)
        for entry in self.entries:
            text.insert(tk.END, f"[{entry.level.value.upper():5}] {entry.message}\n", entry.level.value)
        text.config(state=tk.DISABLED)
        text.see(tk.END)

        # ── Close ──────────────────────────────────────────────────────
        tk.Button(root, text="Close",
                  command=root.destroy,
                  bg=C_BG_MID, fg=C_FG_MAIN,
                  activebackground=C_BG_LIGHT, activeforeground=C_FG_MAIN,
                  font=("Helvetica", 9), relief=tk.FLAT,
                  padx=14, pady=4, cursor="hand2").pack(anchor=tk.E, padx=12, pady=(4, 12))

        root.bind("<Escape>", lambda _e: root.destroy())

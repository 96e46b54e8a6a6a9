from __future__ import annotations

import logging
from typing import Optional

from tkinter import END, Button, Frame, Label, Listbox, Scrollbar, StringVar, Tk, filedialog, messagebox

from .config import EXPORT_FILENAME, Settings
from .errors import ExportError
from .excel_io import export_summary
from .session import ExtractionSession

logger = logging.getLogger(__name__)

TITLE = "PDF → Excel (OCR rows)"


def run_gui(settings: Optional[Settings] = None) -> None:
    settings = settings or Settings.from_env()

    root = Tk()
    root.title(TITLE)

    def _notify(level: str, message: str) -> None:
        if level == "warning":
            messagebox.showwarning(TITLE, message)
        elif level == "error":
            messagebox.showerror("Error", message)
        else:
            messagebox.showinfo(TITLE, message)

    session = ExtractionSession(settings, notify=_notify)
    status = StringVar(value="Idle.")

    # -------------------- Layout --------------------
    bar = Frame(root)
    bar.pack(padx=10, pady=(10, 6))
    btn_pick = Button(bar, text="Choose PDF", width=16)
    btn_pick.pack(side="left", padx=4)
    btn_submit = Button(bar, text="Submit", width=16)
    btn_submit.pack(side="left", padx=4)
    btn_export = Button(bar, text="Export to Excel", width=16)
    btn_export.pack(side="left", padx=4)

    Label(root, textvariable=status).pack(pady=(2, 6))
    Label(root, text="Extracted Text:", font=("TkDefaultFont", 11, "bold")).pack(anchor="w", padx=10)

    box = Frame(root)
    box.pack(fill="both", expand=True, padx=10, pady=(0, 10))
    scroll = Scrollbar(box)
    scroll.pack(side="right", fill="y")
    lines_view = Listbox(box, width=80, height=20, yscrollcommand=scroll.set)
    lines_view.pack(side="left", fill="both", expand=True)
    scroll.config(command=lines_view.yview)

    # -------------------- Handlers --------------------
    def choose_file():
        path = filedialog.askopenfilename(title="Choose a PDF", filetypes=[("PDF", "*.pdf")])
        if path:
            session.select(path)
            status.set(f"Selected: {session.current_document.name}")

    def refresh_lines():
        lines_view.delete(0, END)
        for line in session.display_lines():
            lines_view.insert(END, line)

    def submit():
        status.set("Extracting…")
        root.update_idletasks()
        if session.submit():
            refresh_lines()
            status.set(f"{len(session.rows)} row(s) extracted")
        else:
            status.set("Idle." if session.last_error is None else "Error")

    def export():
        try:
            saved = session.export_rows()
        except ExportError as e:
            logger.exception("Export failed")
            messagebox.showerror("Error", str(e))
            return
        status.set(f"Saved {saved}")
        messagebox.showinfo(TITLE, export_summary(settings.output_dir / EXPORT_FILENAME, saved))

    btn_pick.config(command=choose_file)
    btn_submit.config(command=submit)
    btn_export.config(command=export)

    root.mainloop()

from __future__ import annotations

import logging
import os
import shutil
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

import pandas as pd

from .config import EXPORT_COLUMNS, SHEET_NAME
from .errors import ExportError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def records_from_display_lines(lines: Iterable[str]) -> List[Dict[str, str]]:
    """Turn displayed ``"name, address, in, out"`` strings back into records.

    Splits on bare commas, so every field after the first keeps the space
    that follows the comma in the display string.
    """
    records = []
    for line in lines:
        parts = str(line).split(",")
        records.append({
            key: (parts[i] if i < len(parts) else "")
            for i, key in enumerate(EXPORT_COLUMNS)
        })
    return records


def autosize_sheet(writer: pd.ExcelWriter, df: pd.DataFrame, sheet_name: str) -> None:
    ws = writer.sheets[sheet_name]
    widths = []
    for col in df.columns:
        series = df[col].astype(str)
        max_len = max([len(str(col))] + series.map(len).tolist())
        widths.append(min(60, max(10, max_len + 2)))

    if hasattr(ws, "set_column"):  # xlsxwriter
        for i, w in enumerate(widths):
            ws.set_column(i, i, w)
        return

    from openpyxl.utils import get_column_letter
    for i, w in enumerate(widths, start=1):
        ws.column_dimensions[get_column_letter(i)].width = w


def _ensure_parent_dir(path_str: PathLike) -> None:
    Path(path_str).expanduser().parent.mkdir(parents=True, exist_ok=True)


def export_summary(target: PathLike, saved: PathLike) -> str:
    """User-facing note for a finished export, naming the file actually written."""
    target, saved = Path(target), Path(saved)
    if saved == target:
        return f"Saved:\n{saved}"
    return f"{target.name} was locked, so the workbook was saved as:\n{saved}"


def _default_engine() -> str:
    try:
        import xlsxwriter  # noqa: F401
        return "xlsxwriter"
    except ImportError:
        return "openpyxl"


def _writer_kwargs(engine: str) -> dict:
    if engine == "xlsxwriter":
        # OCR text like "=====" must stay a literal string
        return {"engine_kwargs": {"options": {"strings_to_formulas": False, "strings_to_urls": False}}}
    return {}


def _force_text_cells(ws) -> None:
    """openpyxl turns any "=..." string into a formula; mark them as text again."""
    for row in ws.iter_rows():
        for cell in row:
            if isinstance(cell.value, str):
                cell.data_type = "s"


def write_records(
    records: List[Dict[str, str]],
    out_path: PathLike,
    sheet_name: str = SHEET_NAME,
    engine: Optional[str] = None,
) -> Path:
    """Write ``records`` to one sheet of ``out_path`` atomically.

    Every value is written as text. The header row is always
    ``EXPORT_COLUMNS``, even with no records. If the target is locked by
    another program the workbook lands next to it under a timestamped name;
    the path actually written is returned.
    """
    out_p = Path(out_path).expanduser()
    engine = engine or _default_engine()
    df = pd.DataFrame(list(records), columns=list(EXPORT_COLUMNS)).fillna("")
    tmp_p = out_p.with_name(f"{out_p.stem}.tmp.{os.getpid()}.xlsx")

    try:
        _ensure_parent_dir(out_p)
        with pd.ExcelWriter(tmp_p, engine=engine, **_writer_kwargs(engine)) as writer:
            df.to_excel(writer, index=False, sheet_name=sheet_name)
            if engine == "openpyxl":
                _force_text_cells(writer.sheets[sheet_name])
            autosize_sheet(writer, df, sheet_name)
    except (OSError, ValueError) as e:
        tmp_p.unlink(missing_ok=True)
        raise ExportError(f"Could not write {out_p}: {e}") from e

    try:
        try:
            os.replace(tmp_p, out_p)
        except PermissionError:
            ts = datetime.now().strftime("%Y%m%d_%H%M%S")
            alt_p = out_p.with_name(f"{out_p.stem}_{ts}.xlsx")
            logger.warning("%s is locked; saving to %s instead", out_p, alt_p)
            shutil.move(str(tmp_p), str(alt_p))
            return alt_p
    except OSError as e:
        tmp_p.unlink(missing_ok=True)
        raise ExportError(f"Could not save {out_p}: {e}") from e
    logger.info("Saved %d row(s) to %s", len(df), out_p)
    return out_p

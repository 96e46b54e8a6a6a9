from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import Settings, apply_tesseract_cmd, configure_logging
from .errors import ExportError
from .session import ExtractionSession

logger = logging.getLogger("pdf2sheet")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="pdf2sheet", description="Single-page PDF → OCR rows → Excel")
    ap.add_argument("input", nargs="?", help="Input PDF path (omit to open the window)")
    ap.add_argument("--out-dir", help="Directory for sample.xlsx (default: PDF2SHEET_OUTPUT_DIR or cwd)")
    ap.add_argument("--no-export", action="store_true", help="Print rows without writing a workbook")
    ap.add_argument("--gui", action="store_true", help="Launch the Tkinter window")
    ap.add_argument("--log-level", help="Logging level (default: PDF2SHEET_LOG_LEVEL or INFO)")
    return ap


def run_once_cli(input_path: str, settings: Settings, out_dir: Optional[str] = None,
                 export: bool = True) -> int:
    if Path(input_path).suffix.lower() != ".pdf":
        logger.warning("%s does not look like a PDF; trying anyway", input_path)
    session = ExtractionSession(settings)
    session.select(input_path)
    if not session.submit():
        return 1
    for line in session.display_lines():
        print(line)
    if export:
        try:
            saved = session.export_rows(out_dir)
        except ExportError as e:
            logger.error("%s", e)
            return 1
        print(f"Saved: {saved}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings.from_env()
    configure_logging(args.log_level or settings.log_level)
    apply_tesseract_cmd(settings)

    if args.gui or args.input is None:
        from .gui import run_gui
        run_gui(settings)
        return 0
    return run_once_cli(args.input, settings, out_dir=args.out_dir, export=not args.no_export)


if __name__ == "__main__":
    sys.exit(main())

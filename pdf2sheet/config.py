from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import pytesseract

# -------------------- Fixed pipeline knobs --------------------
RENDER_SCALE   = 1.5
PDF_BASE_DPI   = 72               # 1 PDF point = 1/72 inch
RENDER_DPI     = int(PDF_BASE_DPI * RENDER_SCALE)
OCR_LANG       = "eng"
OCR_CONFIG     = "--oem 1"        # LSTM engine only
EXPORT_FILENAME = "sample.xlsx"
SHEET_NAME     = "Sheet1"
EXPORT_COLUMNS = ("name", "address", "timeIn", "timeOut")

LOG_FORMAT = "[%(levelname)s] %(name)s: %(message)s"


def _resolve_optional_path(*candidates) -> Optional[Path]:
    for cand in candidates:
        if not cand:
            continue
        try:
            path = Path(cand).expanduser()
        except TypeError:
            continue
        if path.exists():
            return path
    return None


@dataclass(frozen=True)
class Settings:
    poppler_bin: Optional[Path] = None
    tesseract_cmd: Optional[Path] = None
    output_dir: Path = Path(".")
    debug_dir: Optional[Path] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ=None) -> "Settings":
        """Build settings from ``PDF2SHEET_*`` environment variables.

        Tool paths that do not exist on disk are ignored so pdf2image and
        pytesseract fall back to whatever is on PATH.
        """
        env = os.environ if environ is None else environ
        debug_raw = (env.get("PDF2SHEET_DEBUG_DIR") or "").strip()
        output_raw = (env.get("PDF2SHEET_OUTPUT_DIR") or "").strip()
        return cls(
            poppler_bin=_resolve_optional_path(env.get("PDF2SHEET_POPPLER")),
            tesseract_cmd=_resolve_optional_path(env.get("PDF2SHEET_TESSERACT")),
            output_dir=Path(output_raw).expanduser() if output_raw else Path("."),
            debug_dir=Path(debug_raw).expanduser() if debug_raw else None,
            log_level=(env.get("PDF2SHEET_LOG_LEVEL") or "INFO").strip().upper(),
        )

    def debug_path(self, name: str) -> Optional[Path]:
        """Return ``debug_dir / name`` (creating the dir), or None when debug is off."""
        if self.debug_dir is None:
            return None
        self.debug_dir.mkdir(parents=True, exist_ok=True)
        return self.debug_dir / name


def apply_tesseract_cmd(settings: Settings) -> None:
    if settings.tesseract_cmd is not None:
        pytesseract.pytesseract.tesseract_cmd = str(settings.tesseract_cmd)


def configure_logging(level: str = "INFO") -> None:
    """Console logging for the CLI and the desktop window."""
    lvl = logging.getLevelName(str(level).upper())
    if not isinstance(lvl, int):
        lvl = logging.INFO
    logging.basicConfig(level=lvl, format=LOG_FORMAT)
    logging.getLogger("pdf2sheet").setLevel(lvl)

"""Selection/submit/export state shared by the desktop window and the CLI."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, List, Optional, Union

from . import imaging, ocr, parsing
from .config import EXPORT_FILENAME, SHEET_NAME, Settings
from .errors import NoDocumentSelected, Pdf2SheetError
from .excel_io import records_from_display_lines, write_records
from .parsing import ExtractedRow

logger = logging.getLogger(__name__)

NO_FILE_MESSAGE = "Please upload a PDF file first."

# notify(level, message) with level in {"warning", "error", "info"}
Notifier = Callable[[str, str], None]


_NOTIFY_LEVELS = {"error": logging.ERROR, "warning": logging.WARNING, "info": logging.INFO}


def log_notifier(level: str, message: str) -> None:
    logger.log(_NOTIFY_LEVELS.get(level, logging.INFO), message)


class ExtractionSession:
    """Owns the selected document and the rows parsed from it.

    The three pipeline stages are injectable so callers (and tests) can swap
    the poppler/Tesseract-backed defaults.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        notify: Notifier = log_notifier,
        preprocess: Optional[Callable[[bytes], str]] = None,
        extract: Optional[Callable[[str], str]] = None,
        parse: Callable[[str], List[ExtractedRow]] = parsing.parse_rows,
    ):
        self.settings = settings or Settings()
        self.notify = notify
        self._preprocess = preprocess or (lambda doc: imaging.preprocess(doc, self.settings))
        self._extract = extract or (lambda bmp: ocr.extract_text(bmp, self.settings))
        self._parse = parse
        self.current_document: Optional[Path] = None
        self.rows: List[ExtractedRow] = []
        self.last_error: Optional[BaseException] = None
        self._busy = False

    def select(self, path: Union[str, Path]) -> None:
        self.current_document = Path(path)

    def run_pipeline(self) -> List[ExtractedRow]:
        """Read -> render -> OCR -> parse, raising on any failure."""
        if self.current_document is None:
            raise NoDocumentSelected(NO_FILE_MESSAGE)
        logger.info("Reading %s", self.current_document)
        document = self.current_document.read_bytes()
        logger.info("Rendering page 1")
        bitmap = self._preprocess(document)
        logger.info("Running OCR")
        text = self._extract(bitmap)
        rows = self._parse(text)
        logger.info("Parsed %d row(s)", len(rows))
        return rows

    def submit(self) -> bool:
        """Run the pipeline on the selected document and replace ``rows``.

        Returns False (leaving ``rows`` as they were) when nothing is selected,
        a submission is already running, or any stage fails.
        """
        if self.current_document is None:
            self.notify("warning", NO_FILE_MESSAGE)
            return False
        if self._busy:
            logger.warning("Submission already in progress; ignoring")
            return False

        self._busy = True
        self.last_error = None
        try:
            rows = self.run_pipeline()
        except (Pdf2SheetError, OSError) as e:
            self.last_error = e
            logger.exception("Error processing PDF")
            self.notify("error", f"Could not extract rows from {self.current_document.name}:\n{e}")
            return False
        finally:
            self._busy = False

        self.rows = rows
        return True

    def display_lines(self) -> List[str]:
        return [row.display() for row in self.rows]

    def export_rows(self, out_dir: Union[str, Path, None] = None) -> Path:
        out_dir = Path(out_dir) if out_dir is not None else self.settings.output_dir
        records = records_from_display_lines(self.display_lines())
        return write_records(records, out_dir / EXPORT_FILENAME, sheet_name=SHEET_NAME)

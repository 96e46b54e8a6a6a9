"""pdf2sheet: page 1 of a PDF -> inverted-grayscale bitmap -> Tesseract -> rows -> Excel."""
from .errors import (
    DocumentDecodeError,
    ExportError,
    NoDocumentSelected,
    Pdf2SheetError,
    RecognitionError,
)
from .imaging import preprocess
from .ocr import extract_text
from .parsing import ExtractedRow, parse_rows
from .session import ExtractionSession

__version__ = "0.1.0"

__all__ = [
    "DocumentDecodeError",
    "ExportError",
    "ExtractedRow",
    "ExtractionSession",
    "NoDocumentSelected",
    "Pdf2SheetError",
    "RecognitionError",
    "extract_text",
    "parse_rows",
    "preprocess",
]

"""Exception types raised along the PDF -> rows pipeline."""


class Pdf2SheetError(Exception):
    """Base class for every pipeline failure."""


class NoDocumentSelected(Pdf2SheetError):
    """Submit was requested before a PDF was picked."""


class DocumentDecodeError(Pdf2SheetError):
    """The PDF could not be decoded or page 1 could not be rendered."""


class RecognitionError(Pdf2SheetError):
    """Tesseract is unavailable or failed on the normalized bitmap."""


class ExportError(Pdf2SheetError):
    """The workbook could not be written."""

"""
Test Configuration and Fixtures
"""
import io

import pytest
import pytesseract
from PIL import Image

from pdf2sheet import ocr
from pdf2sheet.imaging import to_data_uri


@pytest.fixture
def pdf_bytes():
    """A one-page, all-white PDF (40x20 pt) written by Pillow"""
    buf = io.BytesIO()
    Image.new("RGB", (40, 20), "white").save(buf, format="PDF", resolution=72.0)
    return buf.getvalue()


@pytest.fixture
def pdf_path(tmp_path, pdf_bytes):
    path = tmp_path / "timesheet.pdf"
    path.write_bytes(pdf_bytes)
    return path


@pytest.fixture
def bitmap_uri():
    """Small normalized-looking bitmap as a PNG data URI"""
    return to_data_uri(Image.new("RGBA", (8, 4), (0, 0, 0, 255)))


@pytest.fixture
def tesseract(monkeypatch):
    """Stub the Tesseract binary; ``tesseract.text`` / ``tesseract.error`` drive image_to_string"""

    class FakeTesseract:
        text = ""
        error = None
        langs = ["eng", "osd"]
        calls = 0

        def image_to_string(self, img, lang=None, config=""):
            self.calls += 1
            self.lang = lang
            self.config = config
            if self.error is not None:
                raise self.error
            return self.text

    fake = FakeTesseract()
    monkeypatch.setattr(ocr.pytesseract, "get_tesseract_version", lambda: "5.3.0")
    monkeypatch.setattr(ocr.pytesseract, "get_languages", lambda config="": fake.langs)
    monkeypatch.setattr(ocr.pytesseract, "image_to_string", fake.image_to_string)
    return fake


@pytest.fixture
def workers(monkeypatch):
    """Record every OcrWorker created through ocr_worker()"""
    created = []

    class RecordingWorker(ocr.OcrWorker):
        def __init__(self, *args, **kwargs):
            super().__init__(*args, **kwargs)
            created.append(self)

    monkeypatch.setattr(ocr, "OcrWorker", RecordingWorker)
    return created


@pytest.fixture
def tesseract_error():
    return pytesseract.TesseractError(1, "recognition blew up")

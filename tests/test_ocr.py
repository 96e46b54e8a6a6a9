"""
Text Extractor Tests
"""
import pytest
import pytesseract
from PIL import Image

from pdf2sheet import ocr
from pdf2sheet.config import Settings
from pdf2sheet.errors import RecognitionError


class TestExtractText:
    """extract_text with a stubbed Tesseract"""

    def test_returns_text_without_page_separator(self, tesseract, bitmap_uri):
        tesseract.text = "Alice 1 08:00 17:00\nBob 2 09:00 18:00\n\f"
        assert ocr.extract_text(bitmap_uri) == "Alice 1 08:00 17:00\nBob 2 09:00 18:00\n"

    def test_uses_english_lstm(self, tesseract, bitmap_uri):
        ocr.extract_text(bitmap_uri)
        assert tesseract.lang == "eng"
        assert "--oem 1" in tesseract.config

    def test_worker_released_after_success(self, tesseract, workers, bitmap_uri):
        ocr.extract_text(bitmap_uri)
        assert len(workers) == 1
        assert workers[0].terminated

    def test_worker_released_after_failure(self, tesseract, workers, bitmap_uri, tesseract_error):
        tesseract.error = tesseract_error
        with pytest.raises(RecognitionError):
            ocr.extract_text(bitmap_uri)
        assert len(workers) == 1
        assert workers[0].terminated

    def test_fresh_worker_per_call(self, tesseract, workers, bitmap_uri):
        ocr.extract_text(bitmap_uri)
        ocr.extract_text(bitmap_uri)
        assert len(workers) == 2
        assert workers[0] is not workers[1]
        assert all(w.terminated for w in workers)

    def test_bad_bitmap(self, tesseract):
        with pytest.raises(RecognitionError):
            ocr.extract_text("not a data uri")
        assert tesseract.calls == 0

    def test_oversized_bitmap(self, tesseract, workers, bitmap_uri, monkeypatch):
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 10)
        with pytest.raises(RecognitionError):
            ocr.extract_text(bitmap_uri)
        assert workers == []
        assert tesseract.calls == 0

    def test_debug_text_saved(self, tesseract, bitmap_uri, tmp_path):
        tesseract.text = "Alice"
        ocr.extract_text(bitmap_uri, Settings(debug_dir=tmp_path))
        assert (tmp_path / "recognized_text.txt").read_text(encoding="utf-8") == "Alice"


class TestOcrWorker:
    """Worker acquisition checks"""

    def test_missing_tesseract(self, monkeypatch):
        def missing():
            raise pytesseract.TesseractNotFoundError()

        monkeypatch.setattr(ocr.pytesseract, "get_tesseract_version", missing)
        with pytest.raises(RecognitionError):
            ocr.OcrWorker()

    def test_missing_language_model(self, tesseract):
        tesseract.langs = ["osd"]
        with pytest.raises(RecognitionError):
            ocr.OcrWorker("eng")

    def test_recognize_after_terminate(self, tesseract):
        worker = ocr.OcrWorker()
        worker.terminate()
        with pytest.raises(RecognitionError):
            worker.recognize(Image.new("L", (2, 2)))
        assert tesseract.calls == 0

    def test_context_manager_releases_on_caller_error(self, tesseract, workers):
        with pytest.raises(KeyError):
            with ocr.ocr_worker() as worker:
                raise KeyError("caller failed")
        assert worker.terminated
        assert workers == [worker]

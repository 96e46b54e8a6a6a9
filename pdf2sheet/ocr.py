from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

import pytesseract
from PIL import Image

from .config import OCR_CONFIG, OCR_LANG, Settings
from .errors import RecognitionError
from .imaging import from_data_uri

logger = logging.getLogger(__name__)


class OcrWorker:
    """One Tesseract session for a single language model.

    Created by :func:`ocr_worker`, which guarantees :meth:`terminate` runs.
    """

    def __init__(self, lang: str = OCR_LANG, config: str = OCR_CONFIG):
        self.lang = lang
        self.config = config
        self.terminated = False
        try:
            version = pytesseract.get_tesseract_version()
        except pytesseract.TesseractNotFoundError as e:
            raise RecognitionError("Tesseract is not installed or not on PATH") from e
        try:
            langs = pytesseract.get_languages(config="")
        except pytesseract.TesseractError as e:
            raise RecognitionError(f"Could not list Tesseract languages: {e}") from e
        if langs and lang not in langs:
            raise RecognitionError(f"Tesseract language model '{lang}' is not installed")
        logger.debug("OCR worker up (tesseract %s, lang=%s)", version, lang)

    def recognize(self, img: Image.Image) -> str:
        if self.terminated:
            raise RecognitionError("OCR worker already terminated")
        try:
            text = pytesseract.image_to_string(img, lang=self.lang, config=self.config)
        except (pytesseract.TesseractError, RuntimeError, OSError) as e:
            raise RecognitionError(f"Recognition failed: {e}") from e
        # tesseract appends a form feed page separator
        return text.rstrip("\f")

    def terminate(self) -> None:
        if not self.terminated:
            self.terminated = True
            logger.debug("OCR worker terminated")


@contextmanager
def ocr_worker(lang: str = OCR_LANG) -> Iterator[OcrWorker]:
    worker = OcrWorker(lang)
    try:
        yield worker
    finally:
        worker.terminate()


def extract_text(bitmap: str, settings: Optional[Settings] = None) -> str:
    """Run OCR on a normalized bitmap (PNG data URI) and return the raw text.

    A fresh worker is acquired per call and released on every exit path.
    Failures are logged here and re-raised as RecognitionError for the caller
    to report.
    """
    try:
        img = from_data_uri(bitmap)
    except (ValueError, OSError, Image.DecompressionBombError) as e:
        raise RecognitionError(f"Could not decode bitmap: {e}") from e

    try:
        with ocr_worker(OCR_LANG) as worker:
            text = worker.recognize(img)
    except RecognitionError:
        logger.error("Error recognizing image", exc_info=True)
        raise

    logger.debug("Full Extracted Text:\n%s", text)
    for i, line in enumerate(text.split("\n"), 1):
        logger.debug("Line %d: %r", i, line)

    dbg = settings.debug_path("recognized_text.txt") if settings is not None else None
    if dbg is not None:
        dbg.write_text(text, encoding="utf-8")
    return text

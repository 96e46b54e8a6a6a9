"""Page rasterization and the grayscale/inversion filter applied before OCR.

Only page 1 of the document is rendered, at a fixed 1.5x scale
(108 dpi). The filter replaces R, G and B with the inverted BT.709 luma of the
pixel and leaves alpha as rendered, which lifts contrast on scans with light
text on dark backgrounds.
"""
from __future__ import annotations

import base64
import binascii
import io
import logging
from typing import Optional

import numpy as np
from PIL import Image
from pdf2image import convert_from_bytes
from pdf2image.exceptions import (
    PDFInfoNotInstalledError,
    PDFPageCountError,
    PDFPopplerTimeoutError,
    PDFSyntaxError,
)

from .config import RENDER_DPI, Settings
from .errors import DocumentDecodeError

logger = logging.getLogger(__name__)

# ITU-R BT.709 luma weights, in R, G, B order
LUMA_WEIGHTS = np.array([0.2126, 0.7152, 0.0722], dtype=np.float64)
DATA_URI_PREFIX = "data:image/png;base64,"

_POPPLER_ERRORS = (
    PDFInfoNotInstalledError,
    PDFPageCountError,
    PDFPopplerTimeoutError,
    PDFSyntaxError,
)


def render_first_page(document: bytes, settings: Optional[Settings] = None) -> Image.Image:
    """Render page index 0 of ``document`` into an RGBA surface.

    Later pages are never rasterized. Raises DocumentDecodeError when poppler
    cannot read the bytes or produces no page.
    """
    if not document:
        raise DocumentDecodeError("Empty document")
    kwargs = {"dpi": RENDER_DPI, "first_page": 1, "last_page": 1}
    poppler_bin = settings.poppler_bin if settings is not None else None
    if poppler_bin:
        kwargs["poppler_path"] = str(poppler_bin)
    try:
        try:
            pages = convert_from_bytes(document, **kwargs)
        except PDFInfoNotInstalledError:
            if "poppler_path" not in kwargs:
                raise
            # configured poppler dir is stale; retry with PATH
            kwargs.pop("poppler_path", None)
            pages = convert_from_bytes(document, **kwargs)
    except _POPPLER_ERRORS + (OSError, ValueError, Image.DecompressionBombError) as e:
        raise DocumentDecodeError(f"Could not render PDF: {e}") from e

    if not pages:
        raise DocumentDecodeError("PDF rendered no pages")
    surface = pages[0].convert("RGBA")
    logger.debug("Rendered page 1 at %s dpi -> %dx%d", RENDER_DPI, surface.width, surface.height)
    return surface


def invert_luminance(pixels: np.ndarray) -> np.ndarray:
    """Return a copy of ``pixels`` with R=G=B=255-luma; other channels untouched.

    ``pixels`` is any uint8 array whose last axis holds R, G, B[, A]. Values
    are rounded to the nearest integer and clamped to 0..255 like a canvas
    write.
    """
    arr = np.asarray(pixels)
    if arr.ndim < 1 or arr.shape[-1] < 3:
        raise ValueError(f"expected RGB(A) pixels, got shape {arr.shape}")
    lum = arr[..., :3].astype(np.float64) @ LUMA_WEIGHTS
    inverted = np.clip(np.rint(255.0 - lum), 0, 255).astype(np.uint8)
    out = arr.astype(np.uint8, copy=True)
    out[..., :3] = inverted[..., None]
    return out


def normalize_surface(surface: Image.Image) -> Image.Image:
    """Apply :func:`invert_luminance` to a rendered surface (kept as RGBA)."""
    rgba = np.array(surface.convert("RGBA"))
    return Image.fromarray(invert_luminance(rgba))


def to_data_uri(img: Image.Image) -> str:
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return DATA_URI_PREFIX + base64.b64encode(buf.getvalue()).decode("ascii")


def from_data_uri(uri: str) -> Image.Image:
    """Decode a PNG data URI produced by :func:`to_data_uri`."""
    if not isinstance(uri, str) or not uri.startswith(DATA_URI_PREFIX):
        raise ValueError("not a PNG data URI")
    try:
        raw = base64.b64decode(uri[len(DATA_URI_PREFIX):], validate=True)
    except binascii.Error as e:
        raise ValueError(f"bad base64 payload: {e}") from e
    img = Image.open(io.BytesIO(raw))
    img.load()
    return img


def preprocess(document: bytes, settings: Optional[Settings] = None) -> str:
    """PDF bytes -> normalized page-1 bitmap as a PNG data URI."""
    surface = render_first_page(document, settings)
    normalized = normalize_surface(surface)
    uri = to_data_uri(normalized)
    logger.debug("Generated image URL (%d chars)", len(uri))

    dbg = settings.debug_path("normalized_page.png") if settings is not None else None
    if dbg is not None:
        normalized.save(dbg, format="PNG")
        logger.debug("Saved normalized bitmap to %s", dbg)
    return uri

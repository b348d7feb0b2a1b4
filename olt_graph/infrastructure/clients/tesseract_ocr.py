"""Tesseract OCR adapter for traffic-graph images.

Implements OCRPort with pytesseract. Recognition happens inside an
``EngineLease`` so the concurrency slot and the decoded image are released on
every exit path.
"""

from __future__ import annotations

import io
import string
import threading
from typing import Final

import pytesseract
from PIL import Image

from olt_graph.core.logging import get_logger
from olt_graph.domain.pipeline.errors import OcrError
from olt_graph.domain.ports.ocr_port import OCRPort

logger = get_logger(__name__)

GRAPH_KEYWORDS: Final = (
    "Upload",
    "Download",
    "Current",
    "Maximum",
    "bits per second",
    "bytes per second",
    "bps",
    "Bps",
    "kMG",
    "gpon-onu",
    "GPON",
    "HWTC",
    "ONU",
)


def build_char_whitelist() -> str:
    letters = {ch for word in GRAPH_KEYWORDS for ch in word if ch.isalpha()}
    return string.digits + ":.-/_" + "".join(sorted(letters))


class EngineLease:
    """Scoped use of the shared Tesseract engine for one image.

    Enter acquires a slot and decodes the image; exit closes the image and
    frees the slot, also when recognition raised.
    """

    def __init__(self, slots: threading.BoundedSemaphore, image: bytes, acquire_timeout: float | None) -> None:
        self._slots = slots
        self._raw = image
        self._acquire_timeout = acquire_timeout
        self._acquired = False
        self.image: Image.Image | None = None

    def __enter__(self) -> "EngineLease":
        if not self._slots.acquire(timeout=self._acquire_timeout):
            raise OcrError("OCR engine busy")
        self._acquired = True
        try:
            with Image.open(io.BytesIO(self._raw)) as src:
                # Palette/alpha graphs OCR poorly; flatten to greyscale.
                self.image = src.convert("L")
        except Exception:
            self._release()
            raise
        return self

    def __exit__(self, *args) -> None:
        self._release()

    def _release(self) -> None:
        if self.image is not None:
            self.image.close()
            self.image = None
        if self._acquired:
            self._acquired = False
            self._slots.release()


class TesseractOcrClient(OCRPort):
    def __init__(
        self,
        lang: str = "eng",
        psm: int = 11,
        max_concurrency: int = 2,
        timeout_seconds: float = 30.0,
    ) -> None:
        self.lang = lang
        self.psm = psm
        self.timeout_seconds = timeout_seconds
        self._slots = threading.BoundedSemaphore(max_concurrency)
        self._config = f"--psm {psm} -c tessedit_char_whitelist={build_char_whitelist()}"

    def lease(self, image: bytes) -> EngineLease:
        return EngineLease(self._slots, image, acquire_timeout=self.timeout_seconds)

    def recognize(self, image: bytes) -> str:
        try:
            with self.lease(image) as engine:
                text = pytesseract.image_to_string(
                    engine.image,
                    lang=self.lang,
                    config=self._config,
                    timeout=self.timeout_seconds,
                )
        except OcrError:
            raise
        except Exception as exc:
            raise OcrError(f"OCR failed: {exc}") from exc
        logger.debug("ocr_done", extra={"chars": len(text)})
        return text

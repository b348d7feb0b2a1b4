"""OCRPort protocol for text recognition on graph images."""

from __future__ import annotations

from typing import Protocol


class OCRPort(Protocol):
    """Blocking OCR engine; the pipeline runs it off the event loop."""

    def recognize(self, image: bytes) -> str: ...

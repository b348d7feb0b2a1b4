from __future__ import annotations

from functools import lru_cache

from olt_graph.core.config import get_settings
from olt_graph.infrastructure.clients.smartolt_http import SmartOltClient
from olt_graph.infrastructure.clients.tesseract_ocr import TesseractOcrClient


def build_smartolt_client() -> SmartOltClient:
    s = get_settings()
    return SmartOltClient(
        base_url=s.SMARTOLT_BASE_URL,
        api_key=s.SMARTOLT_API_KEY.get_secret_value(),
        timeout_seconds=s.FETCH_TIMEOUT_SECONDS,
        verify_ssl=s.VERIFY_SSL,
    )


@lru_cache(maxsize=1)
def build_ocr_client() -> TesseractOcrClient:
    # One instance per process: its semaphore bounds concurrent tesseract runs.
    s = get_settings()
    return TesseractOcrClient(
        lang=s.OCR_LANG,
        psm=s.OCR_PSM,
        max_concurrency=s.OCR_MAX_CONCURRENCY,
        timeout_seconds=s.OCR_TIMEOUT_SECONDS,
    )

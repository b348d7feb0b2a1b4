"""FastAPI dependency injection functions.

Routes receive their collaborators from here so tests can swap them via
``app.dependency_overrides``.
"""

from __future__ import annotations

from typing import AsyncIterator

from olt_graph.application.services.factories import build_ocr_client, build_smartolt_client
from olt_graph.domain.ports.fetch_port import ImageFetchPort
from olt_graph.domain.ports.ocr_port import OCRPort


async def get_image_fetcher() -> AsyncIterator[ImageFetchPort]:
    """Yield a SmartOLT client whose HTTP connection pool is closed after the request."""
    async with build_smartolt_client() as client:
        yield client


def get_ocr_client() -> OCRPort:
    return build_ocr_client()

"""ImageFetchPort protocol for retrieving raw image bytes."""

from __future__ import annotations

from typing import Protocol

from olt_graph.domain.pipeline.models import FetchResponse
from olt_graph.domain.telemetry.models import GraphType


class ImageFetchPort(Protocol):
    """Abstraction over the upstream that serves graph images.

    ``fetch`` returns a ``FetchResponse`` for any HTTP answer, including
    non-2xx ones, and raises ``FetchError`` only when no answer was obtained.
    """

    def resolve_image_url(self, image_ref: str) -> str: ...

    def traffic_graph_url(self, unique_external_id: str, graph_type: GraphType) -> str: ...

    async def fetch(self, url: str) -> FetchResponse: ...

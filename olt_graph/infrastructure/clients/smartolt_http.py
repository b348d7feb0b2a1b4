"""HTTP client adapter for SmartOLT image endpoints.

Implements ImageFetchPort using httpx (async). Endpoint used for graphs:
- GET {base}/onu/get_onu_traffic_graph/{unique_external_id}/{graph_type}
Authentication is the ``X-Token`` header.
"""

from __future__ import annotations

from urllib.parse import quote

import httpx

from olt_graph.core.logging import get_logger, mask_secret, redact_url
from olt_graph.domain.pipeline.errors import FetchError, InvalidInputError
from olt_graph.domain.pipeline.models import FetchResponse
from olt_graph.domain.ports.fetch_port import ImageFetchPort
from olt_graph.domain.telemetry.models import GraphType

logger = get_logger(__name__)


def normalize_base_url(base_url: str | None) -> str:
    """Ensure the SmartOLT base URL ends in exactly one ``/api``. Blank stays blank."""
    base = (base_url or "").strip().rstrip("/")
    if not base:
        return ""
    return base if base.endswith("/api") else f"{base}/api"


class SmartOltClient(ImageFetchPort):
    """SmartOLT image fetcher.

    Use as ``async with SmartOltClient(...) as client:``; the underlying
    ``httpx.AsyncClient`` lives exactly as long as the block.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str | None,
        timeout_seconds: float = 30.0,
        verify_ssl: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = normalize_base_url(base_url)
        self._api_key = api_key or ""
        self._timeout_seconds = timeout_seconds
        self._verify_ssl = verify_ssl
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "SmartOltClient":
        self._client = httpx.AsyncClient(
            timeout=self._timeout_seconds,
            verify=self._verify_ssl,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *args) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    def resolve_image_url(self, image_ref: str) -> str:
        ref = image_ref.strip()
        if ref.startswith(("http://", "https://")):
            return ref
        return f"{self.base_url}{ref}" if ref.startswith("/") else f"{self.base_url}/{ref}"

    def traffic_graph_url(self, unique_external_id: str, graph_type: GraphType) -> str:
        if not unique_external_id or not unique_external_id.strip():
            raise InvalidInputError("unique_external_id is required")
        onu_id = quote(unique_external_id.strip(), safe="")
        return f"{self.base_url}/onu/get_onu_traffic_graph/{onu_id}/{GraphType(graph_type).value}"

    async def fetch(self, url: str) -> FetchResponse:
        if not self._client:
            raise RuntimeError("Client not started")
        if not self.base_url:
            raise FetchError("SmartOLT base URL is not configured", unauthorized=True)
        if not self._api_key:
            raise FetchError("SmartOLT API key is not configured", unauthorized=True)

        logger.info("smartolt_fetch", extra={"url": redact_url(url), "token": mask_secret(self._api_key)})
        try:
            resp = await self._client.get(url, headers={"X-Token": self._api_key, "Accept": "image/*"})
        except httpx.HTTPError as exc:
            raise FetchError(f"Failed to connect to SmartOLT: {exc}") from exc

        logger.info(
            "smartolt_response",
            extra={
                "status": resp.status_code,
                "content_type": resp.headers.get("content-type"),
                "size_bytes": len(resp.content),
            },
        )
        return FetchResponse(
            status_code=resp.status_code,
            content_type=resp.headers.get("content-type"),
            body=resp.content,
            url=url,
        )

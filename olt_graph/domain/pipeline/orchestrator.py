"""Domain pipeline orchestrator.

fetch -> classify -> Base64 + sniff -> (OCR -> parse). Works only through the
ports; every failure comes back as a ``PipelineFailure`` value.
"""

from __future__ import annotations

import asyncio
import base64
from datetime import datetime, timezone

from olt_graph.core.logging import get_logger, redact_url
from olt_graph.domain.imaging.models import ImageFormat
from olt_graph.domain.imaging.sniffer import mime_type_for, sniff_image
from olt_graph.domain.pipeline.errors import FetchError, InvalidInputError
from olt_graph.domain.pipeline.models import FailureKind, FetchResponse, PipelineFailure, PipelineResult
from olt_graph.domain.ports.fetch_port import ImageFetchPort
from olt_graph.domain.ports.ocr_port import OCRPort
from olt_graph.domain.telemetry.models import GraphTelemetry, GraphType
from olt_graph.domain.telemetry.parser import parse_graph_text

logger = get_logger(__name__)

DEFAULT_CONTENT_TYPE = "image/png"

STATUS_FAILURES: dict[int, tuple[FailureKind, str]] = {
    401: (FailureKind.UNAUTHORIZED, "SmartOLT API key is invalid or expired"),
    403: (FailureKind.RATE_LIMITED, "SmartOLT hourly request limit reached. Try again later."),
    404: (FailureKind.NOT_FOUND, "Image not found on SmartOLT"),
    429: (FailureKind.RATE_LIMITED, "SmartOLT request limit reached. Try again later."),
}


async def run_pipeline(
    *,
    image_ref: str,
    graph_type: GraphType,
    extract_telemetry: bool,
    fetcher: ImageFetchPort,
    ocr_client: OCRPort | None = None,
    ocr_timeout: float | None = None,
) -> PipelineResult | PipelineFailure:
    """Run the image pipeline for one request.

    Notes:
    - Image metadata is always attempted; telemetry only when requested.
    - An OCR failure drops ``graph_data`` but keeps the image payload.
    - Never raises.
    """
    try:
        url = _resolve_reference(image_ref, fetcher)
    except InvalidInputError as exc:
        return PipelineFailure(kind=FailureKind.INVALID_INPUT, message=str(exc))

    try:
        response = await fetcher.fetch(url)
    except FetchError as exc:
        kind = FailureKind.UNAUTHORIZED if exc.unauthorized else FailureKind.UPSTREAM_ERROR
        logger.error("image_fetch_failed", extra={"url": redact_url(url), "kind": kind.value, "error": str(exc)})
        return PipelineFailure(kind=kind, message=str(exc))
    except Exception as exc:
        logger.exception("image_fetch_crashed", extra={"url": redact_url(url)})
        return PipelineFailure(kind=FailureKind.UPSTREAM_ERROR, message=f"Failed to fetch image: {exc}")

    failure = classify_response(response)
    if failure is not None:
        logger.warning(
            "image_fetch_rejected",
            extra={"url": redact_url(url), "status": response.status_code, "kind": failure.kind.value},
        )
        return failure

    try:
        return await _build_result(
            response,
            graph_type=graph_type,
            extract_telemetry=extract_telemetry,
            ocr_client=ocr_client,
            ocr_timeout=ocr_timeout,
        )
    except Exception as exc:
        logger.exception("image_pipeline_crashed", extra={"url": redact_url(url)})
        return PipelineFailure(kind=FailureKind.UPSTREAM_ERROR, message=f"Failed to process image: {exc}")


def classify_response(response: FetchResponse) -> PipelineFailure | None:
    """Map a non-2xx or non-image upstream answer onto a failure kind."""
    status = response.status_code
    if not 200 <= status < 300:
        kind, message = STATUS_FAILURES.get(
            status, (FailureKind.UPSTREAM_ERROR, f"SmartOLT returned HTTP {status}")
        )
        return PipelineFailure(kind=kind, message=message, status_code=status)

    if response.content_type and not _is_image_type(response.content_type):
        return PipelineFailure(
            kind=FailureKind.MALFORMED_CONTENT,
            message=f"Response is not an image. Content-Type: {response.content_type}",
            status_code=status,
        )
    return None


def _resolve_reference(image_ref: str, fetcher: ImageFetchPort) -> str:
    if not isinstance(image_ref, str) or not image_ref.strip():
        raise InvalidInputError("Image URL or identifier is required")
    return fetcher.resolve_image_url(image_ref.strip())


def _is_image_type(content_type: str) -> bool:
    return content_type.split(";", 1)[0].strip().lower().startswith("image/")


async def _build_result(
    response: FetchResponse,
    *,
    graph_type: GraphType,
    extract_telemetry: bool,
    ocr_client: OCRPort | None,
    ocr_timeout: float | None,
) -> PipelineResult:
    body = response.body
    metadata = sniff_image(body)
    content_type = response.content_type or mime_type_for(metadata.format) or DEFAULT_CONTENT_TYPE
    payload = base64.b64encode(body).decode("ascii")

    graph_data = None
    if extract_telemetry:
        graph_data = await _extract_telemetry(body, graph_type, ocr_client, ocr_timeout)

    logger.info(
        "image_converted",
        extra={
            "format": metadata.format.value,
            "size_bytes": len(body),
            "content_type": content_type,
            "telemetry": graph_data is not None,
        },
    )
    return PipelineResult(
        image_base64=f"data:{content_type};base64,{payload}",
        content_type=content_type,
        format=ImageFormat(metadata.format).value,
        size_bytes=len(body),
        base64_length=len(payload),
        size_kb=round(len(body) / 1024, 2),
        image_url=response.url,
        timestamp=datetime.now(timezone.utc),
        metadata=metadata,
        graph_data=graph_data,
    )


async def _extract_telemetry(
    body: bytes,
    graph_type: GraphType,
    ocr_client: OCRPort | None,
    ocr_timeout: float | None,
) -> GraphTelemetry | None:
    if ocr_client is None:
        logger.warning("ocr_client_missing")
        return None
    try:
        text = await asyncio.wait_for(asyncio.to_thread(ocr_client.recognize, body), timeout=ocr_timeout)
    except Exception as exc:
        logger.warning("ocr_failed", extra={"error": str(exc) or type(exc).__name__})
        return None
    return parse_graph_text(text, graph_type)

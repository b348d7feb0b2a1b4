"""Convert-image use-cases.

Application layer around the domain orchestrator: resolves traffic-graph
URLs, runs the pipeline and records metrics.
"""

from __future__ import annotations

import time

from olt_graph.core.config import get_settings
from olt_graph.core.logging import get_logger
from olt_graph.domain.pipeline.errors import InvalidInputError
from olt_graph.domain.pipeline.models import FailureKind, PipelineFailure, PipelineResult
from olt_graph.domain.pipeline.orchestrator import run_pipeline
from olt_graph.domain.ports.fetch_port import ImageFetchPort
from olt_graph.domain.ports.ocr_port import OCRPort
from olt_graph.domain.telemetry.models import GraphType
from olt_graph.observability.metrics import inc_ocr_failed, record_image_format, record_pipeline

logger = get_logger(__name__)


async def convert_image(
    *,
    image_ref: str,
    graph_type: GraphType,
    extract_telemetry: bool,
    fetcher: ImageFetchPort,
    ocr_client: OCRPort | None,
) -> PipelineResult | PipelineFailure:
    settings = get_settings()
    start = time.perf_counter()
    outcome = await run_pipeline(
        image_ref=image_ref,
        graph_type=graph_type,
        extract_telemetry=extract_telemetry,
        fetcher=fetcher,
        ocr_client=ocr_client,
        ocr_timeout=settings.OCR_TIMEOUT_SECONDS,
    )
    elapsed = time.perf_counter() - start

    if isinstance(outcome, PipelineFailure):
        record_pipeline(outcome.kind.value, elapsed, telemetry=extract_telemetry)
        return outcome

    record_pipeline("ok", elapsed, telemetry=extract_telemetry)
    record_image_format(outcome.format)
    if extract_telemetry and outcome.graph_data is None:
        inc_ocr_failed()
    return outcome


async def convert_traffic_graph(
    *,
    unique_external_id: str,
    graph_type: GraphType,
    extract_telemetry: bool,
    fetcher: ImageFetchPort,
    ocr_client: OCRPort | None,
) -> PipelineResult | PipelineFailure:
    try:
        url = fetcher.traffic_graph_url(unique_external_id, graph_type)
    except InvalidInputError as exc:
        return PipelineFailure(kind=FailureKind.INVALID_INPUT, message=str(exc))

    logger.info("traffic_graph_requested", extra={"graph_type": graph_type.value})
    return await convert_image(
        image_ref=url,
        graph_type=graph_type,
        extract_telemetry=extract_telemetry,
        fetcher=fetcher,
        ocr_client=ocr_client,
    )

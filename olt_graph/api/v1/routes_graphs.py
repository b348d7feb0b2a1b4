from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from olt_graph.application.usecases.convert_image import convert_image, convert_traffic_graph
from olt_graph.core.dependencies import get_image_fetcher, get_ocr_client
from olt_graph.core.logging import get_logger, redact_url
from olt_graph.domain.pipeline.models import PipelineFailure, PipelineResult
from olt_graph.domain.ports.fetch_port import ImageFetchPort
from olt_graph.domain.ports.ocr_port import OCRPort
from olt_graph.domain.telemetry.models import GraphType
from olt_graph.models.schemas import ConvertImageRequest, ConvertImageResponse
from olt_graph.observability.errors import failure_to_http_error

router = APIRouter(prefix="/v1", tags=["graphs"])

SUCCESS_MESSAGE = "Image converted to Base64"


def _to_response(outcome: PipelineResult | PipelineFailure) -> ConvertImageResponse:
    if isinstance(outcome, PipelineFailure):
        raise failure_to_http_error(outcome)
    return ConvertImageResponse(success=True, message=SUCCESS_MESSAGE, data=outcome.to_public())


@router.post("/photos/base64", response_model=ConvertImageResponse)
async def convert_photo(
    payload: ConvertImageRequest,
    fetcher: ImageFetchPort = Depends(get_image_fetcher),
    ocr_client: OCRPort = Depends(get_ocr_client),
):
    logger = get_logger(__name__)
    logger.info(
        "convert_photo_received",
        extra={"image_url": redact_url(payload.image_url), "extract": payload.extract_graph_data},
    )
    outcome = await convert_image(
        image_ref=payload.image_url,
        graph_type=GraphType.coerce(payload.graph_type),
        extract_telemetry=payload.extract_graph_data,
        fetcher=fetcher,
        ocr_client=ocr_client if payload.extract_graph_data else None,
    )
    return _to_response(outcome)


@router.get("/onu/{unique_external_id}/traffic-graph", response_model=ConvertImageResponse)
async def convert_onu_traffic_graph(
    unique_external_id: str,
    graph_type: Optional[str] = Query(default=None, alias="graphType"),
    extract_graph_data: bool = Query(default=False, alias="extractGraphData"),
    fetcher: ImageFetchPort = Depends(get_image_fetcher),
    ocr_client: OCRPort = Depends(get_ocr_client),
):
    resolved_type = GraphType.coerce(graph_type)
    get_logger(__name__).info(
        "traffic_graph_received",
        extra={"graph_type": resolved_type.value, "extract": extract_graph_data},
    )
    outcome = await convert_traffic_graph(
        unique_external_id=unique_external_id,
        graph_type=resolved_type,
        extract_telemetry=extract_graph_data,
        fetcher=fetcher,
        ocr_client=ocr_client if extract_graph_data else None,
    )
    return _to_response(outcome)

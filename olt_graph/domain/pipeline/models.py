"""Request-scoped pipeline inputs and outputs."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict

from olt_graph.domain.imaging.models import ImageMetadata
from olt_graph.domain.telemetry.models import GraphTelemetry


class FetchResponse(BaseModel):
    """What the byte-fetch collaborator hands back for any HTTP answer."""

    model_config = ConfigDict(frozen=True)

    status_code: int
    content_type: str | None = None
    body: bytes = b""
    url: str


class FailureKind(str, Enum):
    INVALID_INPUT = "invalid_input"
    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"
    RATE_LIMITED = "rate_limited"
    MALFORMED_CONTENT = "malformed_content"
    UPSTREAM_ERROR = "upstream_error"


class PipelineFailure(BaseModel):
    kind: FailureKind
    message: str
    status_code: int | None = None


class PipelineResult(BaseModel):
    image_base64: str
    content_type: str
    format: str
    size_bytes: int
    base64_length: int
    size_kb: float
    image_url: str
    timestamp: datetime
    metadata: ImageMetadata | None = None
    graph_data: GraphTelemetry | None = None

    def to_public(self) -> dict[str, Any]:
        """Response shape: snake_case envelope, camelCase metadata/graphData."""
        out = self.model_dump(mode="json", exclude={"metadata", "graph_data"})
        if self.metadata is not None:
            out["metadata"] = self.metadata.to_public()
        if self.graph_data is not None:
            out["graphData"] = self.graph_data.to_public()
        return out

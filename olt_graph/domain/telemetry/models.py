"""Typed telemetry recovered from the OCR text of a traffic graph."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class GraphType(str, Enum):
    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"

    @classmethod
    def coerce(cls, value: str | None, default: "GraphType | None" = None) -> "GraphType":
        """Map free-form input onto a graph type, falling back to ``daily``."""
        fallback = default or cls.DAILY
        if not value:
            return fallback
        try:
            return cls(value.strip().lower())
        except ValueError:
            return fallback


class _TelemetryBase(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_public(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class BandwidthMetric(_TelemetryBase):
    """Current/maximum throughput as printed on the graph legend."""

    current: str | None = None
    maximum: str | None = None
    unit: str | None = None


class GraphTelemetry(_TelemetryBase):
    graph_type: GraphType
    onu_identifier: str | None = None
    y_axis_values: list[str] | None = None
    y_axis_label: str | None = None
    x_axis_timestamps: list[str] | None = None
    upload: BandwidthMetric | None = None
    download: BandwidthMetric | None = None
    extracted_text: str

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ConvertImageRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    image_url: str = Field(..., description="Absolute URL or path relative to the SmartOLT API")
    graph_type: Optional[str] = Field(default=None, description="hourly | daily | weekly | monthly | yearly")
    extract_graph_data: bool = Field(default=False, description="Run OCR and parse graph telemetry")


class ConvertImageResponse(BaseModel):
    success: bool
    message: str
    data: dict[str, Any]

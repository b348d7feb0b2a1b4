"""Structural image metadata produced by the format sniffer.

``ImageMetadata`` is a union discriminated on ``format``; each variant only
declares the fields its decoder is able to locate.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ImageFormat(str, Enum):
    PNG = "png"
    JPEG = "jpeg"
    GIF = "gif"
    WEBP = "webp"
    UNKNOWN = "unknown"


class _MetadataBase(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    def to_public(self) -> dict[str, Any]:
        """camelCase dict with absent fields dropped."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class PngMetadata(_MetadataBase):
    format: Literal[ImageFormat.PNG] = ImageFormat.PNG
    width: int | None = None
    height: int | None = None
    color_depth: int | None = None
    has_alpha: bool | None = None


class JpegMetadata(_MetadataBase):
    format: Literal[ImageFormat.JPEG] = ImageFormat.JPEG
    width: int | None = None
    height: int | None = None
    color_depth: int | None = None


class GifMetadata(_MetadataBase):
    format: Literal[ImageFormat.GIF] = ImageFormat.GIF
    width: int | None = None
    height: int | None = None


class WebpMetadata(_MetadataBase):
    format: Literal[ImageFormat.WEBP] = ImageFormat.WEBP
    width: int | None = None
    height: int | None = None


class UnknownMetadata(_MetadataBase):
    format: Literal[ImageFormat.UNKNOWN] = ImageFormat.UNKNOWN


ImageMetadata = Annotated[
    Union[PngMetadata, JpegMetadata, GifMetadata, WebpMetadata, UnknownMetadata],
    Field(discriminator="format"),
]


EMPTY_METADATA: dict[ImageFormat, type[_MetadataBase]] = {
    ImageFormat.PNG: PngMetadata,
    ImageFormat.JPEG: JpegMetadata,
    ImageFormat.GIF: GifMetadata,
    ImageFormat.WEBP: WebpMetadata,
    ImageFormat.UNKNOWN: UnknownMetadata,
}

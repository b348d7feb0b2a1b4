"""
Image header sniffing from raw bytes.

Reads dimensions, colour depth and alpha straight from the container headers
without decoding pixel data.

Magic bytes reference:
- PNG:  89 50 4E 47 0D 0A 1A 0A
- JPEG: FF D8
- GIF:  47 49 46 38 (37|39) 61   ("GIF87a" / "GIF89a")
- WebP: 52 49 46 46 ?? ?? ?? ?? 57 45 42 50   ("RIFF....WEBP")
"""

from __future__ import annotations

from typing import Callable, Final

from olt_graph.core.logging import get_logger
from olt_graph.domain.imaging.byte_cursor import ByteCursor
from olt_graph.domain.imaging.models import (
    EMPTY_METADATA,
    GifMetadata,
    ImageFormat,
    ImageMetadata,
    JpegMetadata,
    PngMetadata,
    UnknownMetadata,
    WebpMetadata,
)

logger = get_logger(__name__)

MIN_HEADER_BYTES: Final = 8

PNG_SIGNATURE: Final = b"\x89PNG\r\n\x1a\n"
JPEG_SIGNATURE: Final = b"\xff\xd8"
GIF_SIGNATURES: Final = (b"GIF87a", b"GIF89a")
RIFF_SIGNATURE: Final = b"RIFF"
WEBP_SIGNATURE: Final = b"WEBP"

# SOF0-SOF3 and SOF5-SOF7; C4 is DHT, C8 is reserved (JPG extensions).
JPEG_SOF_MARKERS: Final = frozenset({0xC0, 0xC1, 0xC2, 0xC3, 0xC5, 0xC6, 0xC7})
# Markers without a length field.
JPEG_STANDALONE_MARKERS: Final = frozenset({0x01, *range(0xD0, 0xD8)})
JPEG_SOS: Final = 0xDA
JPEG_EOI: Final = 0xD9

PNG_COLOR_TYPE_ALPHA_BIT: Final = 0x04
VP8_DIMENSION_MASK: Final = 0x3FFF

MIME_TYPES: Final[dict[ImageFormat, str]] = {
    ImageFormat.PNG: "image/png",
    ImageFormat.JPEG: "image/jpeg",
    ImageFormat.GIF: "image/gif",
    ImageFormat.WEBP: "image/webp",
}


def detect_format(data: bytes) -> ImageFormat:
    """
    Identify the container format from its signature.

    Args:
        data: Raw image bytes (at least the first 12 are inspected)

    Returns:
        Matching ``ImageFormat``; ``UNKNOWN`` for short or unrecognised input.
    """
    cursor = ByteCursor(data)
    if cursor.length < MIN_HEADER_BYTES:
        return ImageFormat.UNKNOWN
    if cursor.startswith(PNG_SIGNATURE):
        return ImageFormat.PNG
    if cursor.startswith(JPEG_SIGNATURE):
        return ImageFormat.JPEG
    if any(cursor.startswith(sig) for sig in GIF_SIGNATURES):
        return ImageFormat.GIF
    if cursor.startswith(RIFF_SIGNATURE) and cursor.startswith(WEBP_SIGNATURE, 8):
        return ImageFormat.WEBP
    return ImageFormat.UNKNOWN


def mime_type_for(image_format: ImageFormat) -> str | None:
    return MIME_TYPES.get(image_format)


def sniff_image(data: bytes) -> ImageMetadata:
    """
    Extract structural metadata from raw image bytes.

    Never raises: unknown or short input yields ``UnknownMetadata`` and any
    decoder failure yields the detected format with every other field absent.
    """
    image_format = detect_format(data)
    decoder = _DECODERS.get(image_format)
    if decoder is None:
        return UnknownMetadata()
    try:
        return decoder(ByteCursor(data))
    except Exception as exc:
        logger.warning(
            "image_sniff_failed",
            extra={"format": image_format.value, "size_bytes": len(data), "error": str(exc)},
        )
        return EMPTY_METADATA[image_format]()


def _decode_png(cursor: ByteCursor) -> PngMetadata:
    # IHDR is always the first chunk: length(4) type(4) at 8, payload at 16.
    color_type = cursor.uint8(25)
    return PngMetadata(
        width=cursor.uint32(16, "big"),
        height=cursor.uint32(20, "big"),
        color_depth=cursor.uint8(24),
        has_alpha=None if color_type is None else bool(color_type & PNG_COLOR_TYPE_ALPHA_BIT),
    )


def _decode_jpeg(cursor: ByteCursor) -> JpegMetadata:
    offset = 2
    while cursor.has(offset, 2):
        if cursor.uint8(offset) != 0xFF:
            offset += 1
            continue
        marker = cursor.uint8(offset + 1)
        if marker == 0xFF:
            offset += 1
            continue
        if marker in JPEG_SOF_MARKERS:
            # FF Cn | length(2) | precision(1) | height(2) | width(2) | components(1)
            # Colour depth is the precision byte at +4; +9 holds the component count.
            return JpegMetadata(
                height=cursor.uint16(offset + 5, "big"),
                width=cursor.uint16(offset + 7, "big"),
                color_depth=cursor.uint8(offset + 4),
            )
        if marker in (JPEG_EOI, JPEG_SOS):
            break
        if marker in JPEG_STANDALONE_MARKERS:
            offset += 2
            continue
        segment_length = cursor.uint16(offset + 2, "big")
        if segment_length is None or segment_length < 2:
            break
        offset += 2 + segment_length
    return JpegMetadata()


def _decode_gif(cursor: ByteCursor) -> GifMetadata:
    return GifMetadata(
        width=cursor.uint16(6, "little"),
        height=cursor.uint16(8, "little"),
    )


def _decode_webp(cursor: ByteCursor) -> WebpMetadata:
    chunk = cursor.tag(12)
    if chunk == b"VP8 ":
        width = cursor.uint16(26, "little")
        height = cursor.uint16(28, "little")
        return WebpMetadata(
            width=None if width is None else width & VP8_DIMENSION_MASK,
            height=None if height is None else height & VP8_DIMENSION_MASK,
        )
    if chunk == b"VP8L":
        bits = cursor.uint32(21, "little")
        if bits is None:
            return WebpMetadata()
        return WebpMetadata(
            width=(bits & VP8_DIMENSION_MASK) + 1,
            height=((bits >> 14) & VP8_DIMENSION_MASK) + 1,
        )
    if chunk == b"VP8X":
        width = cursor.uint24(24, "little")
        height = cursor.uint24(27, "little")
        return WebpMetadata(
            width=None if width is None else width + 1,
            height=None if height is None else height + 1,
        )
    return WebpMetadata()


_DECODERS: Final[dict[ImageFormat, Callable[[ByteCursor], ImageMetadata]]] = {
    ImageFormat.PNG: _decode_png,
    ImageFormat.JPEG: _decode_jpeg,
    ImageFormat.GIF: _decode_gif,
    ImageFormat.WEBP: _decode_webp,
}

"""
Heuristic extraction of traffic-graph telemetry from OCR text.

Each field is resolved by its own ordered list of patterns and the first
pattern that matches wins. The order matters on ambiguous text, so keep it.
"""

from __future__ import annotations

import re
from typing import Final, Iterable

from olt_graph.core.logging import get_logger
from olt_graph.domain.telemetry.models import BandwidthMetric, GraphTelemetry, GraphType

logger = get_logger(__name__)

MAX_AXIS_VALUES: Final = 20
MAX_TIMESTAMPS: Final = 20
DEFAULT_METRIC_VALUE: Final = "0.00"
BITS_PER_SECOND: Final = "bits per second"
BYTES_PER_SECOND: Final = "bytes per second"

ONU_PATTERNS: Final[tuple[re.Pattern[str], ...]] = (
    # gpon-onu_1/6/2:2 (frame/slot/port:onu)
    re.compile(r"(gpon[-_ ]?onu[-_ ]?\d+(?:/\d+){1,3}(?::\d+)?)", re.IGNORECASE),
    re.compile(r"(GPON\d+)"),
    re.compile(r"(HWTC\d+)"),
    # Free-form label; stops at a column gap or before a legend keyword.
    re.compile(
        r"\bONU\s*:\s*([^\r\n]+?)(?=\s{2,}|\s*\b(?:upload|download|current|maximum)\b|$)",
        re.IGNORECASE | re.MULTILINE,
    ),
)

# Hour accepts 0-29; see DESIGN.md before narrowing it.
TIMESTAMP_PATTERN: Final = re.compile(r"\b([0-2]?\d):([0-5]\d)\b")

# Suffix may run straight into a unit ("1.5Mbps") or the next tick ("0.2k0.4k").
AXIS_VALUE_PATTERN: Final = re.compile(r"(?<![\d.])(\d+(?:\.\d+)?[kmg])", re.IGNORECASE)

BITS_LABEL_PATTERNS: Final = (re.compile(r"bits per second", re.IGNORECASE), re.compile(r"bps"))
BYTES_LABEL_PATTERNS: Final = (re.compile(r"bytes per second", re.IGNORECASE), re.compile(r"Bps"))

_NUMBER = r"(\d+(?:\.\d+)?)"
_DECIMAL = r"(?<![\d.])(\d+\.\d+)(?![\d.])"
# Non-digit filler that never runs into the other direction's legend.
_LABEL_GAP = r"(?:(?!upload|download)\D)*?"
# Any filler, digits included, still bounded by the other direction.
_LOOSE_GAP = r"(?:(?!upload|download).)*?"
_FLAGS = re.IGNORECASE | re.DOTALL


def _direction_patterns(direction: str) -> dict[str, re.Pattern[str]]:
    head = rf"\b{direction}\b"
    return {
        "combined": re.compile(
            rf"{head}{_LABEL_GAP}current\s*:?\s*{_NUMBER}{_LABEL_GAP}maximum\s*:?\s*{_NUMBER}",
            _FLAGS,
        ),
        "pair": re.compile(rf"{head}{_LABEL_GAP}{_DECIMAL}{_LABEL_GAP}{_DECIMAL}", _FLAGS),
        "current": re.compile(rf"{head}{_LOOSE_GAP}current\s*:?\s*{_NUMBER}", _FLAGS),
        "maximum": re.compile(rf"{head}{_LOOSE_GAP}maximum\s*:?\s*{_NUMBER}", _FLAGS),
    }


DIRECTION_PATTERNS: Final = {
    "upload": _direction_patterns("upload"),
    "download": _direction_patterns("download"),
}


def parse_graph_text(text: str, graph_type: GraphType) -> GraphTelemetry:
    """
    Turn raw OCR output of a traffic graph into ``GraphTelemetry``.

    Args:
      text: Plain text returned by the OCR engine.
      graph_type: Graph period declared by the caller.

    Returns:
      Telemetry with every field the rules could recover. ``extracted_text``
      is always set; on an internal error it carries the error message and
      every other optional field is left empty.
    """
    try:
        timestamps = extract_timestamps(text)
        axis_values = extract_axis_values(text)
        return GraphTelemetry(
            graph_type=graph_type,
            onu_identifier=extract_onu_identifier(text),
            y_axis_values=axis_values or None,
            y_axis_label=extract_axis_label(text),
            x_axis_timestamps=timestamps or None,
            upload=extract_bandwidth(text, "upload"),
            download=extract_bandwidth(text, "download"),
            extracted_text=text,
        )
    except Exception as exc:
        logger.warning("graph_text_parse_failed", extra={"graph_type": str(graph_type), "error": str(exc)})
        return GraphTelemetry(graph_type=graph_type, extracted_text=str(exc))


def extract_onu_identifier(text: str) -> str | None:
    for pattern in ONU_PATTERNS:
        match = pattern.search(text)
        if match:
            return re.sub(r"\s+", "-", match.group(1).strip())
    return None


def extract_timestamps(text: str) -> list[str]:
    found = {f"{int(hour):02d}:{minute}" for hour, minute in TIMESTAMP_PATTERN.findall(text)}
    return sorted(found)[:MAX_TIMESTAMPS]


def extract_axis_values(text: str) -> list[str]:
    return _unique(AXIS_VALUE_PATTERN.findall(text))[:MAX_AXIS_VALUES]


def extract_axis_label(text: str) -> str | None:
    if any(p.search(text) for p in BITS_LABEL_PATTERNS):
        return BITS_PER_SECOND
    if any(p.search(text) for p in BYTES_LABEL_PATTERNS):
        return BYTES_PER_SECOND
    return None


def extract_bandwidth(text: str, direction: str) -> BandwidthMetric | None:
    """Resolve one direction's legend through three progressively looser tiers."""
    patterns = DIRECTION_PATTERNS[direction]

    for tier in ("combined", "pair"):
        match = patterns[tier].search(text)
        if match:
            return BandwidthMetric(current=match.group(1), maximum=match.group(2), unit=BITS_PER_SECOND)

    current = patterns["current"].search(text)
    maximum = patterns["maximum"].search(text)
    if current is None and maximum is None:
        return None
    return BandwidthMetric(
        current=current.group(1) if current else DEFAULT_METRIC_VALUE,
        maximum=maximum.group(1) if maximum else DEFAULT_METRIC_VALUE,
        unit=BITS_PER_SECOND,
    )


def _unique(values: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(values))

from __future__ import annotations

import pytest

from olt_graph.domain.telemetry.models import BandwidthMetric, GraphType
from olt_graph.domain.telemetry.parser import (
    extract_axis_label,
    extract_axis_values,
    extract_bandwidth,
    extract_onu_identifier,
    extract_timestamps,
    parse_graph_text,
)

GRAPH_TEXT = (
    "gpon-onu_1/6/2:2 Traffic\n"
    "Upload Current: 0.00 Maximum: 0.00\n"
    "Download Current: 1.12 Maximum: 1.14\n"
    "bits per second 0.0 0.2k 0.4k 0.6k\n"
    "20:20 20:30 20:40 20:50 21:00 21:10"
)


def test_full_graph_text() -> None:
    telemetry = parse_graph_text(GRAPH_TEXT, GraphType.HOURLY)

    assert telemetry.graph_type == GraphType.HOURLY
    assert telemetry.onu_identifier == "gpon-onu_1/6/2:2"
    assert telemetry.upload == BandwidthMetric(current="0.00", maximum="0.00", unit="bits per second")
    assert telemetry.download == BandwidthMetric(current="1.12", maximum="1.14", unit="bits per second")
    assert telemetry.y_axis_label == "bits per second"
    assert set(telemetry.y_axis_values or []) == {"0.2k", "0.4k", "0.6k"}
    assert telemetry.x_axis_timestamps == ["20:20", "20:30", "20:40", "20:50", "21:00", "21:10"]
    assert telemetry.extracted_text == GRAPH_TEXT


def test_public_shape_uses_camel_case_and_drops_absent_fields() -> None:
    out = parse_graph_text("Download Current: 1.12 Maximum: 1.14", GraphType.DAILY).to_public()

    assert out == {
        "graphType": "daily",
        "download": {"current": "1.12", "maximum": "1.14", "unit": "bits per second"},
        "extractedText": "Download Current: 1.12 Maximum: 1.14",
    }


class TestOnuIdentifier:
    def test_path_pattern_beats_serials(self) -> None:
        assert extract_onu_identifier("GPON0012 gpon-onu_1/2/3:4 HWTC99") == "gpon-onu_1/2/3:4"

    def test_gpon_serial_beats_hwtc(self) -> None:
        assert extract_onu_identifier("HWTC1234 and GPON5678") == "GPON5678"

    def test_hwtc_serial_beats_label(self) -> None:
        assert extract_onu_identifier("ONU: office router\nserial HWTC42") == "HWTC42"

    def test_label_whitespace_becomes_hyphens(self) -> None:
        assert extract_onu_identifier("ONU:   office\trouter \nUpload") == "office-router"

    def test_label_stops_at_column_gap(self) -> None:
        assert extract_onu_identifier("ONU: lobby ap    Download 1.0 2.0") == "lobby-ap"

    def test_label_stops_before_legend_keyword(self) -> None:
        assert extract_onu_identifier("ONU: office Upload Current: 1.0") == "office"

    def test_absent(self) -> None:
        assert extract_onu_identifier("Download Current: 1.12") is None


class TestTimestamps:
    def test_only_valid_minutes_are_kept(self) -> None:
        assert extract_timestamps("20:20 9:05 25:99") == ["09:05", "20:20"]

    def test_dedup_and_sort(self) -> None:
        assert extract_timestamps("21:00 8:00 21:00 08:00 00:30") == ["00:30", "08:00", "21:00"]

    def test_capped_at_twenty(self) -> None:
        text = " ".join(f"10:{m:02d}" for m in range(30))

        result = extract_timestamps(text)

        assert len(result) == 20
        assert result == sorted(result)
        assert result[0] == "10:00"

    def test_embedded_in_longer_numbers_ignored(self) -> None:
        assert extract_timestamps("gpon-onu_1/6/2:2 120:30 10:305") == []


class TestYAxis:
    def test_values_are_unique_and_capped(self) -> None:
        text = " ".join(f"{i}k" for i in range(25)) + " 3k 1.5M 2G"

        telemetry = parse_graph_text(text, GraphType.DAILY)

        assert len(telemetry.y_axis_values) == 20
        assert len(set(telemetry.y_axis_values)) == 20

    def test_suffix_case_insensitive(self) -> None:
        telemetry = parse_graph_text("0.5K 1m 2g", GraphType.DAILY)

        assert set(telemetry.y_axis_values) == {"0.5K", "1m", "2g"}

    def test_suffix_followed_by_unit(self) -> None:
        assert extract_axis_values("peak 1.5Mbps 200kbps") == ["1.5M", "200k"]

    def test_ticks_run_together(self) -> None:
        assert extract_axis_values("0.2k0.4k0.6k") == ["0.2k", "0.4k", "0.6k"]

    def test_suffix_inside_longer_number_ignored(self) -> None:
        assert extract_axis_values("v1.2.5k") == []

    @pytest.mark.parametrize(
        "text,label",
        [
            ("Traffic in bits per second", "bits per second"),
            ("scale Mbps", "bits per second"),
            ("Bytes per second", "bytes per second"),
            ("scale MBps", "bytes per second"),
            ("no unit here", None),
        ],
    )
    def test_label(self, text: str, label: str | None) -> None:
        assert extract_axis_label(text) == label


class TestBandwidth:
    def test_tier_one(self) -> None:
        metric = extract_bandwidth("Download Current: 1.12 Maximum: 1.14", "download")

        assert metric == BandwidthMetric(current="1.12", maximum="1.14", unit="bits per second")

    def test_tier_one_with_unit_between(self) -> None:
        metric = extract_bandwidth("Upload current 3.5 k maximum: 7.25 k", "upload")

        assert (metric.current, metric.maximum) == ("3.5", "7.25")

    def test_tier_two_bare_numbers(self) -> None:
        metric = extract_bandwidth("Download 1.12 1.14", "download")

        assert (metric.current, metric.maximum) == ("1.12", "1.14")

    def test_tier_three_current_only(self) -> None:
        metric = extract_bandwidth("Upload Current: 5", "upload")

        assert metric == BandwidthMetric(current="5", maximum="0.00", unit="bits per second")

    def test_tier_three_maximum_only(self) -> None:
        metric = extract_bandwidth("Upload Maximum: 2.5", "upload")

        assert (metric.current, metric.maximum) == ("0.00", "2.5")

    def test_direction_does_not_borrow_other_legend(self) -> None:
        text = "Upload Current: 0.50\nDownload Current: 1.12 Maximum: 1.14"

        upload = extract_bandwidth(text, "upload")
        download = extract_bandwidth(text, "download")

        assert (upload.current, upload.maximum) == ("0.50", "0.00")
        assert (download.current, download.maximum) == ("1.12", "1.14")

    def test_missing_direction(self) -> None:
        assert extract_bandwidth("Download Current: 1.12 Maximum: 1.14", "upload") is None


def test_parse_is_idempotent() -> None:
    first = parse_graph_text(GRAPH_TEXT, GraphType.WEEKLY)
    second = parse_graph_text(GRAPH_TEXT, GraphType.WEEKLY)

    assert first.model_dump_json() == second.model_dump_json()


def test_empty_text_yields_only_required_fields() -> None:
    assert parse_graph_text("", GraphType.MONTHLY).to_public() == {"graphType": "monthly", "extractedText": ""}


def test_internal_error_returns_minimal_record() -> None:
    telemetry = parse_graph_text(None, GraphType.YEARLY)  # type: ignore[arg-type]

    assert telemetry.graph_type == GraphType.YEARLY
    assert telemetry.extracted_text
    assert telemetry.onu_identifier is None
    assert telemetry.upload is None and telemetry.download is None


@pytest.mark.parametrize(
    "raw,expected",
    [("hourly", GraphType.HOURLY), (" Weekly ", GraphType.WEEKLY), ("bogus", GraphType.DAILY), (None, GraphType.DAILY)],
)
def test_graph_type_coerce(raw: str | None, expected: GraphType) -> None:
    assert GraphType.coerce(raw) == expected

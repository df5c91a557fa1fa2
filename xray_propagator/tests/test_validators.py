"""Tests for per-field validation of the X-Ray trace header."""

import pytest
from opentelemetry.trace import INVALID_SPAN_ID, TraceFlags

from xray_propagator.context.validators import (
    is_valid_lineage,
    is_valid_span_id_hex,
    is_valid_trace_id_hex,
    parse_lineage,
    parse_sampled_flag,
    parse_span_id,
)


class TestSpanId:
    def test_valid_span_id(self):
        assert parse_span_id("53995c3f42cd8ad8") == 0x53995C3F42CD8AD8

    @pytest.mark.parametrize(
        "value",
        ["", "53995c3f42cd8ad", "53995c3f42cd8ad80", "53995c3f42cd8adz", "0000000000000000"],
    )
    def test_invalid_span_id(self, value):
        assert parse_span_id(value) == INVALID_SPAN_ID

    def test_hex_checks(self):
        assert is_valid_span_id_hex("53995C3F42CD8AD8")
        assert not is_valid_span_id_hex("53995c3f42cd8ad8\n")
        assert is_valid_trace_id_hex("5759e988bd862e3fe1be46a994272793")
        assert not is_valid_trace_id_hex("0" * 32)


class TestSampledFlag:
    def test_sampled(self):
        assert parse_sampled_flag("1") == TraceFlags.SAMPLED

    def test_not_sampled(self):
        flags = parse_sampled_flag("0")
        assert flags is not None
        assert flags == TraceFlags.DEFAULT
        assert not flags.sampled

    @pytest.mark.parametrize("value", ["", " 1", "1 ", "01", "2", "true", "?"])
    def test_anything_else_is_unresolved(self, value):
        assert parse_sampled_flag(value) is None


class TestLineage:
    @pytest.mark.parametrize(
        "value",
        ["2:abcd1234:300", "0:00000000:0", "255:ABCD1234:32767", "007:abcd1234:1"],
    )
    def test_valid_lineage(self, value):
        assert is_valid_lineage(value)
        assert parse_lineage(value) == value

    @pytest.mark.parametrize(
        "value",
        [
            "2:abcd123:300",  # 7-char hash
            "2:abcd12345:300",  # 9-char hash
            "2:abcd123g:300",  # non-hex hash
            "2:abcd1234:99999",  # loop counter > 32767
            "2:abcd1234:32768",
            "256:abcd1234:1",  # request counter > 255
            "-1:abcd1234:1",
            "a:abcd1234:1",
            ":abcd1234:1",
            "1:abcd1234:",
            "1.5:abcd1234:1",
            "1:abcd1234",
            "1:abcd1234:1:1",
            "",
        ],
    )
    def test_invalid_lineage(self, value):
        assert not is_valid_lineage(value)
        assert parse_lineage(value) is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

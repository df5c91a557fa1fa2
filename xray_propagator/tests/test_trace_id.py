"""Tests for X-Ray trace id conversion."""

import pytest
from opentelemetry.trace import INVALID_TRACE_ID

from xray_propagator.context.trace_id import parse_xray_trace_id, to_xray_trace_id

TRACE_ID_HEX = "5759e988bd862e3fe1be46a994272793"
XRAY_TRACE_ID = "1-5759e988-bd862e3fe1be46a994272793"


def test_to_xray_trace_id():
    assert to_xray_trace_id(TRACE_ID_HEX) == XRAY_TRACE_ID


def test_parse_xray_trace_id():
    assert parse_xray_trace_id(XRAY_TRACE_ID) == int(TRACE_ID_HEX, 16)


def test_parse_accepts_uppercase_hex():
    assert parse_xray_trace_id(XRAY_TRACE_ID.upper()) == int(TRACE_ID_HEX, 16)


def test_round_trip_through_xray_form():
    assert format(parse_xray_trace_id(to_xray_trace_id(TRACE_ID_HEX)), "032x") == TRACE_ID_HEX


@pytest.mark.parametrize(
    "value",
    [
        "",
        "1",
        XRAY_TRACE_ID[:-1],
        XRAY_TRACE_ID + "0",
        "2-5759e988-bd862e3fe1be46a994272793",
        "1_5759e988-bd862e3fe1be46a994272793",
        "1-5759e988_bd862e3fe1be46a994272793",
        "15759e988-bd862e3fe1be46a9942727933",
        "1-5759e98g-bd862e3fe1be46a994272793",
        "1-5759e988-bd862e3fe1be46a99427279z",
        "1-00000000-000000000000000000000000",
        "1-5759e988-bd862e3f-1be46a994272793",
    ],
)
def test_invalid_xray_trace_ids_yield_sentinel(value):
    assert parse_xray_trace_id(value) == INVALID_TRACE_ID


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

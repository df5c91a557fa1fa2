"""Conversion between 32-hex trace ids and X-Ray ``1-<epoch>-<unique>`` ids."""

from __future__ import annotations

from opentelemetry.trace import INVALID_TRACE_ID

from xray_propagator.context.validators import is_valid_trace_id_hex
from xray_propagator.utils.helpers import parse_trace_id

TRACE_ID_LENGTH = 35
TRACE_ID_VERSION = "1"
TRACE_ID_DELIMITER = "-"
TRACE_ID_DELIMITER_INDEX_1 = 1
TRACE_ID_DELIMITER_INDEX_2 = 10
TRACE_ID_FIRST_PART_LENGTH = 8


def to_xray_trace_id(trace_id_hex: str) -> str:
    """
    Render a 32-hex trace id in X-Ray form.

    The input is assumed to come from a valid span context and is not
    checked.

    Example:
        >>> to_xray_trace_id("5759e988bd862e3fe1be46a994272793")
        '1-5759e988-bd862e3fe1be46a994272793'
    """
    timestamp = trace_id_hex[:TRACE_ID_FIRST_PART_LENGTH]
    unique = trace_id_hex[TRACE_ID_FIRST_PART_LENGTH:]
    return TRACE_ID_DELIMITER.join([TRACE_ID_VERSION, timestamp, unique])


def parse_xray_trace_id(xray_trace_id: str) -> int:
    """
    Parse an X-Ray trace id into an OTel trace id.

    Returns ``INVALID_TRACE_ID`` for anything that is not exactly
    ``1-<8 hex>-<24 hex>`` with a non-zero id.
    """
    if len(xray_trace_id) != TRACE_ID_LENGTH:
        return INVALID_TRACE_ID

    if not xray_trace_id.startswith(TRACE_ID_VERSION):
        return INVALID_TRACE_ID

    if (
        xray_trace_id[TRACE_ID_DELIMITER_INDEX_1] != TRACE_ID_DELIMITER
        or xray_trace_id[TRACE_ID_DELIMITER_INDEX_2] != TRACE_ID_DELIMITER
    ):
        return INVALID_TRACE_ID

    epoch_part = xray_trace_id[TRACE_ID_DELIMITER_INDEX_1 + 1:TRACE_ID_DELIMITER_INDEX_2]
    unique_part = xray_trace_id[TRACE_ID_DELIMITER_INDEX_2 + 1:TRACE_ID_LENGTH]
    trace_id_hex = epoch_part + unique_part

    if not is_valid_trace_id_hex(trace_id_hex):
        return INVALID_TRACE_ID

    return parse_trace_id(trace_id_hex)

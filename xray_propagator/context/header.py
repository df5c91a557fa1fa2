"""Splitting and assembly of the ``X-Amzn-Trace-Id`` header value.

An example header::

    Root=1-5759e988-bd862e3fe1be46a994272793;Parent=53995c3f42cd8ad8;Sampled=1
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Callable, Dict, Iterator, Optional, Tuple

from opentelemetry.trace import INVALID_SPAN_ID, INVALID_TRACE_ID, TraceFlags

from xray_propagator.context.trace_id import parse_xray_trace_id, to_xray_trace_id
from xray_propagator.context.validators import (
    IS_SAMPLED,
    NOT_SAMPLED,
    parse_lineage,
    parse_sampled_flag,
    parse_span_id,
)

logger = logging.getLogger(__name__)

TRACE_HEADER_DELIMITER = ";"
KV_DELIMITER = "="

TRACE_ID_KEY = "Root"
PARENT_ID_KEY = "Parent"
SAMPLED_FLAG_KEY = "Sampled"
LINEAGE_KEY = "Lineage"


@dataclass(frozen=True)
class ParsedTraceHeader:
    """Fields recovered from one header; ids fall back to the invalid sentinels."""

    trace_id: int = INVALID_TRACE_ID
    span_id: int = INVALID_SPAN_ID
    trace_flags: Optional[TraceFlags] = None  # None = sampling unresolved
    lineage: Optional[str] = None


def iter_header_fields(header: str) -> Iterator[Tuple[str, str]]:
    """
    Yield ``(key, value)`` pairs from a header value, left to right.

    Segments are separated by ``;`` and trimmed; each one is split on its
    first ``=``. A segment with no ``=`` yields its text as the key and an
    empty value. Empty segments are skipped.
    """
    pos = 0
    length = len(header)
    while pos < length:
        delimiter_index = header.find(TRACE_HEADER_DELIMITER, pos)
        if delimiter_index < 0:
            delimiter_index = length
        segment = header[pos:delimiter_index].strip()
        pos = delimiter_index + 1

        if not segment:
            continue
        key, _, value = segment.partition(KV_DELIMITER)
        yield key.strip(), value


def _apply_trace_id(parsed: ParsedTraceHeader, value: str) -> ParsedTraceHeader:
    trace_id = parse_xray_trace_id(value)
    if trace_id == INVALID_TRACE_ID:
        logger.debug("Invalid Root in X-Ray trace header: %r", value)
    return replace(parsed, trace_id=trace_id)


def _apply_span_id(parsed: ParsedTraceHeader, value: str) -> ParsedTraceHeader:
    span_id = parse_span_id(value)
    if span_id == INVALID_SPAN_ID:
        logger.debug("Invalid Parent in X-Ray trace header: %r", value)
    return replace(parsed, span_id=span_id)


def _apply_sampled_flag(parsed: ParsedTraceHeader, value: str) -> ParsedTraceHeader:
    trace_flags = parse_sampled_flag(value)
    if trace_flags is None:
        logger.debug("Invalid Sampled flag in X-Ray trace header: %r", value)
    return replace(parsed, trace_flags=trace_flags)


def _apply_lineage(parsed: ParsedTraceHeader, value: str) -> ParsedTraceHeader:
    lineage = parse_lineage(value)
    if lineage is None:
        # An earlier valid Lineage is kept.
        logger.debug("Invalid Lineage in X-Ray trace header: %r", value)
        return parsed
    return replace(parsed, lineage=lineage)


FIELD_HANDLERS: Dict[str, Callable[[ParsedTraceHeader, str], ParsedTraceHeader]] = {
    TRACE_ID_KEY: _apply_trace_id,
    PARENT_ID_KEY: _apply_span_id,
    SAMPLED_FLAG_KEY: _apply_sampled_flag,
    LINEAGE_KEY: _apply_lineage,
}


def parse_trace_header(header: str) -> ParsedTraceHeader:
    """
    Parse a header value into its recognised fields.

    Unknown keys are ignored. Never raises; malformed fields degrade to the
    invalid sentinels (ids), None (sampling) or are dropped (lineage).
    """
    parsed = ParsedTraceHeader()
    for key, value in iter_header_fields(header):
        handler = FIELD_HANDLERS.get(key)
        if handler is not None:
            parsed = handler(parsed, value)
    return parsed


def format_trace_header(
    trace_id_hex: str,
    span_id_hex: str,
    sampled: bool,
    lineage: Optional[str] = None,
) -> str:
    """
    Assemble a header value.

    ``lineage`` is written verbatim when non-empty; it is not validated here.
    """
    fields = [
        (TRACE_ID_KEY, to_xray_trace_id(trace_id_hex)),
        (PARENT_ID_KEY, span_id_hex),
        (SAMPLED_FLAG_KEY, IS_SAMPLED if sampled else NOT_SAMPLED),
    ]
    if lineage:
        fields.append((LINEAGE_KEY, lineage))
    return TRACE_HEADER_DELIMITER.join(KV_DELIMITER.join(field) for field in fields)

"""Per-field acceptance rules for the X-Ray trace header."""

from __future__ import annotations

import re
from typing import Optional
from urllib.parse import unquote

from opentelemetry.trace import INVALID_SPAN_ID, TraceFlags

from xray_propagator.utils.helpers import parse_span_id as _span_id_from_hex

IS_SAMPLED = "1"
NOT_SAMPLED = "0"

LINEAGE_DELIMITER = ":"
LINEAGE_HASH_LENGTH = 8
LINEAGE_MAX_REQUEST_COUNTER = 255
LINEAGE_MAX_LOOP_COUNTER = 32767

_TRACE_ID_HEX = re.compile(r"[0-9a-f]{32}", re.IGNORECASE)
_SPAN_ID_HEX = re.compile(r"[0-9a-f]{16}", re.IGNORECASE)
_LINEAGE_HASH = re.compile(r"[0-9a-f]{%d}" % LINEAGE_HASH_LENGTH, re.IGNORECASE)
_COUNTER = re.compile(r"[0-9]+")


def _is_all_zero(value: str) -> bool:
    return not value.strip("0")


def is_valid_trace_id_hex(value: str) -> bool:
    """True for 32 hex characters that are not all zero."""
    return bool(_TRACE_ID_HEX.fullmatch(value)) and not _is_all_zero(value)


def is_valid_span_id_hex(value: str) -> bool:
    """True for 16 hex characters that are not all zero."""
    return bool(_SPAN_ID_HEX.fullmatch(value)) and not _is_all_zero(value)


def parse_span_id(value: str) -> int:
    """Return the span id carried by a ``Parent`` value, or ``INVALID_SPAN_ID``."""
    if not is_valid_span_id_hex(value):
        return INVALID_SPAN_ID
    return _span_id_from_hex(value)


def parse_sampled_flag(value: str) -> Optional[TraceFlags]:
    """
    Map a ``Sampled`` value to trace flags.

    Only the exact literals ``"0"`` and ``"1"`` resolve; anything else
    returns None (sampling unresolved).
    """
    if value == NOT_SAMPLED:
        return TraceFlags(TraceFlags.DEFAULT)
    if value == IS_SAMPLED:
        return TraceFlags(TraceFlags.SAMPLED)
    return None


def _parse_counter(value: str, upper_bound: int) -> Optional[int]:
    if not _COUNTER.fullmatch(value):
        return None
    counter = int(value)
    if counter > upper_bound:
        return None
    return counter


def is_valid_lineage(value: str) -> bool:
    """
    Check a ``Lineage`` value of the form ``<request>:<hash>:<loop>``.

    The request counter must be in [0, 255], the hash exactly 8 hex
    characters and the loop counter in [0, 32767].
    """
    parts = value.split(LINEAGE_DELIMITER)
    if len(parts) != 3:
        return False

    request_counter, resource_hash, loop_counter = parts
    return (
        _parse_counter(request_counter, LINEAGE_MAX_REQUEST_COUNTER) is not None
        and bool(_LINEAGE_HASH.fullmatch(resource_hash))
        and _parse_counter(loop_counter, LINEAGE_MAX_LOOP_COUNTER) is not None
    )


def parse_lineage(value: str) -> Optional[str]:
    """Return the percent-decoded lineage value, or None when it is rejected."""
    if not is_valid_lineage(value):
        return None
    return unquote(value)

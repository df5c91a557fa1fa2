"""Immutable trace identity carried by the X-Ray header."""

from __future__ import annotations

from dataclasses import dataclass

from opentelemetry.trace import SpanContext as OTelSpanContext, TraceFlags

from xray_propagator.context.validators import is_valid_span_id_hex, is_valid_trace_id_hex
from xray_propagator.utils.helpers import (
    format_span_id,
    format_trace_id,
    parse_span_id,
    parse_trace_id,
)


@dataclass(frozen=True)
class TraceContext:
    """Span identity as carried across the X-Ray header, ids as lowercase hex."""

    trace_id: str  # 32 lowercase hex chars
    span_id: str  # 16 lowercase hex chars
    sampled: bool = False
    is_remote: bool = False

    def is_valid(self) -> bool:
        return bool(
            self.trace_id
            and self.span_id
            and is_valid_trace_id_hex(self.trace_id)
            and is_valid_span_id_hex(self.span_id)
        )

    def to_otel(self) -> OTelSpanContext:
        """Convert to an OTel SpanContext (integer ids)."""
        trace_flags = TraceFlags(TraceFlags.SAMPLED if self.sampled else TraceFlags.DEFAULT)
        return OTelSpanContext(
            trace_id=parse_trace_id(self.trace_id),
            span_id=parse_span_id(self.span_id),
            is_remote=self.is_remote,
            trace_flags=trace_flags,
        )

    @classmethod
    def from_otel(cls, otel_context: OTelSpanContext) -> "TraceContext":
        """Convert an OTel SpanContext to a TraceContext."""
        return cls(
            trace_id=format_trace_id(otel_context.trace_id),
            span_id=format_span_id(otel_context.span_id),
            sampled=otel_context.trace_flags.sampled,
            is_remote=otel_context.is_remote,
        )

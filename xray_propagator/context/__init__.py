"""X-Ray trace header codec and propagators."""

from xray_propagator.context.baggage import get_lineage, set_lineage
from xray_propagator.context.header import (
    ParsedTraceHeader,
    format_trace_header,
    iter_header_fields,
    parse_trace_header,
)
from xray_propagator.context.propagators import (
    AWS_TRACE_HEADER_ENV_KEY,
    TRACE_HEADER_KEY,
    AwsXRayLambdaPropagator,
    AwsXRayPropagator,
    extract_lineage,
    extract_xray_context,
    format_xray_header,
    inject_xray_header,
    parse_xray_header,
)
from xray_propagator.context.span_context import TraceContext
from xray_propagator.context.trace_id import parse_xray_trace_id, to_xray_trace_id

__all__ = [
    "AwsXRayPropagator",
    "AwsXRayLambdaPropagator",
    "TRACE_HEADER_KEY",
    "AWS_TRACE_HEADER_ENV_KEY",
    "TraceContext",
    "ParsedTraceHeader",
    "iter_header_fields",
    "parse_trace_header",
    "format_trace_header",
    "to_xray_trace_id",
    "parse_xray_trace_id",
    "get_lineage",
    "set_lineage",
    "format_xray_header",
    "parse_xray_header",
    "inject_xray_header",
    "extract_xray_context",
    "extract_lineage",
]

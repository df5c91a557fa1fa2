"""HTTP server helpers for extracting context and creating server spans."""

from __future__ import annotations

from typing import Any, Dict, Optional

from opentelemetry.trace import SpanKind, Tracer

from xray_propagator.context import AwsXRayPropagator, TraceContext, extract_xray_context

_propagator = AwsXRayPropagator()


def extract_parent_context(headers: Dict[str, str]) -> Optional[TraceContext]:
    """Parse the X-Ray header from headers and return its TraceContext if valid."""
    return extract_xray_context(headers)


def start_server_span(
    tracer: Tracer,
    name: str,
    headers: Dict[str, str],
    attributes: Optional[Dict[str, Any]] = None,
):
    """
    Convenience helper to start a server span parented on the incoming
    X-Ray header.

    Returns the span context manager (caller should use 'with').
    """
    parent_ctx = _propagator.extract(headers)
    return tracer.start_as_current_span(
        name,
        context=parent_ctx,
        kind=SpanKind.SERVER,
        attributes=attributes,
    )

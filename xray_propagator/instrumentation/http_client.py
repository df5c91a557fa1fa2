"""HTTP client helpers for X-Ray header propagation."""

from __future__ import annotations

from typing import Dict, Optional

from opentelemetry.context import Context

from xray_propagator.context import AwsXRayPropagator

_propagator = AwsXRayPropagator()


def inject_headers(headers: Dict[str, str], context: Optional[Context] = None) -> Dict[str, str]:
    """
    Inject ``x-amzn-trace-id`` into the provided headers dict if the given
    (or current) context holds a valid span.

    Returns the same headers mapping for convenience.
    """
    _propagator.inject(headers, context=context)
    return headers

"""Access to the ``Lineage`` baggage entry."""

from __future__ import annotations

from typing import Optional

from opentelemetry import baggage
from opentelemetry.context import Context

from xray_propagator.context.header import LINEAGE_KEY


def get_lineage(context: Optional[Context] = None) -> Optional[str]:
    """Return the ``Lineage`` baggage value, or None when absent or empty."""
    value = baggage.get_baggage(LINEAGE_KEY, context=context)
    if not value:
        return None
    return str(value)


def set_lineage(value: str, context: Optional[Context] = None) -> Context:
    """
    Return a new context whose baggage carries ``value`` under ``Lineage``.

    Other baggage entries are copied over unchanged. The input context is
    not modified.
    """
    return baggage.set_baggage(LINEAGE_KEY, value, context=context)

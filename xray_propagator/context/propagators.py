"""AWS X-Ray trace header propagation built on OpenTelemetry's TextMapPropagator."""

from __future__ import annotations

import logging
import os
import typing
from typing import Dict, Optional

from opentelemetry import trace
from opentelemetry.context import Context
from opentelemetry.propagators.textmap import (
    CarrierT,
    Getter,
    Setter,
    TextMapPropagator,
    default_getter,
    default_setter,
)
from opentelemetry.trace import NonRecordingSpan, SpanContext, TraceFlags

from xray_propagator.context.baggage import get_lineage, set_lineage
from xray_propagator.context.header import format_trace_header, parse_trace_header
from xray_propagator.context.span_context import TraceContext
from xray_propagator.utils.helpers import format_span_id, format_trace_id

logger = logging.getLogger(__name__)

TRACE_HEADER_KEY = "x-amzn-trace-id"
AWS_TRACE_HEADER_ENV_KEY = "_X_AMZN_TRACE_ID"


class AwsXRayPropagator(TextMapPropagator):
    """
    Propagator for the AWS X-Ray trace header.

    See https://docs.aws.amazon.com/xray/latest/devguide/xray-concepts.html#xray-concepts-tracingheader

    Besides the span identity, a ``Lineage`` entry is carried between the
    header and the ``Lineage`` baggage key. Neither direction raises on bad
    input: extract returns the input context unchanged when the header is
    unusable, and inject writes nothing when there is no valid span.
    """

    def extract(
        self,
        carrier: CarrierT,
        context: Optional[Context] = None,
        getter: Getter[CarrierT] = default_getter,
    ) -> Context:
        if context is None:
            context = Context()

        trace_header = self._get_trace_header(carrier, getter)
        if not trace_header:
            return context

        parsed = parse_trace_header(trace_header)
        if parsed.trace_flags is None:
            # Sampled is mandatory; without it the whole header is ignored.
            logger.debug("X-Ray trace header without a usable Sampled flag: %r", trace_header)
            return context

        span_context = SpanContext(
            trace_id=parsed.trace_id,
            span_id=parsed.span_id,
            is_remote=True,
            trace_flags=parsed.trace_flags,
        )
        if span_context.is_valid:
            context = trace.set_span_in_context(NonRecordingSpan(span_context), context=context)

        if parsed.lineage is not None:
            context = set_lineage(parsed.lineage, context=context)

        return context

    def inject(
        self,
        carrier: CarrierT,
        context: Optional[Context] = None,
        setter: Setter[CarrierT] = default_setter,
    ) -> None:
        span_context = trace.get_current_span(context=context).get_span_context()
        if not span_context.is_valid:
            return

        sampled = (span_context.trace_flags & TraceFlags.SAMPLED) == TraceFlags.SAMPLED
        trace_header = format_trace_header(
            format_trace_id(span_context.trace_id),
            format_span_id(span_context.span_id),
            sampled,
            lineage=get_lineage(context),
        )
        setter.set(carrier, TRACE_HEADER_KEY, trace_header)

    @property
    def fields(self) -> typing.Set[str]:
        return {TRACE_HEADER_KEY}

    @staticmethod
    def _get_trace_header(carrier: CarrierT, getter: Getter[CarrierT]) -> Optional[str]:
        """Case-insensitive header lookup; the first value wins when several are present."""
        header_key = next(
            (
                key
                for key in getter.keys(carrier)
                if isinstance(key, str) and key.lower() == TRACE_HEADER_KEY
            ),
            None,
        )
        if header_key is None:
            return None

        raw_value = getter.get(carrier, header_key)
        if isinstance(raw_value, str):
            trace_header = raw_value
        elif isinstance(raw_value, (list, tuple)) and raw_value:
            trace_header = raw_value[0]
        else:
            return None

        if not isinstance(trace_header, str):
            return None
        return trace_header


class AwsXRayLambdaPropagator(AwsXRayPropagator):
    """
    X-Ray propagator with a fallback to the ``_X_AMZN_TRACE_ID`` environment
    variable that AWS Lambda sets for each invocation.

    The variable is only consulted when the carrier yields no valid span.
    """

    def extract(
        self,
        carrier: CarrierT,
        context: Optional[Context] = None,
        getter: Getter[CarrierT] = default_getter,
    ) -> Context:
        xray_context = super().extract(carrier, context=context, getter=getter)

        if trace.get_current_span(context=xray_context).get_span_context().is_valid:
            return xray_context

        trace_header = os.environ.get(AWS_TRACE_HEADER_ENV_KEY)
        if trace_header is None:
            return xray_context

        return super().extract(
            {TRACE_HEADER_KEY: trace_header},
            context=xray_context,
            getter=default_getter,
        )


_propagator = AwsXRayPropagator()


def format_xray_header(context: TraceContext, lineage: Optional[str] = None) -> str:
    """
    Format an X-Ray header value for a TraceContext.

    Returns an empty string when the context is not valid.
    """
    if not context.is_valid():
        return ""

    ctx = trace.set_span_in_context(NonRecordingSpan(context.to_otel()), context=Context())
    if lineage:
        ctx = set_lineage(lineage, context=ctx)

    carrier: Dict[str, str] = {}
    _propagator.inject(carrier, context=ctx)
    return carrier.get(TRACE_HEADER_KEY, "")


def parse_xray_header(header_value: str) -> Optional[TraceContext]:
    """Parse an X-Ray header value into a TraceContext, or None when unusable."""
    if not header_value:
        return None
    return extract_xray_context({TRACE_HEADER_KEY: header_value})


def inject_xray_header(
    headers: Dict[str, str],
    context: TraceContext,
    lineage: Optional[str] = None,
) -> None:
    """Set the ``x-amzn-trace-id`` header on ``headers`` when the context is valid."""
    header_value = format_xray_header(context, lineage=lineage)
    if header_value:
        headers[TRACE_HEADER_KEY] = header_value


def extract_xray_context(headers: Dict[str, str]) -> Optional[TraceContext]:
    """Extract the X-Ray header from headers (any key case) and return its TraceContext."""
    ctx = _propagator.extract(headers)
    otel_context = trace.get_current_span(context=ctx).get_span_context()
    if otel_context.is_valid:
        return TraceContext.from_otel(otel_context)
    return None


def extract_lineage(headers: Dict[str, str]) -> Optional[str]:
    """Return the validated ``Lineage`` value from the X-Ray header, if any."""
    ctx = _propagator.extract(headers)
    return get_lineage(ctx)

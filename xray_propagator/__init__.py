"""AWS X-Ray trace header propagation for OpenTelemetry."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from opentelemetry import propagate
from opentelemetry.baggage.propagation import W3CBaggagePropagator
from opentelemetry.propagators.composite import CompositePropagator
from opentelemetry.propagators.textmap import TextMapPropagator
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

from xray_propagator.config import XRayPropagatorConfig, load_config
from xray_propagator.context import (
    AWS_TRACE_HEADER_ENV_KEY,
    TRACE_HEADER_KEY,
    AwsXRayLambdaPropagator,
    AwsXRayPropagator,
    TraceContext,
    extract_lineage,
    extract_xray_context,
    format_xray_header,
    get_lineage,
    inject_xray_header,
    parse_xray_header,
    set_lineage,
)
from xray_propagator.errors import ConfigError, XRayPropagatorError

__version__ = "0.1.0"

logger = logging.getLogger(__name__)

# Global propagator that was active before init(), restored by shutdown()
_previous_textmap: Optional[TextMapPropagator] = None
_installed: Optional[TextMapPropagator] = None


def get_propagator(config: Optional[XRayPropagatorConfig] = None) -> TextMapPropagator:
    """Build the propagator described by ``config`` (defaults when None)."""
    config = config or XRayPropagatorConfig()

    if config.propagation.lambda_fallback:
        xray: TextMapPropagator = AwsXRayLambdaPropagator()
    else:
        xray = AwsXRayPropagator()

    if not config.propagation.composite:
        return xray
    return CompositePropagator([xray, TraceContextTextMapPropagator(), W3CBaggagePropagator()])


def init(
    config_file: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> TextMapPropagator:
    """
    Load configuration, build the X-Ray propagator and, unless
    ``propagation.set_global`` is false, install it as OpenTelemetry's
    global textmap propagator.

    Returns the propagator.
    """
    global _previous_textmap, _installed

    config = load_config(config_file=config_file, overrides=overrides)
    if config.logging.debug:
        logging.getLogger("xray_propagator").setLevel(logging.DEBUG)

    propagator = get_propagator(config)
    if not config.propagation.set_global:
        return propagator

    if _installed is not None:
        logger.warning("init() called again; replacing the installed X-Ray propagator")
    else:
        _previous_textmap = propagate.get_global_textmap()

    propagate.set_global_textmap(propagator)
    _installed = propagator
    logger.info("Installed %s as the global textmap propagator", type(propagator).__name__)
    return propagator


def shutdown() -> None:
    """Restore the global textmap propagator that was active before init()."""
    global _previous_textmap, _installed

    if _installed is None:
        return
    if _previous_textmap is not None:
        propagate.set_global_textmap(_previous_textmap)
    _previous_textmap = None
    _installed = None


__all__ = [
    "__version__",
    "init",
    "shutdown",
    "get_propagator",
    "AwsXRayPropagator",
    "AwsXRayLambdaPropagator",
    "TRACE_HEADER_KEY",
    "AWS_TRACE_HEADER_ENV_KEY",
    "TraceContext",
    "format_xray_header",
    "parse_xray_header",
    "inject_xray_header",
    "extract_xray_context",
    "extract_lineage",
    "get_lineage",
    "set_lineage",
    "XRayPropagatorConfig",
    "load_config",
    "XRayPropagatorError",
    "ConfigError",
]

"""HTTP instrumentation helpers."""

from xray_propagator.instrumentation.http_client import inject_headers as inject_http_headers
from xray_propagator.instrumentation.http_server import extract_parent_context, start_server_span

__all__ = [
    "inject_http_headers",
    "extract_parent_context",
    "start_server_span",
]

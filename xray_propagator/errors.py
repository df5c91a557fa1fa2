"""xray-propagator error hierarchy and exceptions.

The header codec itself never raises; these are used by configuration and
setup code only.
"""

from __future__ import annotations


class XRayPropagatorError(Exception):
    """Base exception for all xray-propagator errors."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class ConfigError(XRayPropagatorError):
    """Raised when configuration is invalid or unreadable."""
    pass

# domain/exceptions.py
from __future__ import annotations


class StepError(Exception):
    """Base class for failures that abort an HTTP request step."""


class ConfigError(StepError):
    """Required step input is missing or structurally invalid."""


class TransportError(StepError):
    """The HTTP exchange itself failed (connect, timeout, unparsable response)."""


class ValidationError(StepError):
    """The response body did not match the configured pattern."""

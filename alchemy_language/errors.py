"""Exceptions raised by the AlchemyLanguage client.

Transport failures are not wrapped: callers receive the ``httpx.HTTPError``
raised by the HTTP layer as-is.
"""

from __future__ import annotations

from typing import Optional


class AlchemyError(Exception):
    """Base class for errors raised by this package."""


class RequestCompositionError(AlchemyError, ValueError):
    """The caller asked for a request that cannot be built (raised before any I/O)."""


class DecodeError(AlchemyError):
    """The service answered, but the body does not match the expected model."""

    def __init__(self, operation: str, message: str):
        super().__init__(f"Could not decode {operation} response: {message}")
        self.operation = operation


class ServiceError(AlchemyError):
    """The service returned a well-formed payload with a non-OK status."""

    def __init__(self, operation: str, status: str, status_info: Optional[str] = None):
        detail = status_info or "no statusInfo supplied"
        super().__init__(f"{operation} call failed with status {status}: {detail}")
        self.operation = operation
        self.status = status
        self.status_info = status_info

"""Remote Error Classification - Infrastructure Layer

Structured errors from the SDK and HTTP client are mapped by type and
status code. Message matching is the fallback for anything else.
"""

import asyncio
from typing import Optional

import httpx
from google.genai import errors as genai_errors

from ...domain.entity.generation import ErrorKind

RATE_LIMIT_MARKERS = ("429", "rate limit", "quota", "resource_exhausted", "too many requests")
SERVER_MARKERS = ("500", "502", "503", "504", "internal", "unavailable", "overloaded", "no candidates")
NETWORK_MARKERS = (
    "network",
    "fetch",
    "timeout",
    "timed out",
    "connection",
    "xhr",
    "econnreset",
    "socket",
)


def classify_error_message(message: str) -> ErrorKind:
    """Last-resort classification of an exception message"""
    text = (message or "").lower()
    if any(marker in text for marker in RATE_LIMIT_MARKERS):
        return ErrorKind.RATE_LIMITED
    if any(marker in text for marker in SERVER_MARKERS):
        return ErrorKind.SERVER_ERROR
    if any(marker in text for marker in NETWORK_MARKERS):
        return ErrorKind.NETWORK_ERROR
    return ErrorKind.UNKNOWN


def _classify_status(code: Optional[int]) -> Optional[ErrorKind]:
    if code is None:
        return None
    if code == 429:
        return ErrorKind.RATE_LIMITED
    if code == 408:
        return ErrorKind.NETWORK_ERROR
    if code >= 500:
        return ErrorKind.SERVER_ERROR
    return None


def classify_exception(exc: BaseException) -> ErrorKind:
    """Map an exception raised before a response was obtained"""
    if isinstance(exc, genai_errors.APIError):
        kind = _classify_status(getattr(exc, "code", None))
        if kind is not None:
            return kind
        return classify_error_message(f"{exc.status} {exc.message}")

    if isinstance(exc, httpx.HTTPStatusError):
        kind = _classify_status(exc.response.status_code)
        if kind is not None:
            return kind

    if isinstance(exc, (httpx.TransportError, asyncio.TimeoutError, ConnectionError)):
        return ErrorKind.NETWORK_ERROR

    return classify_error_message(str(exc))

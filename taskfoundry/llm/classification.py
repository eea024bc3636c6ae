"""Failure classification for provider errors.

Every decision about whether a failed provider attempt is worth moving on
from is made here, from the error's message and status code.
"""

import re
from enum import Enum

from taskfoundry.llm.exceptions import ConfigurationError, QuotaExceededError


class FailureClass(Enum):
    """How the dispatcher should treat a failed attempt."""

    RETRYABLE = "retryable"
    FATAL = "fatal"


RETRYABLE_PATTERNS = [
    re.compile(r"429"),
    re.compile(r"503"),
    re.compile(r"502"),
    re.compile(r"timeout", re.IGNORECASE),
    re.compile(r"network", re.IGNORECASE),
    re.compile(r"temporarily", re.IGNORECASE),
    re.compile(r"rate limit", re.IGNORECASE),
    re.compile(r"quota", re.IGNORECASE),
]

# First match wins
_FAILURE_LABELS = [
    (re.compile(r"429|rate limit", re.IGNORECASE), "rate limited"),
    (re.compile(r"503"), "service unavailable"),
    (re.compile(r"502"), "server error"),
    (re.compile(r"timeout", re.IGNORECASE), "timeout"),
    (re.compile(r"network", re.IGNORECASE), "network error"),
    (re.compile(r"quota", re.IGNORECASE), "quota exhausted"),
    (re.compile(r"temporarily", re.IGNORECASE), "temporarily unavailable"),
]


def _error_surface(error: BaseException) -> list[str]:
    """Collect the strings the patterns are matched against."""
    surface = [str(error)]
    for attr in ("status_code", "code"):
        value = getattr(error, attr, None)
        if value is not None:
            surface.append(str(value))
    return surface


def classify_message(text: str) -> FailureClass:
    """Classify a raw error message.

    Args:
        text: The error message (may embed an HTTP status and body).

    Returns:
        RETRYABLE if any transient pattern matches, FATAL otherwise.
    """
    if any(pattern.search(text or "") for pattern in RETRYABLE_PATTERNS):
        return FailureClass.RETRYABLE
    return FailureClass.FATAL


def classify_error(error: BaseException) -> FailureClass:
    """Classify an exception raised by a provider attempt.

    Misconfiguration and an exhausted free-tier allowance are fatal whatever
    their message says.
    """
    if isinstance(error, (ConfigurationError, QuotaExceededError)):
        return FailureClass.FATAL
    for text in _error_surface(error):
        if classify_message(text) is FailureClass.RETRYABLE:
            return FailureClass.RETRYABLE
    return FailureClass.FATAL


def is_retryable(error: BaseException) -> bool:
    return classify_error(error) is FailureClass.RETRYABLE


def describe_failure(error: BaseException) -> str:
    """Short human label for an error, e.g. "rate limited"."""
    if isinstance(error, QuotaExceededError):
        return "free tier limit reached"
    if isinstance(error, ConfigurationError):
        return "not configured"
    for text in _error_surface(error):
        for pattern, label in _FAILURE_LABELS:
            if pattern.search(text):
                return label
    return "error"

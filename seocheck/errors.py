"""
Error taxonomy for audit runs.

Every failure that crosses a check boundary is turned into a CategorizedError
by `classify`. The kind decides what the resilience layer does with it:

  Network     transient, retried with backoff
  Browser     page / DOM evaluation fault, not retried
  Validation  bad config or input, fatal before the browser starts
  Unknown     anything else, treated as non-retryable
"""
from __future__ import annotations

import re
import socket
from enum import Enum
from typing import Any, Dict, Optional

import requests


class ErrorKind(str, Enum):
    NETWORK = "Network"
    BROWSER = "Browser"
    VALIDATION = "Validation"
    UNKNOWN = "Unknown"


class CategorizedError(Exception):
    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None, kind: Optional[ErrorKind] = None):
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = dict(context or {})
        if kind is not None:
            self.kind = kind

    @property
    def retryable(self) -> bool:
        return self.kind == ErrorKind.NETWORK

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "message": self.message, "context": dict(self.context)}

    def __str__(self) -> str:
        return self.message


class NetworkError(CategorizedError):
    kind = ErrorKind.NETWORK


class BrowserError(CategorizedError):
    kind = ErrorKind.BROWSER


class ValidationError(CategorizedError):
    kind = ErrorKind.VALIDATION


class UnknownError(CategorizedError):
    kind = ErrorKind.UNKNOWN


class ConfigError(ValidationError):
    pass


_KIND_CLASSES = {
    ErrorKind.NETWORK: NetworkError,
    ErrorKind.BROWSER: BrowserError,
    ErrorKind.VALIDATION: ValidationError,
    ErrorKind.UNKNOWN: UnknownError,
}

# order matters: a Playwright "page.evaluate: Timeout 30000ms exceeded" is a timeout first
_PATTERNS = [
    (ErrorKind.NETWORK, re.compile(
        r"timeout|timed out|econnrefused|connection refused|econnreset|connection reset|"
        r"connection aborted|enotfound|getaddrinfo|name or service not known|dns|net::err_|"
        r"socket hang up|network|max retries exceeded|temporarily unavailable",
        re.IGNORECASE,
    )),
    (ErrorKind.BROWSER, re.compile(
        r"evaluat|execution context|target (page, context or browser )?(has been )?closed|"
        r"page (has been )?closed|browser has been closed|domexception|selector|locator|"
        r"protocol error|frame (was )?detached|javascript|is not a function|cannot read propert",
        re.IGNORECASE,
    )),
    (ErrorKind.VALIDATION, re.compile(
        r"invalid|validation|malformed|unsupported|unknown preset|must be|config",
        re.IGNORECASE,
    )),
]

_NETWORK_TYPES = (
    requests.exceptions.ConnectionError,
    requests.exceptions.Timeout,
    TimeoutError,
    ConnectionError,
    socket.gaierror,
)


def _message_of(thrown: Any) -> str:
    if isinstance(thrown, BaseException):
        msg = str(thrown)
        return msg or type(thrown).__name__
    if thrown is None:
        return "Unknown error"
    return str(thrown)


def kind_for_message(message: str) -> ErrorKind:
    for kind, pattern in _PATTERNS:
        if pattern.search(message or ""):
            return kind
    return ErrorKind.UNKNOWN


def classify(thrown: Any) -> CategorizedError:
    """Converts any thrown value into a CategorizedError. Already categorized errors pass through."""
    if isinstance(thrown, CategorizedError):
        return thrown

    message = _message_of(thrown)
    if isinstance(thrown, _NETWORK_TYPES):
        kind = ErrorKind.NETWORK
    else:
        kind = kind_for_message(message)

    err = _KIND_CLASSES[kind](message)
    if thrown is not None:
        err.context["originalError"] = repr(thrown)
    if isinstance(thrown, BaseException):
        err.__cause__ = thrown
    return err


def as_kind(thrown: Any, kind: ErrorKind, context: Optional[Dict[str, Any]] = None) -> CategorizedError:
    """Re-wraps a failure as the given kind, keeping its message and context."""
    base = classify(thrown)
    if base.kind == kind:
        if context:
            base.context.update(context)
        return base
    err = _KIND_CLASSES[kind](base.message, {**base.context, **(context or {})})
    err.__cause__ = base.__cause__ or (thrown if isinstance(thrown, BaseException) else None)
    return err

"""
Domain exceptions for configuration pushes.

The push orchestrator raises these from its transport layer; the failure
classifier recognises them when it walks a failed attempt's exception graph,
and the entity-error parser raises :class:`ResponseParseError` when an
admin-API body cannot be interpreted at all.

Every exception carries the same envelope as the rest of the codebase::

    status_code  -- HTTP-ish status describing the failure
    message      -- human-readable description
    details      -- optional structured payload

Keeping the envelope uniform lets callers log or surface any of them without
type-switching.
"""

from typing import Any, Iterable, List, Optional


class AppException(Exception):
    """Base exception for all application-level errors."""

    def __init__(self, status_code: int, message: str, details: Any = None):
        self.status_code = status_code
        self.message = message
        self.details = details
        super().__init__(message)


# ────────────────────────────────────────────────────────────────────────────
# Push errors  (raised by the external transport, inspected by the classifier)
# ────────────────────────────────────────────────────────────────────────────


class AdminAPIError(AppException):
    """The gateway admin API answered with a non-2xx status."""

    def __init__(self, status_code: int, message: str, raw: bytes = b""):
        super().__init__(status_code=status_code, message=message, details=raw)
        self.raw = raw

    @property
    def is_conflict(self) -> bool:
        """True when the admin API rejected the push with HTTP 409."""
        return self.status_code == 409


class ConfigConflictError(AppException):
    """
    The gateway's stored configuration changed concurrently with this push.

    May wrap the error that revealed the conflict, or nothing at all; an
    empty wrapper still means "conflict".
    """

    def __init__(self, err: Optional[BaseException] = None):
        self.err = err
        message = "configuration conflict"
        if err is not None:
            message = f"configuration conflict: {err}"
        super().__init__(status_code=409, message=message)


class ErrorArray(AppException):
    """Aggregate of independent errors collected during one push attempt."""

    def __init__(self, errors: Iterable[BaseException]):
        self.errors: List[BaseException] = list(errors)
        joined = "; ".join(str(e) for e in self.errors) or "no errors"
        super().__init__(
            status_code=500,
            message=f"{len(self.errors)} errors occurred: {joined}",
        )


class PushNetworkError(AppException, ConnectionError):
    """
    The admin API could not be reached (DNS, refused, reset, timeout).

    Also a :class:`ConnectionError`, so plain ``except ConnectionError``
    handlers catch it.
    """

    def __init__(self, message: str):
        super().__init__(status_code=503, message=message)


# ────────────────────────────────────────────────────────────────────────────
# Parse errors  (raised by the entity-error parser)
# ────────────────────────────────────────────────────────────────────────────


class ResponseParseError(AppException):
    """The admin API's error body is not something we can itemize."""

    def __init__(self, message: str, details: Any = None):
        super().__init__(status_code=502, message=message, details=details)

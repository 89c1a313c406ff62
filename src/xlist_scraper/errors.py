"""Error taxonomy for stable module boundaries."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    LOGIN_REQUIRED = "login_required"
    RATE_LIMITED = "rate_limited"
    EMPTY_OR_PRIVATE = "empty_or_private"
    TIMEOUT = "timeout"
    SESSION = "session"
    INTERNAL = "internal"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class FieldIssue:
    field: str
    constraint: str

    def __str__(self) -> str:
        return f"{self.field}: {self.constraint}"


class XListScraperError(Exception):
    """Base exception for xlist-scraper."""

    kind: ErrorKind = ErrorKind.INTERNAL


class ValidationError(XListScraperError):
    """Raised when input is rejected before any extraction starts."""

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, details: list[FieldIssue] | tuple[FieldIssue, ...] = ()) -> None:
        super().__init__(message)
        self.details: tuple[FieldIssue, ...] = tuple(details)

    @classmethod
    def for_field(cls, field: str, constraint: str) -> ValidationError:
        return cls(f"Invalid value for '{field}': {constraint}.", [FieldIssue(field, constraint)])


class ConfigError(ValidationError):
    """Raised when file or environment configuration is invalid."""


class LoginRequiredError(XListScraperError):
    """Raised when the target shows a sign-in wall."""

    kind = ErrorKind.LOGIN_REQUIRED


class RateLimitedError(XListScraperError):
    """Raised when the target shows a rate-limit notice."""

    kind = ErrorKind.RATE_LIMITED


class EmptyOrPrivateError(XListScraperError):
    """Raised when no items render after best-effort waiting."""

    kind = ErrorKind.EMPTY_OR_PRIVATE


class ScrapeTimeoutError(XListScraperError):
    """Raised when a session exceeds its deadline."""

    kind = ErrorKind.TIMEOUT


class SessionError(XListScraperError):
    """Raised for browser/session management and navigation failures."""

    kind = ErrorKind.SESSION


class InternalError(XListScraperError):
    """Raised for unexpected failures while harvesting."""

    kind = ErrorKind.INTERNAL


class ScrapeCancelledError(XListScraperError):
    """Raised when the orchestrating run is cancelled externally."""

    kind = ErrorKind.CANCELLED


def classify_exception(exc: BaseException) -> ErrorKind:
    """Map an exception to its error kind without inspecting message text."""
    if isinstance(exc, XListScraperError):
        return exc.kind
    return ErrorKind.INTERNAL

"""Data models for the dashboard."""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from src.models.errors import (
    AuthenticationError,
    AuthorizationError,
    CredentialError,
    JournalError,
    JournalValidationError,
    ServiceUnavailableError,
)


class NoticeKind(Enum):
    """What kind of outcome a notice reports."""

    SUCCESS = "success"
    VALIDATION = "validation"
    AUTHORIZATION = "authorization"
    AUTHENTICATION = "authentication"
    CREDENTIAL = "credential"
    SERVICE = "service"


class NoticeLevel(Enum):
    """Severity levels for notices."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class Notice:
    """A message shown to the user after an action."""

    timestamp: datetime
    kind: NoticeKind
    level: NoticeLevel
    title: str
    message: str
    retryable: bool = False
    read: bool = field(default=False)


@dataclass
class CoachStatus:
    """State of the AI coach panel.

    generation is bumped whenever the session changes so a reply that
    arrives for an older session is dropped.
    """

    is_loading: bool = False
    generation: int = 0
    result: str | None = None
    error_kind: NoticeKind | None = None


# Most specific classes first.
_ERROR_KINDS: list[tuple[type[JournalError], NoticeKind, NoticeLevel]] = [
    (JournalValidationError, NoticeKind.VALIDATION, NoticeLevel.WARNING),
    (AuthorizationError, NoticeKind.AUTHORIZATION, NoticeLevel.WARNING),
    (AuthenticationError, NoticeKind.AUTHENTICATION, NoticeLevel.WARNING),
    (CredentialError, NoticeKind.CREDENTIAL, NoticeLevel.ERROR),
    (ServiceUnavailableError, NoticeKind.SERVICE, NoticeLevel.ERROR),
]


def classify_error(error: JournalError) -> tuple[NoticeKind, NoticeLevel]:
    for error_type, kind, level in _ERROR_KINDS:
        if isinstance(error, error_type):
            return kind, level
    return NoticeKind.SERVICE, NoticeLevel.ERROR

# src/models/__init__.py
"""Shared models for the trading journal."""

from src.models.errors import (
    AuthenticationError,
    AuthorizationError,
    BackupFormatError,
    CoachKeyInvalidError,
    CoachKeyMissingError,
    CoachServiceError,
    CredentialError,
    GistCredentialError,
    GistError,
    JournalError,
    JournalValidationError,
    ServiceUnavailableError,
    StorageError,
    TradeValidationError,
    UserValidationError,
)

__all__ = [
    "AuthenticationError",
    "AuthorizationError",
    "BackupFormatError",
    "CoachKeyInvalidError",
    "CoachKeyMissingError",
    "CoachServiceError",
    "CredentialError",
    "GistCredentialError",
    "GistError",
    "JournalError",
    "JournalValidationError",
    "ServiceUnavailableError",
    "StorageError",
    "TradeValidationError",
    "UserValidationError",
]

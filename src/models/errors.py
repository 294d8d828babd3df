# src/models/errors.py
"""Error taxonomy shared across the journal application.

Collaborators raise these; the controller converts them into notices at
the boundary of the action that triggered them.
"""


class JournalError(Exception):
    """Base class for all application errors."""


class JournalValidationError(JournalError):
    """Input was rejected before any state changed."""


class TradeValidationError(JournalValidationError):
    """A draft trade could not be turned into a Trade."""


class BackupFormatError(JournalValidationError):
    """A backup document does not have the expected shape."""


class UserValidationError(JournalValidationError):
    """Account data was rejected (duplicate username, blank password...)."""


class AuthorizationError(JournalError):
    """The current user is not allowed to perform the action."""


class AuthenticationError(JournalError):
    """Credentials were wrong or the account is disabled."""


class CredentialError(JournalError):
    """A collaborator credential is missing or lacks the required scope."""


class CoachKeyMissingError(CredentialError):
    """No API key is configured for the AI coach."""


class CoachKeyInvalidError(CredentialError):
    """The AI coach API key was rejected."""


class GistCredentialError(CredentialError):
    """The gist token was rejected."""


class ServiceUnavailableError(JournalError):
    """A remote collaborator failed or timed out; the action may be retried."""


class StorageError(ServiceUnavailableError):
    """The persistence service failed."""


class CoachServiceError(ServiceUnavailableError):
    """The language-model service failed."""


class GistError(ServiceUnavailableError):
    """The gist backup service failed."""

"""Exception classes for the credential store."""


class AuthSyncError(Exception):
    """Base exception for all authsync errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class AuthenticationError(AuthSyncError):
    """Raised when authentication fails."""

    pass


class InvalidCredentialsError(AuthenticationError):
    """Raised when a username/password pair does not match a stored record.

    The message never reveals whether the username exists.
    """

    pass


class AuthValidationError(AuthSyncError):
    """Raised when user input fails validation (empty, too short, mismatched)."""

    pass


class StorageError(AuthSyncError):
    """Raised when the local key-value store cannot be read or written."""

    pass


class RemoteStoreError(AuthSyncError):
    """Raised by remote document stores when a request fails.

    The sync orchestrator treats this like any other remote failure and
    degrades to local-only operation.
    """

    pass


class ConfigurationError(AuthSyncError):
    """Raised when configuration is invalid."""

    pass

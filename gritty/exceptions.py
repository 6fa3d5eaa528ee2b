"""Gritty exception classes.

Every public operation raises a subclass of :class:`GrittyError`. Provider and
transport failures are translated into this taxonomy at the adapter boundary, so
no httpx, keyring or TOML exception type leaks to callers.
"""

from enum import Enum


class ErrorKind(Enum):
    """Canonical, provider-independent error classification."""

    NOT_FOUND = "not_found"
    SERIALIZATION = "serialization"
    DESERIALIZATION = "deserialization"
    AUTHENTICATION = "authentication"
    OTHER = "other"


class GrittyError(Exception):
    """Base exception for all gritty errors (kind ``OTHER``)."""

    kind = ErrorKind.OTHER

    def __init__(self, message: str, status: int | None = None) -> None:
        self.message = message
        self.status = status
        super().__init__(message)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={self.message!r}, "
            f"kind={self.kind.name}, status={self.status!r})"
        )


class NotFoundError(GrittyError):
    """Raised when a config, remote, secrets file or repository does not exist."""

    kind = ErrorKind.NOT_FOUND


class SerializationError(GrittyError):
    """Raised when a document or payload cannot be serialized."""

    kind = ErrorKind.SERIALIZATION


class DeserializationError(GrittyError):
    """Raised when a persisted document or API payload is malformed."""

    kind = ErrorKind.DESERIALIZATION


class AuthenticationError(GrittyError):
    """Raised when credentials are missing, invalid or rejected."""

    kind = ErrorKind.AUTHENTICATION


class ConfigNotFoundError(NotFoundError):
    """Raised when no config file exists at any of the searched locations."""

    pass


class SecretsFileNotFoundError(NotFoundError):
    """Raised when the configured secrets file does not exist."""

    pass


class RemoteNotFoundError(NotFoundError):
    """Raised when a remote name is not in the registry."""

    pass


class AuthNotFoundError(AuthenticationError):
    """Raised when no secret is stored for a remote."""

    pass


class DuplicateRemoteError(GrittyError):
    """Raised when registering a remote name that already exists."""

    pass


class UnsupportedAuthError(GrittyError):
    """Raised when an adapter cannot use the supplied Auth variant."""

    pass


class GitCommandError(GrittyError):
    """Raised when a local git subprocess exits with a non-zero status."""

    pass


def error_from_status(status: int, message: str) -> GrittyError:
    """
    Build the canonical error for an HTTP error status.

    Args:
        status: HTTP status code of the failed response
        message: Human-readable message reported by the provider

    Returns:
        NotFoundError for 404, AuthenticationError for 401, GrittyError otherwise.
        The status is preserved on the returned error.
    """
    if status == 404:
        return NotFoundError(message, status)
    if status == 401:
        return AuthenticationError(message, status)
    return GrittyError(message, status)


def error_from_os_error(exc: OSError) -> GrittyError:
    """Translate a filesystem error; missing files become NotFoundError."""
    message = f"{exc.strerror or exc}: {exc.filename}" if exc.filename else str(exc)
    if isinstance(exc, FileNotFoundError):
        return NotFoundError(message)
    return GrittyError(message)


def with_context(exc: GrittyError, message: str) -> GrittyError:
    """
    Return a copy of ``exc`` of the same class with ``message`` prefixed.

    Kind and status are preserved so callers can still branch on them.
    """
    return type(exc)(f"{message}: {exc.message}", exc.status)

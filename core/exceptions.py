"""Custom exception hierarchy for SketchVault application."""

from __future__ import annotations


class SketchVaultError(Exception):
    """Base exception for all SketchVault-specific errors."""

    def __init__(self, message: str, details: dict[str, str] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(SketchVaultError):
    """Raised when configuration is invalid or missing."""
    pass


class ValidationError(SketchVaultError):
    """Base class for payload validation errors."""
    pass


class PayloadEncodeError(ValidationError):
    """Raised when a drawing payload cannot be serialized to JSON."""
    pass


class ThumbnailDecodeError(ValidationError):
    """Raised when a thumbnail string is not valid base64."""
    pass


class StorageError(SketchVaultError):
    """Raised when storage operations fail."""
    pass


class ObjectNotFoundError(StorageError):
    """Raised by a backend when the requested object does not exist."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Object not found: {key}", {"key": key})
        self.key = key


class EmptyResponseError(StorageError):
    """Raised when a download succeeded but carried no body."""
    pass


class PayloadDecodeError(StorageError):
    """Raised when stored drawing data is not valid JSON."""
    pass


class RetryExhaustedError(StorageError):
    """Raised once every attempt of a storage primitive has failed."""

    def __init__(
        self,
        message: str,
        *,
        operation: str,
        key: str,
        attempts: int,
        last_error: BaseException | None = None,
    ) -> None:
        super().__init__(
            message,
            {
                "operation": operation,
                "key": key,
                "attempts": str(attempts),
                "last_error": str(last_error) if last_error is not None else "",
            },
        )
        self.operation = operation
        self.key = key
        self.attempts = attempts
        self.last_error = last_error


class UploadError(RetryExhaustedError):
    """Raised when an upload keeps failing."""
    pass


class DownloadError(RetryExhaustedError):
    """Raised when a download keeps failing."""
    pass


class DeleteError(RetryExhaustedError):
    """Raised when deleting a single object keeps failing."""
    pass

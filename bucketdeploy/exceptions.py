"""Custom exception hierarchy for bucketdeploy."""

from __future__ import annotations


class DeployError(Exception):
    """Base exception for all bucketdeploy-specific errors."""

    def __init__(self, message: str, details: dict[str, str] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(DeployError):
    """Raised when configuration is invalid or missing."""
    pass


class SourceNotFoundError(ConfigurationError):
    """Raised when the source directory does not exist."""
    pass


class BucketNotFoundError(ConfigurationError):
    """Raised when the destination bucket is not visible to the credentials."""
    pass


class StorageError(DeployError):
    """Raised when storage operations fail."""
    pass


class S3Error(StorageError):
    """Raised when S3 operations fail."""
    pass


class UploadError(StorageError):
    """Raised when a single object upload fails."""
    pass

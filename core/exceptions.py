"""Custom exception hierarchy for the generative media backend.

This module defines a typed exception hierarchy that enables precise error
handling and structured error responses across the application.

Exception Handling Flow:
    1. Provider, storage, or tool layer raises a typed exception
    2. FastAPI exception handler catches it (see main.py)
    3. Handler converts it to a structured JSON response
    4. Client receives an error envelope with code, message, and context

Families:
    ProviderError  - everything that goes wrong while talking to a media vendor
    StorageError   - everything that goes wrong while moving bytes to or from storage
    AuthenticationError - credential lookup and token refresh failures
"""

from __future__ import annotations

from typing import Sequence


class ServiceError(Exception):
    """Base exception for all service layer errors."""


class ValidationError(ServiceError):
    """Raised when input validation fails."""

    def __init__(self, message: str, field: str | None = None):
        self.message = message
        self.field = field
        super().__init__(self.message)


class ConfigurationError(ServiceError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, message: str, key: str | None = None):
        self.message = message
        self.key = key
        super().__init__(self.message)


class AuthenticationError(ServiceError):
    """Raised when authentication fails."""


class CredentialsNotConfiguredError(AuthenticationError):
    """Raised when no credentials can be located for a client."""


class TokenRefreshError(AuthenticationError):
    """Raised when an access token cannot be obtained or refreshed."""

    def __init__(self, message: str, scopes: Sequence[str] = (), original_error: Exception | None = None):
        self.message = message
        self.scopes = tuple(scopes)
        self.original_error = original_error
        super().__init__(self.message)


class ProviderError(ServiceError):
    """Raised when an external provider (AI API) fails."""

    def __init__(self, message: str, provider: str | None = None, original_error: Exception | None = None):
        self.message = message
        self.provider = provider
        self.original_error = original_error
        super().__init__(self.message)


class ProviderNotConfiguredError(ProviderError):
    """Raised when no provider is registered under the requested name."""

    def __init__(self, kind: str, requested: str | None, available: Sequence[str]):
        self.kind = kind
        self.requested = requested
        self.available = list(available)
        target = f"'{requested}'" if requested else "default"
        message = (
            f"No {kind} provider configured for {target}. "
            f"Available: {self.available}"
        )
        super().__init__(message, provider=requested)


class ModelNotFoundError(ProviderError):
    """Raised when a provider does not know the requested model."""

    def __init__(self, model: str, provider: str | None = None, available: Sequence[str] = ()):
        self.model = model
        self.available = list(available)
        super().__init__(
            f"Model '{model}' is not available. Available: {self.available}",
            provider=provider,
        )


class FeatureNotSupportedError(ProviderError):
    """Raised when a request uses a feature the provider or model lacks."""

    def __init__(self, feature: str, provider: str | None = None, model: str | None = None):
        self.feature = feature
        self.model = model
        scope = f"model '{model}'" if model else f"provider '{provider}'"
        super().__init__(f"Feature '{feature}' is not supported by {scope}", provider=provider)


class ProviderAPIError(ProviderError):
    """Raised when a vendor endpoint responds with an error or is unreachable.

    ``status_code`` is ``0`` when the request never produced an HTTP response.
    """

    def __init__(
        self,
        message: str,
        *,
        endpoint: str,
        status_code: int,
        provider: str | None = None,
        original_error: Exception | None = None,
    ):
        self.endpoint = endpoint
        self.status_code = status_code
        super().__init__(message, provider=provider, original_error=original_error)


class RateLimitError(ProviderError):
    """Raised when a provider rate limit is exceeded."""

    def __init__(self, message: str, retry_after: int | None = None, provider: str | None = None):
        super().__init__(message, provider=provider)
        self.retry_after = retry_after


class InvalidInputError(ProviderError):
    """Raised when a canonical request is rejected before reaching the vendor."""

    def __init__(self, message: str, field: str | None = None, provider: str | None = None):
        super().__init__(message, provider=provider)
        self.field = field


class GenerationFailedError(ProviderError):
    """Raised when the vendor accepted the job but reported a failure."""

    def __init__(
        self,
        message: str,
        provider: str | None = None,
        code: int | str | None = None,
        original_error: Exception | None = None,
    ):
        super().__init__(message, provider=provider, original_error=original_error)
        self.code = code


class OperationTimeoutError(ServiceError):
    """Raised when a long-running operation runs out of poll attempts."""

    def __init__(self, operation: str, attempts: int, waited_seconds: float):
        self.operation = operation
        self.attempts = attempts
        self.waited_seconds = waited_seconds
        self.message = (
            f"Operation {operation} did not complete after {attempts} polls "
            f"({waited_seconds:.1f}s)"
        )
        super().__init__(self.message)


class StorageError(ServiceError):
    """Base class for storage failures."""

    def __init__(self, message: str, location: str | None = None, operation: str | None = None):
        self.message = message
        self.location = location
        self.operation = operation
        super().__init__(self.message)


class InvalidLocationError(StorageError):
    """Raised when a storage location string cannot be parsed."""


class StorageOperationError(StorageError):
    """Raised when a storage transfer fails."""

    def __init__(
        self,
        message: str,
        location: str | None = None,
        operation: str | None = None,
        original_error: Exception | None = None,
    ):
        super().__init__(message, location=location, operation=operation)
        self.original_error = original_error


class StorageNotFoundError(StorageError):
    """Raised when a storage object does not exist."""


class StorageAuthError(StorageError):
    """Raised when storage credentials are missing or rejected."""


class MediaToolError(ServiceError):
    """Raised when ffmpeg or ffprobe fails."""

    def __init__(self, message: str, tool: str | None = None, returncode: int | None = None, stderr: str = ""):
        self.message = message
        self.tool = tool
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(self.message)


__all__ = [
    "AuthenticationError",
    "ConfigurationError",
    "CredentialsNotConfiguredError",
    "FeatureNotSupportedError",
    "GenerationFailedError",
    "InvalidInputError",
    "InvalidLocationError",
    "MediaToolError",
    "ModelNotFoundError",
    "OperationTimeoutError",
    "ProviderAPIError",
    "ProviderError",
    "ProviderNotConfiguredError",
    "RateLimitError",
    "ServiceError",
    "StorageAuthError",
    "StorageError",
    "StorageNotFoundError",
    "StorageOperationError",
    "TokenRefreshError",
    "ValidationError",
]

"""Utilities for formatting structured HTTP error responses."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import status

from core.exceptions import (
    ConfigurationError,
    FeatureNotSupportedError,
    InvalidInputError,
    InvalidLocationError,
    MediaToolError,
    ModelNotFoundError,
    OperationTimeoutError,
    ProviderError,
    ProviderNotConfiguredError,
    RateLimitError,
    ServiceError,
    StorageError,
    StorageNotFoundError,
    ValidationError,
)


def _build_error_payload(
    *,
    error: str,
    message: str,
    context: Dict[str, Any] | None = None,
) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"error": error, "message": message}
    if context:
        payload["context"] = context
    return payload


def _compact(values: Dict[str, Any]) -> Dict[str, Any] | None:
    context = {key: value for key, value in values.items() if value not in (None, "", [], ())}
    return context or None


def format_validation_error(exc: ValidationError) -> Dict[str, Any]:
    """Return a standard payload for :class:`ValidationError`."""

    context = {"field": exc.field} if getattr(exc, "field", None) else None
    return _build_error_payload(
        error="validation_error",
        message=str(exc),
        context=context,
    )


def format_configuration_error(exc: ConfigurationError) -> Dict[str, Any]:
    """Return a standard payload for :class:`ConfigurationError`."""

    context = {"key": exc.key} if getattr(exc, "key", None) else None
    return _build_error_payload(
        error="configuration_error",
        message=str(exc),
        context=context,
    )


def format_provider_error(exc: ProviderError) -> Dict[str, Any]:
    """Return a standard payload for :class:`ProviderError` and its subclasses."""

    values: Dict[str, Any] = {
        "provider": getattr(exc, "provider", None),
        "original_error": str(exc.original_error) if getattr(exc, "original_error", None) else None,
    }
    error = "provider_error"
    if isinstance(exc, ProviderNotConfiguredError):
        error = "provider_not_configured"
        values.update(kind=exc.kind, requested=exc.requested, available=list(exc.available))
    elif isinstance(exc, ModelNotFoundError):
        error = "model_not_found"
        values.update(model=exc.model, available=list(exc.available))
    elif isinstance(exc, FeatureNotSupportedError):
        error = "feature_not_supported"
        values.update(feature=exc.feature, model=exc.model)
    elif isinstance(exc, InvalidInputError):
        error = "invalid_input"
        values["field"] = exc.field
    elif isinstance(exc, RateLimitError):
        error = "rate_limited"
        values["retry_after"] = exc.retry_after
    elif getattr(exc, "status_code", None) is not None:
        values.update(status_code=exc.status_code, endpoint=getattr(exc, "endpoint", None))

    return _build_error_payload(error=error, message=str(exc), context=_compact(values))


def format_timeout_error(exc: OperationTimeoutError) -> Dict[str, Any]:
    return _build_error_payload(
        error="operation_timeout",
        message=str(exc),
        context={
            "timed_out": True,
            "operation": exc.operation,
            "attempts": exc.attempts,
            "waited_seconds": exc.waited_seconds,
        },
    )


def format_storage_error(exc: StorageError) -> Dict[str, Any]:
    error = "invalid_location" if isinstance(exc, InvalidLocationError) else "storage_error"
    return _build_error_payload(
        error=error,
        message=str(exc),
        context=_compact({"location": exc.location, "operation": exc.operation}),
    )


def format_media_tool_error(exc: MediaToolError) -> Dict[str, Any]:
    return _build_error_payload(
        error="media_tool_error",
        message=str(exc),
        context=_compact({"tool": exc.tool, "returncode": exc.returncode, "stderr": exc.stderr}),
    )


def format_service_error(exc: ServiceError) -> Dict[str, Any]:
    """Return a standard payload for generic service errors."""

    return _build_error_payload(
        error="service_error",
        message=str(exc),
    )


def format_error(exc: ServiceError) -> Dict[str, Any]:
    """Dispatch to the formatter matching ``exc``."""

    if isinstance(exc, ValidationError):
        return format_validation_error(exc)
    if isinstance(exc, ConfigurationError):
        return format_configuration_error(exc)
    if isinstance(exc, ProviderError):
        return format_provider_error(exc)
    if isinstance(exc, OperationTimeoutError):
        return format_timeout_error(exc)
    if isinstance(exc, StorageError):
        return format_storage_error(exc)
    if isinstance(exc, MediaToolError):
        return format_media_tool_error(exc)
    return format_service_error(exc)


def status_for_error(exc: ServiceError) -> int:
    """Map a service exception onto its HTTP status code."""

    if isinstance(exc, (ValidationError, InvalidInputError, FeatureNotSupportedError, ModelNotFoundError)):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, InvalidLocationError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, ProviderNotConfiguredError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, StorageNotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, ConfigurationError):
        return status.HTTP_500_INTERNAL_SERVER_ERROR
    if isinstance(exc, OperationTimeoutError):
        return status.HTTP_504_GATEWAY_TIMEOUT
    if isinstance(exc, RateLimitError):
        return status.HTTP_429_TOO_MANY_REQUESTS
    return status.HTTP_502_BAD_GATEWAY


__all__ = [
    "format_configuration_error",
    "format_error",
    "format_media_tool_error",
    "format_provider_error",
    "format_service_error",
    "format_storage_error",
    "format_timeout_error",
    "format_validation_error",
    "status_for_error",
]

"""Response envelope returned by every ``/api/v1`` route.

Success::

    {"code": 200, "success": true, "message": "Image generated",
     "data": {"provider": "imagen", "model": "...", "images": [...]}, "meta": null}

Failure (built by the ``ServiceError`` handler in ``main.py``)::

    {"code": 404, "success": false, "message": "No image provider ...",
     "data": {"error": "provider_not_configured", "message": "...", "context": {...}}, "meta": null}
"""

from __future__ import annotations

from typing import Any, Dict, Generic, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    code: int = Field(..., ge=100, le=599, description="HTTP status mirrored in the body")
    success: bool
    message: str
    data: Optional[T] = Field(None, description="Result payload, or the error detail on failure")
    meta: Optional[Dict[str, Any]] = Field(None, description="Listing counts and similar extras")


def api_response(
    *,
    code: int,
    message: str,
    data: Any = None,
    meta: Dict[str, Any] | None = None,
) -> Dict[str, Any]:
    """Build the JSON-ready envelope; ``success`` follows from ``code``."""

    return ApiResponse[Any](code=code, success=code < 400, message=message, data=data, meta=meta).model_dump()


def ok(message: str, data: Any = None, meta: Dict[str, Any] | None = None) -> Dict[str, Any]:
    return api_response(code=200, message=message, data=data, meta=meta)


def error(code: int, message: str, data: Any = None, meta: Dict[str, Any] | None = None) -> Dict[str, Any]:
    if code < 400:
        raise ValueError(f"error() needs a 4xx/5xx status, got {code}")
    return api_response(code=code, message=message, data=data, meta=meta)


__all__ = ["ApiResponse", "api_response", "error", "ok"]

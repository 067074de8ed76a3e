"""
Error payloads returned by the gateway.

Every error body has the same shape, {code, message, detail, context}, so
the pipeline client can report failures without knowing which endpoint
produced them.
"""
from __future__ import annotations

from typing import Any, NoReturn

from fastapi import HTTPException, Request


class ErrorCode:
    """Machine-readable `code` values."""
    DUPLICATE_OPPORTUNITY = "duplicate_opportunity"
    BULK_UPSERT_FAILED = "bulk_upsert_failed"
    DUPLICATE_USER = "duplicate_user"
    AI_UNAVAILABLE = "ai_unavailable"
    BRIEF_UNAVAILABLE = "brief_unavailable"
    READINESS_FAILED = "readiness_failed"
    INTERNAL_ERROR = "internal_error"


def build_error_payload(
    *,
    code: str,
    message: str,
    detail: Any = None,
    context: dict[str, Any] | None = None,
    request: Request | None = None,
) -> dict[str, Any]:
    payload_context = dict(context or {})
    if request is not None:
        # Request-scoped ids set by RequestLoggingMiddleware
        for key in ("request_id", "correlation_id"):
            payload_context.setdefault(key, getattr(request.state, key, None))
        payload_context.setdefault("path", request.url.path)
        payload_context.setdefault("method", request.method)

    return {
        "code": code,
        "message": message,
        "detail": detail,
        "context": payload_context,
    }


def raise_api_error(
    *,
    status_code: int,
    code: str,
    message: str,
    detail: Any = None,
    context: dict[str, Any] | None = None,
) -> NoReturn:
    """Abort the request with the unified payload as the HTTPException detail."""
    raise HTTPException(
        status_code=status_code,
        detail=build_error_payload(code=code, message=message, detail=detail, context=context),
    )

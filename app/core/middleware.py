"""
Request logging and error handling middleware.
"""
import time
import uuid
from typing import Callable

import structlog
from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from app.api.errors import ErrorCode, build_error_payload
from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs each request with a request id and its duration."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # Reuse incoming IDs when present
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        correlation_id = request.headers.get("X-Correlation-ID") or request_id
        request.state.request_id = request_id
        request.state.correlation_id = correlation_id
        structlog.contextvars.bind_contextvars(request_id=request_id, correlation_id=correlation_id)

        start_time = time.perf_counter()
        logger.info(
            f"Request started: {request.method} {request.url.path}",
            method=request.method,
            path=request.url.path,
            client_ip=request.client.host if request.client else None,
        )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                f"Request failed: {request.method} {request.url.path}",
                error=str(e),
            )
            raise
        finally:
            structlog.contextvars.unbind_contextvars("request_id", "correlation_id")

        logger.info(
            f"Request completed: {request.method} {request.url.path} - {response.status_code}",
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
        )

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Correlation-ID"] = correlation_id
        return response


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Turns unhandled exceptions into the unified 500 error payload."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            logger.exception(
                f"Unhandled error: {request.method} {request.url.path}",
                request_id=getattr(request.state, "request_id", None),
                error=str(e),
            )
            return JSONResponse(
                status_code=500,
                content=build_error_payload(
                    code=ErrorCode.INTERNAL_ERROR,
                    message="Internal server error",
                    detail=str(e) if settings.DEBUG else "An error occurred",
                    request=request,
                ),
            )

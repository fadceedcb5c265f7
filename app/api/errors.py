"""Unified API error response helpers."""
from __future__ import annotations

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from app.core.logging import get_logger
from app.services.record_store import StoreUnavailable

logger = get_logger(__name__)


def build_error_payload(
    *,
    code: str,
    message: str,
    detail: Any = None,
    context: dict[str, Any] | None = None,
    request: Request | None = None,
) -> dict[str, Any]:
    payload_context = context.copy() if context else {}
    if request is not None:
        payload_context.setdefault("request_id", getattr(request.state, "request_id", None))
        payload_context.setdefault("correlation_id", getattr(request.state, "correlation_id", None))
        payload_context.setdefault("path", request.url.path)
        payload_context.setdefault("method", request.method)

    return {
        "code": code,
        "message": message,
        "detail": detail,
        "context": payload_context,
    }


async def store_unavailable_handler(request: Request, exc: StoreUnavailable) -> JSONResponse:
    """503 instead of an empty result, so clients can retry."""
    logger.warning("store_unavailable", operation=exc.operation, path=request.url.path)
    return JSONResponse(
        status_code=503,
        content=build_error_payload(
            code="store_unavailable",
            message="Record store unavailable",
            detail=exc.operation,
            request=request,
        ),
    )

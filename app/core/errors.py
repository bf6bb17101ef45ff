from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.ai.errors import CompletionError, MissingCredentialsError, UpstreamServiceError, UpstreamTimeoutError

logger = logging.getLogger(__name__)

RETRY_AFTER_SECONDS = "5"


def completion_error_status(exc: CompletionError) -> tuple[int, dict[str, str] | None]:
    if isinstance(exc, MissingCredentialsError):
        return status.HTTP_500_INTERNAL_SERVER_ERROR, None
    if isinstance(exc, UpstreamTimeoutError):
        return status.HTTP_503_SERVICE_UNAVAILABLE, {"Retry-After": RETRY_AFTER_SECONDS}
    if isinstance(exc, UpstreamServiceError) and (exc.unreachable or exc.status_code == 429):
        return status.HTTP_503_SERVICE_UNAVAILABLE, {"Retry-After": RETRY_AFTER_SECONDS}
    return status.HTTP_500_INTERNAL_SERVER_ERROR, None


async def _completion_error_handler(request: Request, exc: CompletionError) -> JSONResponse:
    status_code, headers = completion_error_status(exc)
    logger.warning("request_failed path=%s code=%s status=%s", request.url.path, exc.code, status_code)
    return JSONResponse({"error": str(exc), "code": exc.code}, status_code=status_code, headers=headers)


async def _http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        {"error": exc.detail},
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("request_crashed path=%s", request.url.path)
    return JSONResponse({"error": "Failed to process request"}, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CompletionError, _completion_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)

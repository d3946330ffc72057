# bjjconnect/core/errors.py
from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from bjjconnect.core.exceptions import DomainError

logger = logging.getLogger(__name__)

GENERIC_SERVER_MESSAGE = "Internal server error"


def error_envelope(message: str, code: Optional[str] = None) -> dict[str, Any]:
    body: dict[str, Any] = {"success": False, "message": message}
    if code:
        body["error"] = code
    return body


def _parse_detail(detail: Any) -> tuple[str, Optional[str]]:
    if isinstance(detail, dict):
        message = detail.get("message") or detail.get("detail") or "Request failed"
        code = detail.get("code") if isinstance(detail.get("code"), str) else None
        return str(message), code
    if isinstance(detail, str):
        # Guards raise short snake_case details (e.g. "invalid_token")
        return detail.replace("_", " ").capitalize(), detail
    return "Request failed", None


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        msg = err.get("msg", "invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or "Invalid request"


async def _domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    logger.info(
        "domain_error",
        extra={"path": request.url.path, "code": exc.code, "status": exc.status_code},
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=error_envelope(exc.message, exc.code),
    )


async def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    message, code = _parse_detail(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_envelope(message, code),
        headers=getattr(exc, "headers", None),
    )


async def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_envelope(_format_validation_errors(exc), "validation_error"),
    )


async def _database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("database_error", extra={"path": request.url.path})
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_envelope(GENERIC_SERVER_MESSAGE, "database_error"),
    )


async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", extra={"path": request.url.path})
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_envelope(GENERIC_SERVER_MESSAGE, "internal_error"),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, _domain_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(HTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, _database_error_handler)
    app.add_exception_handler(Exception, _unhandled_exception_handler)

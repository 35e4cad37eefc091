"""Application error taxonomy and the JSON envelope it is rendered into."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from bierzmowanie.core.config import settings

logger = logging.getLogger(__name__)


class AppError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Unexpected server error"

    def __init__(self, message: str | None = None, *, detail: str | None = None) -> None:
        self.message = message or self.default_message
        self.detail = detail
        super().__init__(self.message)

    def payload(self) -> dict:
        return {"success": False, "message": self.message}


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request data"


class AuthenticationError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authenticated"

    EXPIRED = "expired"
    MALFORMED = "malformed"
    GENERIC = "generic"

    _ERROR_TYPES = {
        EXPIRED: "TOKEN_EXPIRED",
        MALFORMED: "INVALID_TOKEN",
        GENERIC: "AUTH_ERROR",
    }

    def __init__(self, message: str | None = None, *, reason: str = GENERIC, detail: str | None = None) -> None:
        super().__init__(message, detail=detail)
        self.reason = reason

    def payload(self) -> dict:
        body = super().payload()
        body["errorType"] = self._ERROR_TYPES.get(self.reason, "AUTH_ERROR")
        return body


class AccountNotFoundError(AuthenticationError):
    default_message = "Account no longer exists"


class AuthorizationError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Insufficient permissions"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class PersistenceError(AppError):
    default_message = "Database operation failed"

    def payload(self) -> dict:
        body = super().payload()
        if self.detail and not settings.is_production:
            body["error"] = self.detail
        return body


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()) if item != "body")
        message = error.get("msg", "invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or ValidationError.default_message


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("request_failed", extra={"path": request.url.path, "error": exc.detail or exc.message})
        else:
            logger.info(
                "request_rejected",
                extra={"path": request.url.path, "status_code": exc.status_code, "reason": exc.message},
            )
        return JSONResponse(status_code=exc.status_code, content=exc.payload())

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "message": _format_validation_errors(exc)},
        )

    @app.exception_handler(HTTPException)
    async def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

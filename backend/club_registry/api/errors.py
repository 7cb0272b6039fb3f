"""Global error handlers rendering every failure as the response envelope."""

from __future__ import annotations

from datetime import datetime, timezone

import asyncpg
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from club_registry.api.request_id import get_request_id
from club_registry.domain.common.exceptions import RegistryError
from club_registry.domain.common.schemas import ErrorObject, Metadata, ResponseEnvelope
from club_registry.obs import logging as obs_logging
from club_registry.settings import settings

_log = obs_logging.get_logger("club_registry.errors")

_ERROR_TYPES = {
    status.HTTP_400_BAD_REQUEST: "bad_request",
    status.HTTP_401_UNAUTHORIZED: "unauthorized",
    status.HTTP_403_FORBIDDEN: "forbidden",
    status.HTTP_404_NOT_FOUND: "not_found",
    status.HTTP_405_METHOD_NOT_ALLOWED: "method_not_allowed",
    status.HTTP_409_CONFLICT: "conflict",
}


def error_response(request: Request, status_code: int, error_type: str, detail: str) -> JSONResponse:
    envelope = ResponseEnvelope(
        api_version=settings.api_version,
        error=ErrorObject(
            id=get_request_id(request),
            code=status_code,
            error_type=error_type,
            detail=detail,
            source=request.url.path,
        ),
        meta=Metadata(timestamp=datetime.now(timezone.utc)),
    )
    response = JSONResponse(status_code=status_code, content=envelope.to_json())
    response.headers["X-Request-Id"] = envelope.error.id  # type: ignore[union-attr]
    return response


def install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(RegistryError)
    async def registry_exc_handler(request: Request, exc: RegistryError):  # type: ignore[override]
        return error_response(request, exc.status_code, exc.error_type, exc.detail)

    @app.exception_handler(StarletteHTTPException)
    async def http_exc_handler(request: Request, exc: StarletteHTTPException):  # type: ignore[override]
        error_type = _ERROR_TYPES.get(exc.status_code, "internal_server_error")
        return error_response(request, exc.status_code, error_type, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_exc_handler(request: Request, exc: RequestValidationError):  # type: ignore[override]
        detail = "; ".join(
            f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg')}" for error in exc.errors()
        )
        return error_response(request, status.HTTP_400_BAD_REQUEST, "bad_request", detail or "invalid request")

    @app.exception_handler(asyncpg.PostgresError)
    async def postgres_exc_handler(request: Request, exc: asyncpg.PostgresError):  # type: ignore[override]
        _log.error(
            "postgres_error",
            exc_info=exc,
            extra={"sqlstate": getattr(exc, "sqlstate", None), "request_id": get_request_id(request)},
        )
        return error_response(
            request, status.HTTP_500_INTERNAL_SERVER_ERROR, "internal_server_error", "storage failure"
        )

    @app.exception_handler(Exception)
    async def unhandled_exc_handler(request: Request, exc: Exception):  # type: ignore[override]
        _log.error("unhandled_error", exc_info=exc, extra={"request_id": get_request_id(request)})
        return error_response(
            request, status.HTTP_500_INTERNAL_SERVER_ERROR, "internal_server_error", "internal server error"
        )

# vidtube/core/errors.py
"""
Errores de la API y los handlers que los convierten en el sobre JSON
`{statusCode, message, success: false, errors?}`.

Los servicios lanzan `ApiError` (o una subclase); cualquier otra excepción
llega al handler genérico, se loguea con traceback y sale como 500.
"""
from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from vidtube.core.json import UTF8JSONResponse

log = logging.getLogger("vidtube.errors")


class ApiError(Exception):
    status_code = 500
    default_message = "Something went wrong"

    def __init__(self, message: str | None = None, errors: list[Any] | None = None, status_code: int | None = None):
        self.message = message or self.default_message
        self.errors = errors or []
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class BadRequestError(ApiError):
    status_code = 400
    default_message = "Bad request"


class UnauthorizedError(ApiError):
    status_code = 401
    default_message = "Unauthorized request"


class ForbiddenError(ApiError):
    status_code = 403
    default_message = "Forbidden"


class NotFoundError(ApiError):
    status_code = 404
    default_message = "Not found"


class ConflictError(ApiError):
    status_code = 409
    default_message = "Conflict"


class UpstreamError(ApiError):
    """Fallo del almacenamiento de media u otro colaborador externo."""
    status_code = 500
    default_message = "Upstream service failed"


def error_body(status_code: int, message: str, errors: list[Any] | None = None) -> dict:
    body: dict[str, Any] = {
        "statusCode": status_code,
        "message": message,
        "success": False,
    }
    if errors:
        body["errors"] = errors
    return body


async def _api_error_handler(request: Request, exc: ApiError):
    return UTF8JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.status_code, exc.message, exc.errors),
    )


async def _http_error_handler(request: Request, exc: StarletteHTTPException):
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return UTF8JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.status_code, message),
        headers=getattr(exc, "headers", None),
    )


async def _validation_error_handler(request: Request, exc: RequestValidationError):
    errors = _format_errors(exc.errors())
    first = errors[0]["message"] if errors else "Invalid request"
    return UTF8JSONResponse(status_code=400, content=error_body(400, first, errors))


async def _unhandled_error_handler(request: Request, exc: Exception):
    log.exception("unhandled error on %s %s", request.method, request.url.path)
    return UTF8JSONResponse(status_code=500, content=error_body(500, "Internal server error"))


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, _api_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)


def _format_errors(raw: list[dict]) -> list[dict]:
    return [
        {
            "field": ".".join(str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path", "form")),
            "message": err.get("msg", "invalid value"),
        }
        for err in raw
    ]


def bad_request_from(exc: ValidationError) -> BadRequestError:
    """ValidationError de pydantic levantado a mano (p. ej. formularios multipart) -> 400."""
    errors = _format_errors(exc.errors())
    return BadRequestError(errors[0]["message"] if errors else "Invalid request", errors)

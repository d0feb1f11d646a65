# src/services/api/exception_handlers.py
"""
Обработчики исключений FastAPI.

Все ошибки превращаются в {"error": ..., "error_code": ...};
внутренняя ошибка никогда не роняет процесс.
"""

from __future__ import annotations

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.common.logger import log_error, log_warning
from src.shared.exceptions import ClientInputError, ServiceError
from src.shared.models.common import ErrorResponse


def _error_response(status_code: int, message: str, error_code: str) -> JSONResponse:
    body = ErrorResponse(error=message, error_code=error_code)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        await log_error(f"{request.method} {request.url.path}: {exc.message}")
    else:
        await log_warning(f"{request.method} {request.url.path}: {exc.message}")
    return _error_response(exc.status_code, exc.message, exc.error_code)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Невалидное тело или параметры пути считаются ошибкой клиента (400)
    fields = [".".join(str(part) for part in error["loc"][1:]) for error in exc.errors()]
    message = f"Invalid or missing fields: {', '.join(f for f in fields if f)}" if any(fields) else "Invalid request"
    await log_warning(f"{request.method} {request.url.path}: {message}")
    return _error_response(status.HTTP_400_BAD_REQUEST, message, ClientInputError.error_code)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    await log_error(f"Необработанная ошибка {request.method} {request.url.path}: {exc}", exc_info=True)
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", "internal_error")


EXCEPTION_HANDLERS = {
    ServiceError: service_error_handler,
    RequestValidationError: validation_error_handler,
    Exception: unhandled_exception_handler,
}


def register_exception_handlers(app: FastAPI) -> None:
    for exception_class, handler in EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exception_class, handler)

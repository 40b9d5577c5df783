"""FastAPI exception handlers: map domain errors to the marketplace error shape.

Every error response is ``{"message": ..., "errorType": ...}`` plus any
detail the error carries (``invalidProductId``, ``availableStock``).
Unexpected failures are logged with their detail and reported as a generic
500.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError

from marketplace.shared.errors import MarketplaceError

logger = structlog.get_logger(__name__)


def _flatten(messages) -> str:
    if isinstance(messages, dict):
        return "; ".join(
            f"{field}: {', '.join(str(m) for m in errors) if isinstance(errors, list) else errors}"
            for field, errors in messages.items()
        )
    return str(messages)


def _error(status_code: int, message: str, error_type: str, **details) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message, "errorType": error_type, **details})


async def marketplace_error_handler(request: Request, exc: MarketplaceError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def not_found_handler(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    message = getattr(exc, "message", None) or (str(exc.args[0]) if exc.args else "Not found")
    return _error(404, message, "NotFoundError")


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return _error(400, _flatten(exc.messages), "ValidationError")


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'] if part != 'body')}: {error['msg']}" for error in exc.errors()
    )
    return _error(400, message, "ValidationError")


async def internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled error",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        error_class=type(exc).__name__,
    )
    return _error(500, "Something went wrong", "InternalError")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(MarketplaceError, marketplace_error_handler)
    app.add_exception_handler(ObjectNotFoundError, not_found_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, internal_error_handler)

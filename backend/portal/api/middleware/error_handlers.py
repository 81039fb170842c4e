"""
Error Handlers

Every failure leaves the API as ``{"error": {code, message, details}}``
with the request's correlation id in the ``X-Correlation-Id`` header.
"""
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from ...domain.errors import DomainError
from ...utils.logger import get_logger, get_correlation_id

logger = get_logger(__name__)


def _error_response(status_code: int, error: DomainError) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(error.to_dict()),
        headers={"X-Correlation-Id": get_correlation_id() or ""}
    )


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Business outcomes: denied, not found, invalid state, upstream lookup down"""
    log = logger.error if exc.http_status >= 500 else logger.warning
    log(
        f"{request.method} {request.url.path}: {exc.error_code} - {exc.message}",
        extra={"error_code": exc.error_code}
    )
    return _error_response(exc.http_status, exc)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Body or parameters do not match the route's schema"""
    logger.warning(
        f"{request.method} {request.url.path}: request validation failed: {exc.errors()}",
        extra={"error_code": "VALIDATION_ERROR"}
    )
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        DomainError(
            "Request validation failed",
            details={"errors": exc.errors()},
            error_code="VALIDATION_ERROR"
        )
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"{request.method} {request.url.path}: unexpected error: {exc}", exc_info=True)
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        DomainError(
            "An unexpected error occurred",
            details={"hint": "Check server logs for details"},
            error_code="INTERNAL_ERROR"
        )
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, general_exception_handler)

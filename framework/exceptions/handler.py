from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from starlette.exceptions import HTTPException as StarletteHTTPException
from framework.logging.logger import get_logger
from framework.response import ResponseModel
from typing import Any
from framework.config import settings

logger = get_logger("exception_handler")


class BusinessException(Exception):
    """Base class for business exceptions."""
    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, status_code: int = None, detail: Any = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.detail = detail

    def content(self) -> dict:
        return ResponseModel.fail(self.message)


class ValidationError(BusinessException):
    """Required field missing or malformed."""
    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(BusinessException):
    """A record with the same unique key already exists."""
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(BusinessException):
    status_code = status.HTTP_404_NOT_FOUND


class AuthError(BusinessException):
    status_code = status.HTTP_401_UNAUTHORIZED


class UnroutedError(NotFoundError):
    def __init__(self, message: str = "API Endpoint Not Found"):
        super().__init__(message)


class GatewayError(BusinessException):
    """Downstream Azure call failed or answered with an unexpected shape."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def content(self) -> dict:
        return ResponseModel.error(self.message, self.detail)


def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler."""
    trace_id = getattr(request.state, "trace_id", "unknown")

    if isinstance(exc, GatewayError):
        logger.error(f"Trace[{trace_id}] - GatewayError: {exc.message} | Details: {exc.detail}")
        return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.content()))

    if isinstance(exc, BusinessException):
        logger.warning(f"Trace[{trace_id}] - {type(exc).__name__}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.content()))

    if isinstance(exc, RequestValidationError):
        logger.warning(f"Trace[{trace_id}] - RequestValidationError: {exc.errors()}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=jsonable_encoder(ResponseModel.fail("Invalid request parameters", errors=exc.errors()))
        )

    if isinstance(exc, StarletteHTTPException):
        if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
            logger.info(f"Trace[{trace_id}] - No route matched for {request.method} {request.url.path}")
            unrouted = UnroutedError()
            return JSONResponse(status_code=unrouted.status_code, content=unrouted.content())
        return JSONResponse(
            status_code=exc.status_code,
            content=ResponseModel.fail(str(exc.detail)),
            headers=getattr(exc, "headers", None)
        )

    logger.opt(exception=exc).error(f"Trace[{trace_id}] - UncaughtException: {str(exc)}")

    body = ResponseModel.fail("Internal Server Error")
    if settings.DEBUG:
        body["trace_id"] = trace_id
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body)

import logging

from fastapi import HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


def create_response(
    data=None,
    status_code: int = status.HTTP_200_OK,
    message: str | None = None,
) -> JSONResponse:
    """Return a JSON payload; a message is merged into object payloads."""
    content = jsonable_encoder(data)
    if message is not None:
        content = {"message": message, **(content or {})}
    return JSONResponse(status_code=status_code, content=content)


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


def handle_exception(
    error: Exception,
    context: str = "Unhandled error",
    fallback_message: str = "Internal server error",
) -> JSONResponse:
    """Coerce raised errors into the shared error structure.

    Client errors keep their detail. Anything else is logged with its
    traceback and reported to the caller as a generic 500.
    """
    if isinstance(error, HTTPException):
        detail = error.detail if isinstance(error.detail, str) else str(error.detail)
        return error_response(detail, error.status_code)

    logger.error("%s: %s", context, error, exc_info=error)
    return error_response(fallback_message, status.HTTP_500_INTERNAL_SERVER_ERROR)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"message": detail}, headers=exc.headers)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if not errors:
        return error_response("Invalid request", status.HTTP_400_BAD_REQUEST)

    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
    message = first.get("msg", "Invalid value")
    return error_response(
        f"{location}: {message}" if location else message,
        status.HTTP_400_BAD_REQUEST,
    )

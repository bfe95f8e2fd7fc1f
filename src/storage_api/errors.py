"""Storage error types and the FastAPI handlers that turn them into HTTP responses."""
import logging
from typing import Optional

import pydantic
from fastapi import Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Base class for failures raised by the storage gateway.

    :param message: Human readable description of the failure.
    :param operation: The gateway operation that failed, e.g. ``"load"``.
    :param target: The filename or URL the operation was working on.
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, operation: Optional[str] = None, target: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.target = target


class InvalidUrlError(StorageError):
    """The URL does not belong to the configured bucket."""

    status_code = status.HTTP_400_BAD_REQUEST


class UploadError(StorageError):
    """The upload stream could not be read or the backend rejected the write."""


class BackendError(StorageError):
    """A read, delete or listing call against the backend failed."""


class NotFoundError(BackendError):
    """The requested object does not exist in the bucket."""

    status_code = status.HTTP_404_NOT_FOUND


async def handle_storage_errors(request: Request, exc: StorageError) -> JSONResponse:
    """Map a gateway failure onto the status code its error type declares."""
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


async def handle_pydantic_validation_errors(request: Request, exc: pydantic.ValidationError) -> JSONResponse:
    errors = exc.errors()
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "detail": [
                {
                    "msg": error["msg"],
                    "input": error.get("input"),
                }
                for error in errors
            ]
        },
    )


async def handle_broad_exceptions(request: Request, call_next):
    """Handle any exception that goes unhandled by a more specific exception handler."""
    try:
        return await call_next(request)
    except Exception:  # pylint: disable=broad-except
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )

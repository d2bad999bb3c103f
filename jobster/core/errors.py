"""
API Errors - error taxonomy and the centralized exception handlers.

Every handler answers with the same JSON body shape: {"msg": "<message>"}.

Taxonomy:
- BadRequestError (400): missing/invalid fields, read-only demo account
- UnauthenticatedError (401): missing/invalid/expired token, wrong credentials
- NotFoundError (404): id/owner mismatch
- TooManyRequestsError (429): auth rate limit hit
"""

import logging

from bson.errors import InvalidId
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

DUPLICATE_KEY_CODE = 11000


class APIError(Exception):
    """Base class for errors that map directly onto an HTTP response."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequestError(APIError):
    status_code = status.HTTP_400_BAD_REQUEST


class UnauthenticatedError(APIError):
    status_code = status.HTTP_401_UNAUTHORIZED


class NotFoundError(APIError):
    status_code = status.HTTP_404_NOT_FOUND


class TooManyRequestsError(APIError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS


def _error_response(status_code: int, message: str, headers: dict = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"msg": message}, headers=headers)


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    return _error_response(exc.status_code, exc.message)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Collapse pydantic errors into one comma-separated message."""
    messages = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path"))
        messages.append(f"{field}: {error.get('msg')}" if field else error.get("msg", "Invalid value"))
    return _error_response(status.HTTP_400_BAD_REQUEST, ", ".join(messages) or "Invalid request")


async def invalid_id_handler(request: Request, exc: InvalidId) -> JSONResponse:
    value = request.path_params.get("job_id", "")
    return _error_response(status.HTTP_404_NOT_FOUND, f"No item found with id : {value}")


async def mongo_error_handler(request: Request, exc: PyMongoError) -> JSONResponse:
    if getattr(exc, "code", None) == DUPLICATE_KEY_CODE:
        return _error_response(
            status.HTTP_400_BAD_REQUEST,
            "Duplicate value entered for email field, please choose another value",
        )
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Something went wrong try again later")


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = "Route does not exist" if exc.status_code == 404 and exc.detail == "Not Found" else str(exc.detail)
    return _error_response(exc.status_code, message, headers=getattr(exc, "headers", None))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Something went wrong try again later")


def register_exception_handlers(app: FastAPI):
    """Attach the centralized handlers to the application."""
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(InvalidId, invalid_id_handler)
    app.add_exception_handler(PyMongoError, mongo_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class FarmLinkError(Exception):
    """Base error; carries the HTTP status and the message shown to the caller."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Server error."
    headers = None

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(FarmLinkError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "All fields are required."


class Unauthenticated(FarmLinkError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Access denied. Please login."
    headers = {"WWW-Authenticate": "Bearer"}


class SessionExpired(Unauthenticated):
    default_message = "Session expired. Please login again."


class InvalidCredentials(Unauthenticated):
    default_message = "Invalid phone number or password."


class Forbidden(FarmLinkError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Access denied."


class NotFound(FarmLinkError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found."


class NotFoundOrUnauthorized(NotFound):
    default_message = "Not found or unauthorized."


class DuplicateIdentity(FarmLinkError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Phone number already registered."


class StorageFailure(FarmLinkError):
    default_message = "Server error."


def error_response(status_code: int, message: str, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message},
        headers=headers,
    )


async def farmlink_error_handler(request: Request, exc: FarmLinkError):
    return error_response(exc.status_code, exc.message, exc.headers)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.debug("Rejected request to %s: %s", request.url.path, exc.errors())
    return error_response(status.HTTP_400_BAD_REQUEST, "Invalid request.")


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Server error.")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(FarmLinkError, farmlink_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

"""Exception handlers producing the failure envelope `{"success": false, "error", "type"}`."""

import structlog
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

from taskboard.errors import UserError

logger = structlog.get_logger(__name__)


def error_response(status_code: int, message: str, error_type: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message, "type": error_type})


async def user_error_handler(_: Request, exc: Exception) -> Response:
    if not isinstance(exc, UserError):
        return await general_exception_handler(_, exc)
    if exc.status_code == 401:
        logger.info("authentication_failed", error=str(exc))
    return error_response(exc.status_code, str(exc), exc.error_type)


async def request_validation_error_handler(_: Request, exc: Exception) -> Response:
    """Malformed body, path or query parameters: 400 naming the first offending field."""
    message = "Invalid request"
    if isinstance(exc, RequestValidationError) and exc.errors():
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        message = f"Invalid request: {location}: {first.get('msg', '')}"
    return error_response(400, message, "validation_error")


async def persistence_error_handler(_: Request, exc: Exception) -> Response:
    logger.error("persistence_error", error=str(exc))
    return error_response(500, str(exc), "persistence_error")


async def general_exception_handler(_: Request, exc: Exception) -> Response:
    logger.exception("unexpected_error", error=str(exc))
    return error_response(500, "An unexpected error occurred.", "internal_server_error")

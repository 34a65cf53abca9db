"""Error handling for the FastAPI application and user store exceptions."""

import pydantic
from fastapi import Request
from fastapi import status
from fastapi.responses import JSONResponse
from loguru import logger

from userdir_api.db.exceptions import ErrorKind
from userdir_api.db.exceptions import UserStoreError
from userdir_api.monitoring.logger import log_response_info

__all__ = [
    "ERROR_KIND_STATUS",
    "handle_broad_exceptions",
    "handle_pydantic_validation_errors",
    "handle_user_store_errors",
]

ERROR_KIND_STATUS = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONSTRAINT_VIOLATION: status.HTTP_409_CONFLICT,
    ErrorKind.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.CONNECTIVITY: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


# fastapi docs on middlewares: https://fastapi.tiangolo.com/tutorial/middleware/
async def handle_broad_exceptions(request: Request, call_next):
    """Handle any exception that goes unhandled by a more specific exception handler."""
    try:
        return await call_next(request)
    except Exception as err:  # pylint: disable=broad-except
        error_response = {"detail": "Internal server error", "error_type": type(err).__name__}

        logger.error(
            f"Unhandled exception: {type(err).__name__}: {str(err)}",
            http_status=500,
            http_method=request.method,
            url_path=str(request.url.path),
            error_type=type(err).__name__,
            error_message=str(err),
            exc_info=True,
        )

        response = JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_response,
        )
        log_response_info(response)
        return response


# fastapi docs on error handlers: https://fastapi.tiangolo.com/tutorial/handling-errors/
async def handle_pydantic_validation_errors(request: Request, exc: pydantic.ValidationError) -> JSONResponse:
    """Handle Pydantic validation errors."""
    errors = exc.errors()
    error_response = {
        "detail": [
            {
                "msg": error["msg"],
                "input": error["input"],
            }
            for error in errors
        ]
    }

    logger.warning(
        f"Validation error: {len(errors)} validation errors",
        http_status=422,
        http_method=request.method,
        url_path=str(request.url.path),
        error_type="ValidationError",
        validation_errors=errors,
    )

    response = JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
        content=jsonable_error_response(error_response),
    )
    log_response_info(response)

    return response


async def handle_user_store_errors(request: Request, exc: UserStoreError) -> JSONResponse:
    """
    Handle user store errors and convert them to appropriate HTTP responses.

    Maps the error kind to an HTTP status code:
    - NOT_FOUND -> 404 Not Found
    - CONSTRAINT_VIOLATION -> 409 Conflict
    - INVALID_INPUT -> 400 Bad Request
    - CONNECTIVITY -> 503 Service Unavailable
    - INTERNAL -> 500 Internal Server Error

    Parameters
    ----------
    request : Request
        FastAPI request object
    exc : UserStoreError
        Repository exception

    Returns
    -------
    JSONResponse
        HTTP response with appropriate status code and error details
    """
    http_status = ERROR_KIND_STATUS[exc.kind]

    if exc.kind == ErrorKind.INTERNAL:
        # Driver messages may expose SQL details; keep them in the logs only
        detail = "User store error occurred"
    else:
        detail = exc.message

    error_response = {
        "detail": detail,
        "error_type": type(exc).__name__,
        "error_kind": exc.kind.value,
    }

    log = logger.warning if http_status < 500 else logger.error
    log(
        f"User store error: {exc.kind.value}: {exc.message}",
        http_status=http_status,
        http_method=request.method,
        url_path=str(request.url.path),
        operation=exc.operation,
        error_kind=exc.kind.value,
    )

    response = JSONResponse(
        status_code=http_status,
        content=error_response,
    )
    log_response_info(response)
    return response


def jsonable_error_response(error_response: dict) -> dict:
    """Stringify validation inputs that JSONResponse cannot serialize (e.g. datetimes)."""
    for error in error_response.get("detail", []):
        value = error.get("input")
        if not isinstance(value, (str, int, float, bool, type(None), list, dict)):
            error["input"] = str(value)
    return error_response

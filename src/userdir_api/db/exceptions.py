"""
User Store Exceptions

Closed error taxonomy for the user repository. Every driver failure is
translated into one UserStoreError subclass whose ``kind`` callers can branch on.
The original driver message is kept in the error message and the original
exception is chained as ``__cause__``.
"""

import asyncio
from enum import Enum
from typing import Optional

import asyncpg
import pydantic


class ErrorKind(str, Enum):
    """Kinds of user store failures."""

    NOT_FOUND = "NOT_FOUND"
    CONSTRAINT_VIOLATION = "CONSTRAINT_VIOLATION"
    CONNECTIVITY = "CONNECTIVITY"
    INVALID_INPUT = "INVALID_INPUT"
    INTERNAL = "INTERNAL"  # unclassified driver failure


class UserStoreError(Exception):
    """Base error raised by the user repository."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str, operation: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.operation = operation


class UserNotFoundError(UserStoreError):
    kind = ErrorKind.NOT_FOUND


class UserConstraintError(UserStoreError):
    kind = ErrorKind.CONSTRAINT_VIOLATION


class UserStoreConnectionError(UserStoreError):
    kind = ErrorKind.CONNECTIVITY


class InvalidUserInputError(UserStoreError):
    kind = ErrorKind.INVALID_INPUT


ERROR_CLASSES = {
    ErrorKind.NOT_FOUND: UserNotFoundError,
    ErrorKind.CONSTRAINT_VIOLATION: UserConstraintError,
    ErrorKind.CONNECTIVITY: UserStoreConnectionError,
    ErrorKind.INVALID_INPUT: InvalidUserInputError,
    ErrorKind.INTERNAL: UserStoreError,
}

_CONSTRAINT_ERRORS = (
    asyncpg.exceptions.IntegrityConstraintViolationError,
    asyncpg.exceptions.DuplicateTableError,
    asyncpg.exceptions.DuplicateObjectError,
)

_CONNECTIVITY_ERRORS = (
    asyncpg.exceptions.PostgresConnectionError,
    asyncpg.exceptions.CannotConnectNowError,
    asyncpg.exceptions.TooManyConnectionsError,
    asyncpg.exceptions.ConnectionDoesNotExistError,
    asyncio.TimeoutError,
    OSError,
)

_INVALID_INPUT_ERRORS = (
    asyncpg.exceptions.DataError,
    ValueError,
    TypeError,
)


def classify_error(error: BaseException) -> ErrorKind:
    """
    Map a driver or decoding exception to an ErrorKind.

    Order matters: pydantic.ValidationError is a ValueError, and asyncpg's
    client-side argument errors subclass ValueError/TypeError as well.
    A row that fails model validation is schema drift, not caller input.
    """
    if isinstance(error, UserStoreError):
        return error.kind
    if isinstance(error, _CONSTRAINT_ERRORS):
        return ErrorKind.CONSTRAINT_VIOLATION
    if isinstance(error, _CONNECTIVITY_ERRORS):
        return ErrorKind.CONNECTIVITY
    if isinstance(error, RuntimeError) and "not initialized" in str(error):
        return ErrorKind.CONNECTIVITY
    if isinstance(error, pydantic.ValidationError):
        return ErrorKind.INTERNAL
    if isinstance(error, _INVALID_INPUT_ERRORS):
        return ErrorKind.INVALID_INPUT
    return ErrorKind.INTERNAL


def translate_error(error: BaseException, operation: str, description: str) -> UserStoreError:
    """
    Build the UserStoreError for a failed repository operation.

    Args:
        error: Original exception
        operation: Repository method name (e.g. "get_by_id")
        description: Human readable statement description (e.g. "get user details query")

    Returns:
        UserStoreError subclass matching the classified kind
    """
    if isinstance(error, UserStoreError):
        return error

    kind = classify_error(error)
    message = (
        f"Exception occurred while executing {description} on the users table. "
        f"Exception Message : {error}"
    )
    return ERROR_CLASSES[kind](message, operation=operation)

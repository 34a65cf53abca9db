"""Unit tests for the user store error taxonomy."""

import asyncio

import asyncpg
import pydantic
import pytest

from userdir_api.db.exceptions import ErrorKind
from userdir_api.db.exceptions import InvalidUserInputError
from userdir_api.db.exceptions import UserConstraintError
from userdir_api.db.exceptions import UserNotFoundError
from userdir_api.db.exceptions import UserStoreConnectionError
from userdir_api.db.exceptions import UserStoreError
from userdir_api.db.exceptions import classify_error
from userdir_api.db.exceptions import translate_error
from userdir_api.models.user import User


def _validation_error() -> pydantic.ValidationError:
    try:
        User(name_id="x")
    except pydantic.ValidationError as exc:
        return exc
    raise AssertionError("expected a validation error")


@pytest.mark.parametrize(
    "error,expected_kind",
    [
        (asyncpg.exceptions.UniqueViolationError("dup"), ErrorKind.CONSTRAINT_VIOLATION),
        (asyncpg.exceptions.NotNullViolationError("null"), ErrorKind.CONSTRAINT_VIOLATION),
        (asyncpg.exceptions.DuplicateTableError("exists"), ErrorKind.CONSTRAINT_VIOLATION),
        (asyncpg.exceptions.PostgresConnectionError("lost"), ErrorKind.CONNECTIVITY),
        (asyncpg.exceptions.TooManyConnectionsError("full"), ErrorKind.CONNECTIVITY),
        (ConnectionRefusedError("refused"), ErrorKind.CONNECTIVITY),
        (asyncio.TimeoutError(), ErrorKind.CONNECTIVITY),
        (RuntimeError("User DB pool not initialized - call initialize() first"), ErrorKind.CONNECTIVITY),
        (asyncpg.exceptions.NumericValueOutOfRangeError("out of range"), ErrorKind.INVALID_INPUT),
        (ValueError("bad argument"), ErrorKind.INVALID_INPUT),
        (TypeError("an integer is required"), ErrorKind.INVALID_INPUT),
        (asyncpg.exceptions.UndefinedTableError("missing"), ErrorKind.INTERNAL),
        (RuntimeError("something else"), ErrorKind.INTERNAL),
    ],
    ids=[
        "unique",
        "not_null",
        "duplicate_table",
        "connection",
        "too_many_connections",
        "os_error",
        "timeout",
        "pool_not_initialized",
        "numeric_range",
        "value_error",
        "type_error",
        "undefined_table",
        "runtime_error",
    ],
)
def test_classify_error(error, expected_kind):
    """Test driver errors map to the expected kind."""
    assert classify_error(error) == expected_kind


def test_classify_validation_error():
    """Test row decoding failures are internal, not caller input."""
    assert classify_error(_validation_error()) == ErrorKind.INTERNAL


@pytest.mark.parametrize(
    "error_class,kind",
    [
        (UserNotFoundError, ErrorKind.NOT_FOUND),
        (UserConstraintError, ErrorKind.CONSTRAINT_VIOLATION),
        (UserStoreConnectionError, ErrorKind.CONNECTIVITY),
        (InvalidUserInputError, ErrorKind.INVALID_INPUT),
        (UserStoreError, ErrorKind.INTERNAL),
    ],
)
def test_subclasses_carry_their_kind(error_class, kind):
    """Test every taxonomy class exposes a kind and is a UserStoreError."""
    error = error_class("message", operation="op")

    assert error.kind == kind
    assert isinstance(error, UserStoreError)
    assert error.operation == "op"


def test_translate_error_message_and_class():
    """Test translated errors name the statement and keep the driver message."""
    error = translate_error(ValueError("invalid literal"), "get_by_id", "get user details query")

    assert isinstance(error, InvalidUserInputError)
    assert error.operation == "get_by_id"
    assert "get user details query" in error.message
    assert "invalid literal" in error.message


def test_translate_error_passes_store_errors_through():
    """Test an existing UserStoreError is not wrapped again."""
    original = UserNotFoundError("gone", operation="update")

    assert translate_error(original, "update", "update user query") is original

"""
User Repository

Repository for user directory CRUD operations against the users table.
"""

from datetime import datetime
from datetime import timezone
from typing import Iterable
from typing import List
from typing import Optional
from typing import Union

import asyncpg
from loguru import logger

from userdir_api.db import queries
from userdir_api.db.exceptions import UserNotFoundError
from userdir_api.db.exceptions import UserStoreError
from userdir_api.db.pool import UserDBPool
from userdir_api.db.repository_base import BaseRepository
from userdir_api.models.user import UPDATABLE_FIELDS
from userdir_api.models.user import User

_GET_USER_DETAILS = "get user details query"


class UserRepository(BaseRepository):
    """User repository (registration, profile lookup and search, profile update)."""

    def __init__(self, pool: Union[UserDBPool, asyncpg.Pool]):
        super().__init__(pool, queries.USER_TABLE)

    async def create(self, user: User) -> User:
        """
        Insert a new user and return it with the store-generated user_id set.

        Missing date_created / date_modified are stamped with the current UTC time.

        Args:
            user: User to insert (user_id is ignored)

        Returns:
            Copy of the user with user_id populated
        """
        now = datetime.now(timezone.utc)
        to_insert = user.model_copy(
            update={
                "date_created": user.date_created or now,
                "date_modified": user.date_modified or now,
            }
        )
        values = [getattr(to_insert, column) for column in queries.INSERT_COLUMNS]

        user_id = await self._fetchval("create", "save user query", queries.INSERT_USER, *values)
        if user_id is None:
            raise self._failure(
                UserStoreError("Insert did not return a generated user_id", operation="create"),
                "create",
                "save user query",
            )

        logger.info("User created", user_id=user_id, identity_provider=to_insert.identity_provider)
        return to_insert.model_copy(update={"user_id": user_id})

    async def get_by_id(self, user_id: int) -> Optional[User]:
        """
        Get user by internal id.

        Returns:
            User or None if no row matches
        """
        row = await self._fetchrow("get_by_id", _GET_USER_DETAILS, queries.GET_USER_BY_USER_ID, user_id)
        if row is None:
            return None
        return self._decode("get_by_id", [row])[0]

    async def get_by_name_id(self, name_id: str) -> List[User]:
        """Get all users with the given name identifier (not unique at this layer)."""
        rows = await self._fetch("get_by_name_id", _GET_USER_DETAILS, queries.GET_USER_BY_NAME_ID, name_id)
        return self._decode("get_by_name_id", rows)

    async def get_by_name_id_and_provider(self, name_id: str, identity_provider: str) -> List[User]:
        """Get users matching both name identifier and identity provider."""
        rows = await self._fetch(
            "get_by_name_id_and_provider",
            _GET_USER_DETAILS,
            queries.GET_USER_BY_NAME_ID_AND_PROVIDER,
            name_id,
            identity_provider,
        )
        return self._decode("get_by_name_id_and_provider", rows)

    async def get_by_first_name(self, prefix: str) -> List[User]:
        """
        Get users whose first name starts with ``prefix``.

        The prefix is bound as ``prefix + "%"`` without escaping, so ``%`` and ``_``
        inside it act as LIKE wildcards.
        """
        rows = await self._fetch(
            "get_by_first_name",
            _GET_USER_DETAILS,
            queries.GET_USER_BY_FIRST_NAME,
            prefix + queries.WILDCARD_SUFFIX,
        )
        return self._decode("get_by_first_name", rows)

    async def get_by_last_name(self, prefix: str) -> List[User]:
        """Get users whose last name starts with ``prefix`` (same wildcard contract as first name)."""
        rows = await self._fetch(
            "get_by_last_name",
            _GET_USER_DETAILS,
            queries.GET_USER_BY_LAST_NAME,
            prefix + queries.WILDCARD_SUFFIX,
        )
        return self._decode("get_by_last_name", rows)

    async def get_by_first_or_last_name(self, prefix: str) -> List[User]:
        """Get users whose first OR last name starts with ``prefix``."""
        pattern = prefix + queries.WILDCARD_SUFFIX
        rows = await self._fetch(
            "get_by_first_or_last_name",
            _GET_USER_DETAILS,
            queries.GET_USER_BY_FIRST_OR_LAST_NAME,
            pattern,
            pattern,
        )
        return self._decode("get_by_first_or_last_name", rows)

    async def update(self, user: User) -> User:
        """
        Update the profile fields of the user(s) with ``user.name_id``.

        Only first/last name, photo URL, email and phone fields are written;
        identity and audit columns are left untouched. The row is not re-read.

        Returns:
            The input user, unchanged

        Raises:
            UserNotFoundError: If no row has this name_id
        """
        values = [getattr(user, field) for field in UPDATABLE_FIELDS]
        status = await self._execute("update", "update user query", queries.UPDATE_USER, *values, user.name_id)

        if _affected_rows(status) == 0:
            raise self._failure(
                UserNotFoundError(f"No user found with name_id '{user.name_id}'", operation="update"),
                "update",
                "update user query",
            )

        logger.info("User updated", name_id=user.name_id, rows=_affected_rows(status))
        return user

    async def get_photo_url(self, user_id: int) -> Optional[str]:
        """
        Get the photo URL of a user.

        Returns:
            The stored photo URL, "" for a user without one, or None if no row matches
        """
        row = await self._fetchrow(
            "get_photo_url",
            "get user profile image URL query",
            queries.GET_USER_PHOTO_URL_BY_USER_ID,
            user_id,
        )
        if row is None:
            return None
        # NULL photo_url is still a found user
        return row["photo_url"] or ""

    async def create_user_table(self) -> None:
        """
        Create the users table and its (name_id, identity_provider) index.

        Each statement runs over its own connection. Neither is guarded, so
        running this twice raises UserConstraintError.
        """
        await self._execute("create_user_table", "create user table query", queries.CREATE_USER_TABLE)
        await self._execute("create_user_table", "create user table index query", queries.CREATE_USER_TABLE_INDEX)
        logger.success("Users table and index created", table=self.table, index=queries.USER_NAME_INDEX)

    def _decode(self, operation: str, rows: Iterable[asyncpg.Record]) -> List[User]:
        """Decode rows by column name; decoding failures are internal store errors."""
        try:
            return [User.from_record(row) for row in rows]
        except Exception as e:
            raise self._failure(e, operation, "user row decoding") from e


def _affected_rows(status: str) -> int:
    """Parse the row count from a command status tag such as "UPDATE 3"."""
    try:
        return int(status.rsplit(" ", 1)[-1])
    except (AttributeError, ValueError):
        return 0

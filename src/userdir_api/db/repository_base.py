"""
Base Repository

Base class providing the acquire / execute / translate cycle shared by all
repositories. Concrete repositories hold the SQL and the row decoding.
"""

from typing import Any
from typing import List
from typing import Optional
from typing import Union

import asyncpg
from loguru import logger

from userdir_api.db.exceptions import UserStoreError
from userdir_api.db.exceptions import translate_error
from userdir_api.db.pool import UserDBPool


class BaseRepository:
    """
    Base repository with scoped connection handling.

    Every helper acquires its own connection, runs exactly one statement and
    releases the connection when the ``async with`` block exits. Any failure is
    logged once and re-raised as a UserStoreError subclass.
    """

    def __init__(self, pool: Union[UserDBPool, asyncpg.Pool], table_name: str):
        """
        Initialize base repository.

        Args:
            pool: UserDBPool or raw asyncpg pool (anything with ``acquire()``)
            table_name: Database table name
        """
        self.pool = pool
        self.table = table_name

    async def _fetch(self, operation: str, description: str, query: str, *args: Any) -> List[asyncpg.Record]:
        """Run a query and return all rows."""
        try:
            async with self.pool.acquire() as conn:
                return await conn.fetch(query, *args)
        except Exception as e:
            raise self._failure(e, operation, description) from e

    async def _fetchrow(self, operation: str, description: str, query: str, *args: Any) -> Optional[asyncpg.Record]:
        """Run a query and return the first row, or None."""
        try:
            async with self.pool.acquire() as conn:
                return await conn.fetchrow(query, *args)
        except Exception as e:
            raise self._failure(e, operation, description) from e

    async def _fetchval(self, operation: str, description: str, query: str, *args: Any) -> Any:
        """Run a query and return the first column of the first row."""
        try:
            async with self.pool.acquire() as conn:
                return await conn.fetchval(query, *args)
        except Exception as e:
            raise self._failure(e, operation, description) from e

    async def _execute(self, operation: str, description: str, query: str, *args: Any) -> str:
        """Run a statement and return the command status tag (e.g. "UPDATE 1")."""
        try:
            async with self.pool.acquire() as conn:
                return await conn.execute(query, *args)
        except Exception as e:
            raise self._failure(e, operation, description) from e

    def _failure(self, error: Exception, operation: str, description: str) -> UserStoreError:
        """Log a failed operation and build the error to raise."""
        store_error = translate_error(error, operation, description)
        logger.error(
            f"[{type(self).__name__}][{operation}] {store_error.message}",
            operation=operation,
            table=self.table,
            error_kind=store_error.kind.value,
            error_type=type(error).__name__,
        )
        return store_error

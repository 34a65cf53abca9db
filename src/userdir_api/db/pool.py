"""
User Directory Database Connection Pool

Manages the asyncpg connection pool for the user directory database.
Each repository call acquires its own connection from the pool and returns it
when the ``async with`` block exits, on success or failure.
"""

from typing import Optional

import asyncpg
from loguru import logger


class UserDBPool:
    """User directory database connection pool manager."""

    def __init__(
        self,
        connection_string: str,
        min_size: int = 1,
        max_size: int = 10,
        command_timeout: float = 60,
        connect_timeout: float = 15,
    ):
        """
        Initialize user directory DB pool.

        Args:
            connection_string: PostgreSQL connection string (DSN)
            min_size: Minimum number of pooled connections
            max_size: Maximum number of pooled connections
            command_timeout: Default statement timeout in seconds
            connect_timeout: Connection establishment timeout in seconds
        """
        self.connection_string = connection_string
        self.min_size = min_size
        self.max_size = max_size
        self.command_timeout = command_timeout
        self.connect_timeout = connect_timeout
        self.pool: Optional[asyncpg.Pool] = None
        self._pool_initialized = False

    async def initialize(self) -> None:
        """
        Initialize the connection pool and validate it with a trivial query.
        """
        if self._pool_initialized and self.pool is not None:
            logger.debug("User DB pool already initialized")
            return

        try:
            logger.info("Initializing user directory database pool")

            self.pool = await asyncpg.create_pool(
                self.connection_string,
                min_size=self.min_size,
                max_size=self.max_size,
                command_timeout=self.command_timeout,
                timeout=self.connect_timeout,
            )

            logger.info("User DB pool created successfully", min_size=self.min_size, max_size=self.max_size)

            async with self.pool.acquire() as conn:
                result = await conn.fetchval("SELECT 1")
                if result != 1:
                    raise RuntimeError("Pool validation query failed")

            self._pool_initialized = True
            logger.success("User directory database initialized successfully")

        except Exception as e:
            logger.error(f"Failed to initialize user DB pool: {e}", exc_info=True)
            if self.pool:
                await self.pool.close()
                self.pool = None
            raise

    async def close(self) -> None:
        """Close the connection pool gracefully."""
        if self.pool:
            logger.info("Closing user directory database pool")
            await self.pool.close()
            self.pool = None
            self._pool_initialized = False
            logger.info("User DB pool closed")

    def acquire(self):
        """
        Acquire a database connection from the pool.

        Returns async context manager that yields a connection.

        Usage:
            async with pool.acquire() as conn:
                row = await conn.fetchrow("SELECT ...")
        """
        if not self.pool:
            raise RuntimeError("User DB pool not initialized - call initialize() first")
        return self.pool.acquire()

    async def health_check(self) -> bool:
        """
        Check if database connection is healthy.

        Returns:
            True if connection is healthy, False otherwise
        """
        try:
            if not self.pool:
                return False

            async with self.pool.acquire() as conn:
                result = await conn.fetchval("SELECT 1")
                return result == 1
        except Exception as e:
            logger.error(f"User DB health check failed: {e}")
            return False

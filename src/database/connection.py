"""
Database connection and pooling for the Supabase PostgreSQL observation store.

Provides a read-only async connection pool for the dashboard loader and the
freshness probe. Handles connection lifecycle, error reporting and cleanup.
"""

import asyncio
import asyncpg
from typing import Optional, List
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass


logger = logging.getLogger(__name__)


@dataclass
class DatabaseConfig:
    """Database connection configuration."""
    dsn: str
    min_size: int = 1
    max_size: int = 10
    command_timeout: float = 30.0
    max_inactive_connection_lifetime: float = 300.0


class DatabaseConnectionError(Exception):
    """Raised when database connection fails."""
    pass


class DatabasePool:
    """
    Async PostgreSQL connection pool manager for Supabase.

    The dashboard only reads, so the pool exposes query helpers and no
    command execution.
    """

    def __init__(self, config: DatabaseConfig):
        self.config = config
        self._pool: Optional[asyncpg.Pool] = None
        self._is_closed = False
        self._init_lock = asyncio.Lock()

    async def initialize(self) -> None:
        """Initialize the connection pool. Concurrent callers share one create_pool call."""
        async with self._init_lock:
            if self._pool is not None and not self._is_closed:
                return
            await self._create_pool()

    async def _create_pool(self) -> None:
        try:
            self._pool = await asyncpg.create_pool(
                dsn=self.config.dsn,
                min_size=self.config.min_size,
                max_size=self.config.max_size,
                max_inactive_connection_lifetime=self.config.max_inactive_connection_lifetime,
                command_timeout=self.config.command_timeout,
                server_settings={
                    'jit': 'off',
                    'default_transaction_read_only': 'on',
                }
            )
            self._is_closed = False
            logger.info(f"Database pool initialized with {self.config.min_size}-{self.config.max_size} connections")
        except Exception as e:
            logger.error(f"Failed to initialize database pool: {e}")
            raise DatabaseConnectionError(f"Failed to connect to database: {e}") from e

    async def close(self) -> None:
        """Close the connection pool and cleanup resources."""
        if self._pool and not self._is_closed:
            await self._pool.close()
            self._is_closed = True
            logger.info("Database pool closed")

    @asynccontextmanager
    async def acquire_connection(self):
        """
        Acquire a database connection from the pool.

        Usage:
            async with pool.acquire_connection() as conn:
                rows = await conn.fetch("SELECT * FROM public.docentes")
        """
        if self._pool is None:
            raise DatabaseConnectionError("Database pool not initialized")

        if self._is_closed:
            raise DatabaseConnectionError("Database pool is closed")

        try:
            connection = await self._pool.acquire()
        except (OSError, asyncpg.PostgresError) as e:
            raise DatabaseConnectionError(f"Could not acquire connection: {e}") from e

        try:
            yield connection
        finally:
            try:
                await self._pool.release(connection)
            except Exception as e:
                logger.warning(f"Error releasing connection: {e}")

    async def execute_query(self, query: str, *args) -> List[asyncpg.Record]:
        """Execute a query and return all results."""
        async with self.acquire_connection() as conn:
            try:
                return await conn.fetch(query, *args)
            except Exception as e:
                logger.error(f"Query execution failed: {e}")
                logger.error(f"Query: {query}")
                raise

    async def execute_query_one(self, query: str, *args) -> Optional[asyncpg.Record]:
        """Execute a query and return one result or None."""
        async with self.acquire_connection() as conn:
            try:
                return await conn.fetchrow(query, *args)
            except Exception as e:
                logger.error(f"Query execution failed: {e}")
                logger.error(f"Query: {query}")
                raise

    @property
    def is_initialized(self) -> bool:
        """Check if the pool is initialized."""
        return self._pool is not None and not self._is_closed

    async def health_check(self) -> bool:
        """Perform a health check on the database connection."""
        try:
            result = await self.execute_query_one("SELECT 1 as health_check")
            return result is not None and result['health_check'] == 1
        except Exception as e:
            logger.error(f"Health check failed: {e}")
            return False


def create_database_config_from_env() -> DatabaseConfig:
    """
    Create database configuration from environment variables.

    Reads DATABASE_URL and the DATABASE_POOL_* / DATABASE_COMMAND_TIMEOUT
    variables through the application settings.
    """
    from observation_dashboard.config import DatabaseSettings

    settings = DatabaseSettings()
    return DatabaseConfig(
        dsn=settings.url,
        min_size=settings.pool_min_size,
        max_size=settings.pool_max_size,
        command_timeout=settings.command_timeout,
    )


# Global pool instance - initialized once per application
_global_pool: Optional[DatabasePool] = None


async def get_database_pool() -> DatabasePool:
    """
    Get the global database pool instance, initializing it if needed.

    Call during application startup so the pool is ready before the first
    load cycle.
    """
    global _global_pool

    if _global_pool is None:
        config = create_database_config_from_env()
        _global_pool = DatabasePool(config)
        await _global_pool.initialize()
    elif not _global_pool.is_initialized:
        await _global_pool.initialize()

    return _global_pool


async def close_database_pool() -> None:
    """Close the global database pool. Call during application shutdown."""
    global _global_pool

    if _global_pool:
        await _global_pool.close()
        _global_pool = None


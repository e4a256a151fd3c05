"""
Database integration layer for the classroom observation dashboard.

Provides async PostgreSQL connectivity and the read-only queries for the
observation sources and the freshness probe.
"""

from .connection import (
    DatabaseConfig,
    DatabasePool,
    DatabaseConnectionError,
    get_database_pool,
    close_database_pool,
    create_database_config_from_env,
)

from .queries import (
    ObservationQueries,
    rows_to_models,
)

__all__ = [
    # Connection
    'DatabaseConfig',
    'DatabasePool',
    'DatabaseConnectionError',
    'get_database_pool',
    'close_database_pool',
    'create_database_config_from_env',

    # Queries
    'ObservationQueries',
    'rows_to_models',
]

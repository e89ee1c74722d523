"""
Database connection management for NPE Claims Analytics.
"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from npe_claims.config.models import DatabaseConfig


def get_connection_string(config: DatabaseConfig) -> str:
    """
    Build PostgreSQL connection string.

    Args:
        config: Database configuration

    Returns:
        PostgreSQL connection string for psycopg3
    """
    return config.connection_string


def create_engine_from_config(config: DatabaseConfig) -> Engine:
    """
    Create SQLAlchemy engine from configuration.

    The search path is pinned to the configured schema so the unqualified
    table names in the bundled SQL files resolve there.

    Args:
        config: Database configuration

    Returns:
        SQLAlchemy Engine instance
    """
    return create_engine_from_url(
        get_connection_string(config),
        db_schema=config.db_schema,
        pool_size=config.pool_size,
    )


def create_engine_from_url(url: str, db_schema: str = "public", pool_size: int = 2) -> Engine:
    """
    Create SQLAlchemy engine from a connection URL.

    Args:
        url: SQLAlchemy URL (postgresql+psycopg://...)
        db_schema: Schema to put first on the search path
        pool_size: Connection pool size

    Returns:
        SQLAlchemy Engine instance
    """
    return create_engine(
        url,
        pool_size=pool_size,
        pool_pre_ping=True,
        connect_args={
            "application_name": "npe_claims",
            "options": f"-c search_path={db_schema},public",
        },
    )

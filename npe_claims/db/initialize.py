"""
Database initialization for NPE Claims Analytics.

Creates the six claims tables, their indexes and the reporting views.
"""

from pathlib import Path

from sqlalchemy import text
from sqlalchemy.engine import Engine
import structlog

from npe_claims.config.models import GenerationConfig
from npe_claims.core.dataset import TABLE_CLEAR_ORDER
from npe_claims.db.connection import create_engine_from_config

logger = structlog.get_logger()


# Tables before views
SCHEMA_FILES = [
    "schema.sql",
    "views.sql",
]

VIEW_NAMES = [
    "vw_monthly_kpi",
    "vw_region_kpi",
    "vw_provider_summary",
]


def init_database(
    config: GenerationConfig,
    drop_existing: bool = False,
    engine: Engine | None = None,
) -> None:
    """
    Initialize the database with all required tables and views.

    Args:
        config: Generation configuration (database section is used)
        drop_existing: If True, drop all tables and views before creating
        engine: Optional engine; one is created from the config when omitted
    """
    if engine is None:
        logger.info(
            "connecting_to_database",
            host=config.database.host,
            database=config.database.database,
        )
        engine = create_engine_from_config(config.database)

    if drop_existing:
        logger.warning("dropping_existing_tables")
        _drop_all_tables(engine)

    logger.info("creating_tables")
    _execute_schema_files(engine)

    logger.info("database_initialized_successfully")


def _execute_schema_files(engine: Engine) -> None:
    """Execute the bundled SQL files in order."""
    schema_dir = Path(__file__).parent

    for schema_file in SCHEMA_FILES:
        schema_path = schema_dir / schema_file
        logger.info("executing_schema_file", file=schema_file)
        schema_sql = schema_path.read_text()

        with engine.connect() as conn:
            try:
                conn.execute(text(schema_sql))
                conn.commit()
            except Exception as e:
                logger.error("schema_file_error", file=schema_file, error=str(e))
                raise


def _drop_all_tables(engine: Engine) -> None:
    """Drop views, then tables children first."""
    with engine.connect() as conn:
        for view in VIEW_NAMES:
            conn.execute(text(f"DROP VIEW IF EXISTS {view} CASCADE"))
        for table in TABLE_CLEAR_ORDER:
            conn.execute(text(f"DROP TABLE IF EXISTS {table} CASCADE"))
        conn.commit()

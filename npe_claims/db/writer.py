"""
All-or-nothing dataset writer using PostgreSQL COPY.

A load replaces the contents of all six tables inside one transaction:
TRUNCATE ... RESTART IDENTITY, one COPY per table in parent-first order,
then the identity sequences are moved past the copied ids.
"""

from datetime import date, datetime
from decimal import Decimal
from io import StringIO
from typing import Any

import structlog
from sqlalchemy.engine import Engine

from npe_claims.core.dataset import SeedDataset, TABLE_CLEAR_ORDER, TABLE_INSERT_ORDER

logger = structlog.get_logger()


# Column order per table, as COPY receives it
TABLE_COLUMNS: dict[str, list[str]] = {
    "providers": [
        "provider_id", "provider_name", "org_number", "provider_type",
        "region", "active", "created_at",
    ],
    "medical_codes": [
        "medical_code_id", "code_system", "code", "code_title", "active", "created_at",
    ],
    "injury_types": [
        "injury_type_id", "injury_group", "injury_name", "severity", "active", "created_at",
    ],
    "claims": [
        "claim_id", "claim_reference", "patient_age", "patient_sex", "region",
        "received_date", "decision_date", "status", "decision", "care_level",
        "claim_amount_nok", "provider_id", "created_at",
    ],
    "claim_medical_codes": ["claim_id", "medical_code_id", "code_role", "created_at"],
    "claim_injuries": ["claim_id", "injury_type_id", "is_primary", "created_at"],
}

# Tables with an identity column
IDENTITY_COLUMNS = {
    "providers": "provider_id",
    "medical_codes": "medical_code_id",
    "injury_types": "injury_type_id",
    "claims": "claim_id",
}


class DatasetWriter:
    """
    Replaces the claims tables with a dataset in one transaction.

    Usage:
        writer = DatasetWriter(engine)
        counts = writer.load(dataset)
    """

    def __init__(self, engine: Engine):
        """
        Initialize DatasetWriter.

        Args:
            engine: SQLAlchemy engine
        """
        self.engine = engine
        self._counts: dict[str, int] = {}

    def load(self, dataset: SeedDataset) -> dict[str, int]:
        """
        Truncate all tables and copy the dataset in.

        Either every row is committed or, on any error, the transaction rolls
        back and the previous table contents remain.

        Args:
            dataset: Dataset that passed the integrity gate

        Returns:
            Rows written per table
        """
        counts: dict[str, int] = {}

        try:
            with self.engine.begin() as conn:
                raw_conn = conn.connection.dbapi_connection
                with raw_conn.cursor() as cursor:
                    cursor.execute(
                        f"TRUNCATE {', '.join(TABLE_CLEAR_ORDER)} RESTART IDENTITY"
                    )
                    for table_name in TABLE_INSERT_ORDER:
                        records = [row.model_dump_db() for row in dataset.table(table_name)]
                        counts[table_name] = self._copy_table(cursor, table_name, records)
                    self._sync_identities(cursor)
        except Exception as e:
            logger.error("dataset_load_failed", error=str(e))
            raise

        self._counts = counts
        logger.info("dataset_loaded", **counts)
        return counts

    def _copy_table(self, cursor: Any, table_name: str, records: list[dict[str, Any]]) -> int:
        """
        COPY one table's records.

        Args:
            cursor: psycopg cursor inside the load transaction
            table_name: Name of the table
            records: Database-ready records

        Returns:
            Number of rows copied
        """
        if not records:
            return 0

        columns = TABLE_COLUMNS[table_name]
        columns_str = ", ".join(columns)

        buffer = StringIO()
        for record in records:
            values = [self._format_value(record.get(col)) for col in columns]
            buffer.write("\t".join(values) + "\n")

        with cursor.copy(
            f"COPY {table_name} ({columns_str}) FROM STDIN WITH (FORMAT text, NULL '\\N')"
        ) as copy:
            copy.write(buffer.getvalue().encode("utf-8"))

        logger.debug("table_copied", table=table_name, records=len(records))
        return len(records)

    @staticmethod
    def _sync_identities(cursor: Any) -> None:
        """Move each identity sequence past the highest copied id."""
        for table_name, column in IDENTITY_COLUMNS.items():
            cursor.execute(
                f"SELECT setval(pg_get_serial_sequence('{table_name}', '{column}'), "
                f"COALESCE(MAX({column}), 0) + 1, false) FROM {table_name}"
            )

    def get_all_counts(self) -> dict[str, int]:
        """
        Get rows written per table by the last successful load.

        Returns:
            Dictionary of table names to record counts
        """
        return dict(self._counts)

    @staticmethod
    def _format_value(value: Any) -> str:
        """
        Format a value for PostgreSQL COPY.

        Handles NULL, boolean, numeric, date/datetime, and string values.

        Args:
            value: Value to format

        Returns:
            Formatted string for COPY
        """
        if value is None:
            return "\\N"
        if isinstance(value, bool):
            return "t" if value else "f"
        if isinstance(value, datetime):
            return value.isoformat()
        if isinstance(value, date):
            return value.isoformat()
        if isinstance(value, Decimal):
            return str(value)
        if isinstance(value, (int, float)):
            return str(value)

        # String value - escape special characters
        s = str(value)
        s = s.replace("\\", "\\\\")
        s = s.replace("\t", "\\t")
        s = s.replace("\n", "\\n")
        s = s.replace("\r", "\\r")
        return s

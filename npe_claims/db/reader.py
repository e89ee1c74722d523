"""
Read the claims tables and reporting views back from PostgreSQL.
"""

from typing import Any

import structlog
from sqlalchemy import text
from sqlalchemy.engine import Engine

from npe_claims.core.dataset import SeedDataset, TABLE_INSERT_ORDER
from npe_claims.db.initialize import VIEW_NAMES
from npe_claims.db.writer import TABLE_COLUMNS
from npe_claims.domain.claims import Claim, ClaimInjury, ClaimMedicalCode
from npe_claims.domain.dimensions import InjuryType, MedicalCode, Provider

logger = structlog.get_logger()


TABLE_MODELS = {
    "providers": Provider,
    "medical_codes": MedicalCode,
    "injury_types": InjuryType,
    "claims": Claim,
    "claim_medical_codes": ClaimMedicalCode,
    "claim_injuries": ClaimInjury,
}

# Stable row order per table
TABLE_ORDER_BY = {
    "providers": "provider_id",
    "medical_codes": "medical_code_id",
    "injury_types": "injury_type_id",
    "claims": "claim_id",
    "claim_medical_codes": "claim_id, code_role, medical_code_id",
    "claim_injuries": "claim_id, is_primary DESC, injury_type_id",
}

VIEW_ORDER_BY = {
    "vw_monthly_kpi": "month_start_date",
    "vw_region_kpi": "region",
    "vw_provider_summary": "provider_id",
}


def _fetch(engine: Engine, sql: str) -> list[dict[str, Any]]:
    with engine.connect() as conn:
        result = conn.execute(text(sql))
        return [dict(row) for row in result.mappings()]


def load_dataset(engine: Engine) -> SeedDataset:
    """
    Read all six tables into a SeedDataset.

    Args:
        engine: SQLAlchemy engine

    Returns:
        SeedDataset with rows ordered by key
    """
    dataset = SeedDataset()
    for table_name in TABLE_INSERT_ORDER:
        model = TABLE_MODELS[table_name]
        columns = ", ".join(TABLE_COLUMNS[table_name])
        rows = _fetch(
            engine,
            f"SELECT {columns} FROM {table_name} ORDER BY {TABLE_ORDER_BY[table_name]}",
        )
        setattr(dataset, table_name, [model.model_validate(row) for row in rows])

    logger.info("dataset_read", **dataset.table_counts())
    return dataset


def read_view(engine: Engine, name: str) -> list[dict[str, Any]]:
    """
    Read every row of a reporting view.

    Args:
        engine: SQLAlchemy engine
        name: One of vw_monthly_kpi, vw_region_kpi, vw_provider_summary

    Returns:
        Rows as dictionaries
    """
    if name not in VIEW_NAMES:
        raise ValueError(f"Unknown view: {name}")
    return _fetch(engine, f"SELECT * FROM {name} ORDER BY {VIEW_ORDER_BY[name]}")

"""
Core seed pipeline for NPE Claims Analytics.

Provides:
- SeedDataset, the in-memory six-table container
- The integrity gate (stored constraints and generation contracts)
- Post-generation verification tallies
- SeedGenerator, which runs the whole pipeline
"""

from npe_claims.core.dataset import SeedDataset, TABLE_INSERT_ORDER, TABLE_CLEAR_ORDER
from npe_claims.core.integrity import DatasetIntegrityError, check_dataset_integrity
from npe_claims.core.verification import VerificationReport, verify_dataset
from npe_claims.core.seeder import SeedGenerator, SeedResult

__all__ = [
    "SeedDataset",
    "TABLE_INSERT_ORDER",
    "TABLE_CLEAR_ORDER",
    "DatasetIntegrityError",
    "check_dataset_integrity",
    "VerificationReport",
    "verify_dataset",
    "SeedGenerator",
    "SeedResult",
]

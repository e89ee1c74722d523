"""
Domain models for NPE Claims Analytics.

Pydantic models representing the six stored tables.
"""

from npe_claims.domain.enums import (
    Region,
    ProviderType,
    CodeSystem,
    InjuryGroup,
    PatientSex,
    ClaimStatus,
    Decision,
    APPROVING_DECISIONS,
    CareLevel,
    CodeRole,
)
from npe_claims.domain.dimensions import Provider, MedicalCode, InjuryType
from npe_claims.domain.claims import Claim, ClaimMedicalCode, ClaimInjury

__all__ = [
    # Enums
    "Region",
    "ProviderType",
    "CodeSystem",
    "InjuryGroup",
    "PatientSex",
    "ClaimStatus",
    "Decision",
    "APPROVING_DECISIONS",
    "CareLevel",
    "CodeRole",
    # Dimensions
    "Provider",
    "MedicalCode",
    "InjuryType",
    # Claims
    "Claim",
    "ClaimMedicalCode",
    "ClaimInjury",
]

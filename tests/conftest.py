"""
Shared test fixtures for NPE Claims Analytics tests.
"""

from datetime import date
from decimal import Decimal
from typing import Any, Callable

import numpy as np
import pytest

from npe_claims.config.models import (
    AssociationConfig,
    GenerationConfig,
    ScaleConfig,
)
from npe_claims.core.dataset import SeedDataset
from npe_claims.domain.claims import Claim, ClaimInjury, ClaimMedicalCode
from npe_claims.domain.dimensions import InjuryType, MedicalCode, Provider
from npe_claims.domain.enums import (
    CareLevel,
    ClaimStatus,
    CodeRole,
    CodeSystem,
    Decision,
    InjuryGroup,
    PatientSex,
    ProviderType,
    Region,
)
from npe_claims.generators.id_generator import IDGenerator


AS_OF_DATE = date(2024, 6, 30)


# =============================================================================
# RNG Fixtures
# =============================================================================


@pytest.fixture
def test_seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def test_rng(test_seed: int) -> np.random.Generator:
    """Deterministic random number generator."""
    return np.random.default_rng(test_seed)


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def as_of_date() -> date:
    """Fixed generation date."""
    return AS_OF_DATE


@pytest.fixture
def test_config(test_seed: int) -> GenerationConfig:
    """Reference-scale configuration pinned to a fixed date."""
    return GenerationConfig(seed=test_seed, as_of_date=AS_OF_DATE)


@pytest.fixture
def small_config(test_seed: int) -> GenerationConfig:
    """Small configuration for fast pipeline tests."""
    return GenerationConfig(
        seed=test_seed,
        as_of_date=AS_OF_DATE,
        scale=ScaleConfig(
            providers_per_region=2,
            codes_per_system=5,
            injury_type_count=6,
            claim_count=150,
        ),
        associations=AssociationConfig(
            codes_per_claim=(1, 3),
            injuries_per_claim=(1, 2),
        ),
    )


# =============================================================================
# Generator Fixtures
# =============================================================================


@pytest.fixture
def id_generator() -> IDGenerator:
    """Test ID generator."""
    return IDGenerator(as_of_date=AS_OF_DATE)


# =============================================================================
# Hand-built rows
# =============================================================================


def build_provider(provider_id: int = 1, **overrides: Any) -> Provider:
    values = {
        "provider_id": provider_id,
        "provider_name": f"Oslo Clinic {chr(64 + provider_id)}",
        "org_number": f"NO{100000000 + provider_id:09d}",
        "provider_type": ProviderType.CLINIC,
        "region": Region.OSLO,
        "active": True,
    }
    values.update(overrides)
    return Provider(**values)


def build_claim(
    claim_id: int = 1,
    received_date: date = date(2024, 1, 10),
    status: ClaimStatus = ClaimStatus.RECEIVED,
    decision: Decision | None = None,
    decision_date: date | None = None,
    amount: str = "0.00",
    **overrides: Any,
) -> Claim:
    values = {
        "claim_id": claim_id,
        "claim_reference": f"CLM-20240630-{claim_id:06d}",
        "patient_age": 40,
        "patient_sex": PatientSex.FEMALE,
        "region": Region.OSLO,
        "received_date": received_date,
        "decision_date": decision_date,
        "status": status,
        "decision": decision,
        "care_level": CareLevel.PRIMARY,
        "claim_amount_nok": Decimal(amount),
        "provider_id": 1,
    }
    values.update(overrides)
    return Claim(**values)


@pytest.fixture
def make_claim() -> Callable[..., Claim]:
    """Factory for hand-built claims."""
    return build_claim


@pytest.fixture
def make_provider() -> Callable[..., Provider]:
    """Factory for hand-built providers."""
    return build_provider


@pytest.fixture
def tiny_dataset() -> SeedDataset:
    """
    Hand-built, fully consistent dataset.

    Two providers, three codes (one inactive), two injury types and four
    claims: one Received, one InReview, one Closed/Approved and one
    Closed/Rejected.
    """
    providers = [
        build_provider(1),
        build_provider(
            2,
            provider_name="Viken Hospital B",
            provider_type=ProviderType.HOSPITAL,
            region=Region.VIKEN,
        ),
    ]
    codes = [
        MedicalCode(medical_code_id=1, code_system=CodeSystem.ICD10, code="I01.7",
                    code_title="ICD10 demo diagnosis 1"),
        MedicalCode(medical_code_id=2, code_system=CodeSystem.NCSP, code="N001",
                    code_title="NCSP demo procedure 1"),
        MedicalCode(medical_code_id=3, code_system=CodeSystem.ICPC2, code="P01",
                    code_title="ICPC2 demo primary care code 1", active=False),
    ]
    injuries = [
        InjuryType(injury_type_id=1, injury_group=InjuryGroup.DIAGNOSTIC,
                   injury_name="Diagnostic issue 1", severity=1),
        InjuryType(injury_type_id=2, injury_group=InjuryGroup.INFECTION,
                   injury_name="Infection issue 2", severity=2),
    ]
    claims = [
        build_claim(1, received_date=date(2024, 1, 5)),
        build_claim(2, received_date=date(2024, 1, 20), status=ClaimStatus.IN_REVIEW,
                    region=Region.VIKEN, provider_id=2),
        build_claim(3, received_date=date(2024, 2, 1), status=ClaimStatus.CLOSED,
                    decision=Decision.APPROVED, decision_date=date(2024, 3, 2),
                    amount="1500.50", provider_id=2, care_level=CareLevel.HOSPITAL),
        build_claim(4, received_date=date(2024, 2, 10), status=ClaimStatus.CLOSED,
                    decision=Decision.REJECTED, decision_date=date(2024, 2, 20)),
    ]
    claim_codes = [
        ClaimMedicalCode(claim_id=1, medical_code_id=1, code_role=CodeRole.PRIMARY),
        ClaimMedicalCode(claim_id=2, medical_code_id=2, code_role=CodeRole.PRIMARY),
        ClaimMedicalCode(claim_id=3, medical_code_id=1, code_role=CodeRole.PRIMARY),
        ClaimMedicalCode(claim_id=3, medical_code_id=2, code_role=CodeRole.SECONDARY),
        ClaimMedicalCode(claim_id=4, medical_code_id=1, code_role=CodeRole.PRIMARY),
    ]
    claim_injuries = [
        ClaimInjury(claim_id=1, injury_type_id=1, is_primary=True),
        ClaimInjury(claim_id=2, injury_type_id=2, is_primary=True),
        ClaimInjury(claim_id=3, injury_type_id=1, is_primary=True),
        ClaimInjury(claim_id=3, injury_type_id=2, is_primary=False),
        ClaimInjury(claim_id=4, injury_type_id=2, is_primary=True),
    ]
    return SeedDataset(
        providers=providers,
        medical_codes=codes,
        injury_types=injuries,
        claims=claims,
        claim_medical_codes=claim_codes,
        claim_injuries=claim_injuries,
    )

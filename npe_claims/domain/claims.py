"""
Claims domain models for NPE Claims Analytics.

The model validators on Claim mirror the check constraints stored on the
claims table, so an invalid row is rejected before it reaches the database.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from npe_claims.domain.dimensions import enum_values
from npe_claims.domain.enums import (
    CareLevel,
    ClaimStatus,
    CodeRole,
    Decision,
    PatientSex,
    Region,
)


class Claim(BaseModel):
    """A single patient-injury compensation claim."""

    claim_id: int = Field(..., ge=1)
    claim_reference: str = Field(..., min_length=1)

    patient_age: int = Field(..., ge=0, le=120)
    patient_sex: PatientSex
    region: Region

    received_date: date
    decision_date: Optional[date] = None

    status: ClaimStatus
    decision: Optional[Decision] = None
    care_level: CareLevel

    claim_amount_nok: Decimal = Field(
        default=Decimal("0.00"),
        ge=0,
        max_digits=12,
        decimal_places=2,
    )

    provider_id: int = Field(..., ge=1)

    created_at: datetime = Field(default_factory=datetime.now)

    @model_validator(mode="after")
    def closed_requires_decision(self) -> "Claim":
        """A decision is recorded if and only if the claim is Closed."""
        is_closed = self.status == ClaimStatus.CLOSED
        if is_closed and self.decision is None:
            raise ValueError(f"Claim {self.claim_reference} is Closed but has no decision")
        if not is_closed and self.decision is not None:
            raise ValueError(
                f"Claim {self.claim_reference} has decision {self.decision.value} "
                f"but status {self.status.value}"
            )
        return self

    @model_validator(mode="after")
    def decision_date_after_received(self) -> "Claim":
        """Decision date, if present, is on or after the received date."""
        if self.decision_date is not None and self.decision_date < self.received_date:
            raise ValueError(
                f"Claim {self.claim_reference} decided {self.decision_date} "
                f"before it was received {self.received_date}"
            )
        return self

    @property
    def is_closed(self) -> bool:
        return self.status == ClaimStatus.CLOSED

    @property
    def processing_days(self) -> Optional[int]:
        """Days from receipt to decision, or None while either date is missing."""
        if self.decision_date is None:
            return None
        return (self.decision_date - self.received_date).days

    def model_dump_db(self) -> dict:
        """Convert to dictionary for database insertion."""
        return enum_values(self.model_dump())


class ClaimMedicalCode(BaseModel):
    """Medical code attached to a claim."""

    claim_id: int = Field(..., ge=1)
    medical_code_id: int = Field(..., ge=1)
    code_role: CodeRole

    created_at: datetime = Field(default_factory=datetime.now)

    def model_dump_db(self) -> dict:
        """Convert to dictionary for database insertion."""
        return enum_values(self.model_dump())


class ClaimInjury(BaseModel):
    """Injury type attached to a claim."""

    claim_id: int = Field(..., ge=1)
    injury_type_id: int = Field(..., ge=1)
    is_primary: bool = False

    created_at: datetime = Field(default_factory=datetime.now)

    def model_dump_db(self) -> dict:
        """Convert to dictionary for database insertion."""
        return enum_values(self.model_dump())

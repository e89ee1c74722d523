"""
Dimension domain models for NPE Claims Analytics.

Providers, medical codes and injury types are referenced by claims and
never owned by them.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from npe_claims.domain.enums import CodeSystem, InjuryGroup, ProviderType, Region


def enum_values(data: dict) -> dict:
    """Replace enum members in a dumped record with their stored text values."""
    return {
        key: value.value if isinstance(value, Enum) else value
        for key, value in data.items()
    }


class Provider(BaseModel):
    """Healthcare provider a claim is filed against."""

    provider_id: int = Field(..., ge=1)
    provider_name: str = Field(..., min_length=1)
    org_number: Optional[str] = None
    provider_type: ProviderType
    region: Region
    active: bool = True

    created_at: datetime = Field(default_factory=datetime.now)

    def model_dump_db(self) -> dict:
        """Convert to dictionary for database insertion."""
        return enum_values(self.model_dump())

    @property
    def natural_key(self) -> tuple[str, str]:
        """Unique (provider_name, region) pair."""
        return (self.provider_name, self.region.value)


class MedicalCode(BaseModel):
    """Diagnosis or procedure code from one of the supported code systems."""

    medical_code_id: int = Field(..., ge=1)
    code_system: CodeSystem
    code: str = Field(..., min_length=1)
    code_title: str = Field(..., min_length=1)
    active: bool = True

    created_at: datetime = Field(default_factory=datetime.now)

    def model_dump_db(self) -> dict:
        """Convert to dictionary for database insertion."""
        return enum_values(self.model_dump())

    @property
    def natural_key(self) -> tuple[str, str]:
        """Unique (code_system, code) pair."""
        return (self.code_system.value, self.code)


class InjuryType(BaseModel):
    """Type of treatment injury with a 1-5 severity grade."""

    injury_type_id: int = Field(..., ge=1)
    injury_group: InjuryGroup
    injury_name: str = Field(..., min_length=1)
    severity: int = Field(..., ge=1, le=5)
    active: bool = True

    created_at: datetime = Field(default_factory=datetime.now)

    def model_dump_db(self) -> dict:
        """Convert to dictionary for database insertion."""
        return enum_values(self.model_dump())

    @property
    def natural_key(self) -> tuple[str, str]:
        """Unique (injury_group, injury_name) pair."""
        return (self.injury_group.value, self.injury_name)

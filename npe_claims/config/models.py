"""
Pydantic configuration models for NPE Claims Analytics.

These models define the structure and validation for seed generation
configuration. Every field has a default, so an empty configuration file
reproduces the reference dataset (39 providers, 84 codes, 16 injury types,
1,200 claims).
"""

from datetime import date

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings


def _check_weights(v: dict[str, float]) -> dict[str, float]:
    """Ensure distribution weights are non-negative and sum to approximately 1.0."""
    if not v:
        raise ValueError("Distribution must not be empty")
    if any(w < 0 for w in v.values()):
        raise ValueError("Distribution weights must be non-negative")
    total = sum(v.values())
    if not 0.99 <= total <= 1.01:
        raise ValueError(f"Distribution weights must sum to 1.0, got {total}")
    return v


class ScaleConfig(BaseModel):
    """Row counts for each generated table."""

    providers_per_region: int = Field(
        default=3,
        ge=1,
        le=26,
        description="Provider slots per region (letter suffix A..Z, so at most 26)",
    )
    codes_per_system: int = Field(
        default=21,
        ge=1,
        le=99,
        description="Medical codes generated per code system",
    )
    injury_type_count: int = Field(
        default=16,
        ge=1,
        le=999,
        description="Number of injury types",
    )
    claim_count: int = Field(
        default=1200,
        ge=1,
        le=999999,
        description="Number of claims (reference sequence is zero-padded to 6 digits)",
    )


class ProviderConfig(BaseModel):
    """Provider dimension parameters."""

    active_probability: float = Field(
        default=0.92,
        ge=0,
        le=1.0,
        description="Probability a provider is flagged active",
    )
    org_number_prefix: str = Field(
        default="NO",
        min_length=2,
        max_length=2,
        description="Two-letter country prefix of the organisation number",
    )
    org_number_base: int = Field(
        default=100000000,
        ge=0,
        description="Base added to the running provider counter",
    )


class MedicalCodeConfig(BaseModel):
    """Medical code dimension parameters."""

    active_probability: float = Field(
        default=0.95,
        ge=0,
        le=1.0,
        description="Probability a medical code is flagged active",
    )


class PayoutConfig(BaseModel):
    """
    Payout amount parameters for approved and partially approved claims.

    The bulk of payouts is the product of two uniforms scaled by
    ``low_value_scale``, concentrating mass near zero. A rare tail is drawn
    uniformly from ``[high_value_floor, high_value_ceiling)``.
    """

    low_value_probability: float = Field(
        default=0.95,
        ge=0,
        le=1.0,
        description="Probability of drawing from the low-value body",
    )
    low_value_scale: float = Field(
        default=250000.0,
        gt=0,
        description="Scale of the U1*U2 body (NOK)",
    )
    high_value_floor: float = Field(
        default=250000.0,
        ge=0,
        description="Lower bound of the high-value tail (NOK)",
    )
    high_value_ceiling: float = Field(
        default=2000000.0,
        gt=0,
        description="Upper bound of the high-value tail (NOK)",
    )

    @model_validator(mode="after")
    def tail_bounds_ordered(self) -> "PayoutConfig":
        """Ensure the high-value tail is a proper interval."""
        if self.high_value_ceiling <= self.high_value_floor:
            raise ValueError("high_value_ceiling must be greater than high_value_floor")
        return self


class ClaimsConfig(BaseModel):
    """Claim fact-table parameters."""

    lookback_days: int = Field(
        default=1095,
        ge=0,
        le=36500,
        description="Received dates are drawn uniformly from [as_of - lookback_days, as_of]",
    )
    status_distribution: dict[str, float] = Field(
        default={
            "Closed": 0.70,
            "InReview": 0.20,
            "Received": 0.10,
        },
        description="Claim status mix (must sum to 1.0)",
    )
    patient_age_range: tuple[int, int] = Field(
        default=(0, 90),
        description="Inclusive patient age range",
    )
    sex_distribution: dict[str, float] = Field(
        default={
            "M": 0.49,
            "F": 0.49,
            "X": 0.01,
            "U": 0.01,
        },
        description="Patient sex mix (must sum to 1.0)",
    )
    care_level_distribution: dict[str, float] = Field(
        default={
            "Primary": 0.55,
            "Specialist": 0.30,
            "Hospital": 0.15,
        },
        description="Care level mix (must sum to 1.0)",
    )
    region_distribution: dict[str, float] = Field(
        default={
            "Oslo": 0.18,
            "Viken": 0.20,
            "Vestland": 0.12,
            "Rogaland": 0.10,
            "Trondelag": 0.09,
            "Innlandet": 0.07,
            "Agder": 0.06,
            "MoreOgRomsdal": 0.05,
            "Nordland": 0.04,
            "Telemark": 0.03,
            "Troms": 0.03,
            "Finnmark": 0.015,
            "Other": 0.015,
        },
        description="Claim region mix (must sum to 1.0)",
    )
    decision_distribution: dict[str, float] = Field(
        default={
            "Approved": 0.55,
            "Rejected": 0.30,
            "PartiallyApproved": 0.15,
        },
        description="Decision mix for Closed claims (must sum to 1.0)",
    )
    decision_delay_days: tuple[int, int] = Field(
        default=(1, 180),
        description="Inclusive range of days from received to decision",
    )
    payout: PayoutConfig = Field(default_factory=PayoutConfig)
    reference_prefix: str = Field(
        default="CLM",
        min_length=1,
        max_length=8,
        description="Prefix of the claim reference",
    )

    @field_validator(
        "status_distribution",
        "sex_distribution",
        "care_level_distribution",
        "region_distribution",
        "decision_distribution",
    )
    @classmethod
    def distribution_sum_to_one(cls, v: dict[str, float]) -> dict[str, float]:
        """Ensure distribution weights sum to approximately 1.0."""
        return _check_weights(v)

    @field_validator("patient_age_range")
    @classmethod
    def age_range_within_bounds(cls, v: tuple[int, int]) -> tuple[int, int]:
        """Ages must respect the stored 0-120 check."""
        low, high = v
        if low < 0 or high > 120 or low > high:
            raise ValueError(f"patient_age_range must satisfy 0 <= low <= high <= 120, got {v}")
        return v

    @field_validator("decision_delay_days")
    @classmethod
    def delay_non_negative(cls, v: tuple[int, int]) -> tuple[int, int]:
        """Decision dates may never precede received dates."""
        low, high = v
        if low < 0 or low > high:
            raise ValueError(f"decision_delay_days must satisfy 0 <= low <= high, got {v}")
        return v


class AssociationConfig(BaseModel):
    """Claim bridge-table parameters."""

    codes_per_claim: tuple[int, int] = Field(
        default=(1, 3),
        description="Inclusive range of distinct medical codes attached to a claim",
    )
    injuries_per_claim: tuple[int, int] = Field(
        default=(1, 2),
        description="Inclusive range of distinct injury types attached to a claim",
    )

    @field_validator("codes_per_claim", "injuries_per_claim")
    @classmethod
    def range_ordered(cls, v: tuple[int, int]) -> tuple[int, int]:
        """Every claim gets at least one row, and min <= max."""
        low, high = v
        if low < 1 or low > high:
            raise ValueError(f"Range must satisfy 1 <= min <= max, got {v}")
        return v


class DatabaseConfig(BaseModel):
    """Database connection settings."""

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="npe_claims_demo", description="Database name")
    username: str = Field(default="postgres", description="Database username")
    password: str = Field(default="", description="Database password")
    db_schema: str = Field(default="public", description="Schema holding tables and views")
    pool_size: int = Field(
        default=2,
        ge=1,
        le=20,
        description="Connection pool size",
    )

    @property
    def connection_string(self) -> str:
        """Build PostgreSQL connection string."""
        return (
            f"postgresql+psycopg://{self.username}:{self.password}"
            f"@{self.host}:{self.port}/{self.database}"
        )


class GenerationConfig(BaseSettings):
    """
    Root seed generation configuration.

    Values can be loaded from YAML files and overridden via environment variables.
    """

    scale: ScaleConfig = Field(default_factory=ScaleConfig)
    providers: ProviderConfig = Field(default_factory=ProviderConfig)
    medical_codes: MedicalCodeConfig = Field(default_factory=MedicalCodeConfig)
    claims: ClaimsConfig = Field(default_factory=ClaimsConfig)
    associations: AssociationConfig = Field(default_factory=AssociationConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)

    seed: int = Field(
        default=42,
        ge=0,
        description="Random seed for reproducibility",
    )
    as_of_date: date | None = Field(
        default=None,
        description="Date treated as 'today' by the generator (defaults to the current date)",
    )

    model_config = {
        "env_prefix": "NPE_CLAIMS_",
        "env_nested_delimiter": "__",
    }

    def resolve_as_of_date(self) -> date:
        """Return the configured as-of date, falling back to today."""
        return self.as_of_date or date.today()

"""
Configuration validation for NPE Claims Analytics.

Provides additional validation beyond Pydantic model validation. Everything
here runs before generation starts, so impossible configurations are reported
as configuration errors rather than surfacing as constraint violations in the
middle of a load.
"""

import structlog

from npe_claims.config.models import GenerationConfig
from npe_claims.domain.enums import (
    CareLevel,
    ClaimStatus,
    CodeSystem,
    Decision,
    PatientSex,
    Region,
)

logger = structlog.get_logger()


class ConfigurationError(Exception):
    """Raised when configuration is invalid."""

    pass


_DISTRIBUTION_ENUMS = {
    "status_distribution": ClaimStatus,
    "sex_distribution": PatientSex,
    "care_level_distribution": CareLevel,
    "region_distribution": Region,
    "decision_distribution": Decision,
}


def validate_config(config: GenerationConfig) -> list[str]:
    """
    Validate generation configuration.

    Performs validation checks beyond what Pydantic models provide,
    such as enum membership of distribution keys and cross-section
    cardinality checks.

    Args:
        config: GenerationConfig to validate

    Returns:
        List of warning messages (non-fatal issues)

    Raises:
        ConfigurationError: If configuration has fatal issues
    """
    warnings: list[str] = []
    errors: list[str] = []

    # Distribution keys must be stored enum values
    for field_name, enum_cls in _DISTRIBUTION_ENUMS.items():
        distribution: dict[str, float] = getattr(config.claims, field_name)
        allowed = {member.value for member in enum_cls}
        unknown = sorted(set(distribution) - allowed)
        if unknown:
            errors.append(
                f"claims.{field_name} has unknown keys {unknown}; "
                f"allowed: {sorted(allowed)}"
            )

    if config.claims.status_distribution.get(ClaimStatus.CLOSED.value, 0.0) == 0.0:
        warnings.append(
            "No claims will be Closed; all closed-claim KPIs will be null."
        )

    # Association counts must fit the dimension cardinality
    total_codes = len(CodeSystem) * config.scale.codes_per_system
    max_codes = config.associations.codes_per_claim[1]
    if max_codes > total_codes:
        errors.append(
            f"associations.codes_per_claim max ({max_codes}) exceeds the number "
            f"of medical codes ({total_codes})"
        )
    elif max_codes > total_codes * config.medical_codes.active_probability:
        warnings.append(
            f"associations.codes_per_claim max ({max_codes}) is close to the expected "
            f"number of active medical codes "
            f"({total_codes * config.medical_codes.active_probability:.0f}); "
            "generation may fail the active-code check."
        )

    if config.medical_codes.active_probability == 0.0:
        errors.append("medical_codes.active_probability is 0; no code can be attached to a claim")

    max_injuries = config.associations.injuries_per_claim[1]
    if max_injuries > config.scale.injury_type_count:
        errors.append(
            f"associations.injuries_per_claim max ({max_injuries}) exceeds the number "
            f"of injury types ({config.scale.injury_type_count})"
        )

    payout = config.claims.payout
    if payout.high_value_floor < payout.low_value_scale:
        warnings.append(
            f"High-value payout floor ({payout.high_value_floor:,.0f}) is below the "
            f"low-value scale ({payout.low_value_scale:,.0f}); the two bands overlap."
        )

    # Log warnings
    for warning in warnings:
        logger.warning("config_validation_warning", message=warning)

    # Raise if any errors
    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ConfigurationError(error_msg)

    return warnings


def check_active_cardinality(
    config: GenerationConfig,
    active_code_count: int,
    active_injury_count: int,
) -> None:
    """
    Check association maxima against the dimension rows actually flagged active.

    Called by the seeder once the dimension tables exist and before any claim
    is drawn.

    Raises:
        ConfigurationError: If a claim could not receive its maximum number
            of distinct active rows
    """
    max_codes = config.associations.codes_per_claim[1]
    max_injuries = config.associations.injuries_per_claim[1]

    errors = []
    if max_codes > active_code_count:
        errors.append(
            f"codes_per_claim max ({max_codes}) exceeds active medical codes ({active_code_count})"
        )
    if max_injuries > active_injury_count:
        errors.append(
            f"injuries_per_claim max ({max_injuries}) exceeds active injury types ({active_injury_count})"
        )
    if errors:
        raise ConfigurationError("; ".join(errors))


def validate_database_connection(config: GenerationConfig) -> bool:
    """
    Test database connection using configuration.

    Args:
        config: GenerationConfig with database settings

    Returns:
        True if connection successful

    Raises:
        ConfigurationError: If connection fails
    """
    from sqlalchemy import create_engine, text

    try:
        engine = create_engine(config.database.connection_string)
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        raise ConfigurationError(f"Database connection failed: {e}") from e

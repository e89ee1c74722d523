"""
Configuration module for NPE Claims Analytics.

This module provides:
- Pydantic configuration models
- YAML configuration loading
- Configuration validation
"""

from npe_claims.config.models import (
    GenerationConfig,
    ScaleConfig,
    ProviderConfig,
    MedicalCodeConfig,
    PayoutConfig,
    ClaimsConfig,
    AssociationConfig,
    DatabaseConfig,
)
from npe_claims.config.loader import load_config
from npe_claims.config.validation import ConfigurationError, validate_config

__all__ = [
    "GenerationConfig",
    "ScaleConfig",
    "ProviderConfig",
    "MedicalCodeConfig",
    "PayoutConfig",
    "ClaimsConfig",
    "AssociationConfig",
    "DatabaseConfig",
    "load_config",
    "validate_config",
    "ConfigurationError",
]

"""
Data generators for NPE Claims Analytics.

Provides generators for the three dimension tables, the claims fact table
and the two claim bridge tables.
"""

from npe_claims.generators.base import BaseGenerator
from npe_claims.generators.id_generator import IDGenerator
from npe_claims.generators.provider_generator import ProviderGenerator
from npe_claims.generators.medical_code_generator import MedicalCodeGenerator
from npe_claims.generators.injury_type_generator import InjuryTypeGenerator
from npe_claims.generators.claims_generator import ClaimsGenerator
from npe_claims.generators.association_generator import AssociationGenerator

__all__ = [
    "BaseGenerator",
    "IDGenerator",
    "ProviderGenerator",
    "MedicalCodeGenerator",
    "InjuryTypeGenerator",
    "ClaimsGenerator",
    "AssociationGenerator",
]

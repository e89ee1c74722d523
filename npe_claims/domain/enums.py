"""
Enumeration types for NPE Claims Analytics domain models.

Member order is the canonical order used for generation and for sorting
report rows; the values are the text stored in the database.
"""

from enum import Enum


class Region(str, Enum):
    """Norwegian health region of a provider or claim."""
    OSLO = "Oslo"
    VIKEN = "Viken"
    VESTLAND = "Vestland"
    ROGALAND = "Rogaland"
    TRONDELAG = "Trondelag"
    NORDLAND = "Nordland"
    INNLANDET = "Innlandet"
    AGDER = "Agder"
    MORE_OG_ROMSDAL = "MoreOgRomsdal"
    TELEMARK = "Telemark"
    TROMS = "Troms"
    FINNMARK = "Finnmark"
    OTHER = "Other"


class ProviderType(str, Enum):
    """Type of healthcare provider."""
    HOSPITAL = "Hospital"
    CLINIC = "Clinic"
    GP = "GP"
    SPECIALIST = "Specialist"
    OTHER = "Other"


class CodeSystem(str, Enum):
    """Medical coding system."""
    ICD10 = "ICD10"
    NCSP = "NCSP"
    ICPC2 = "ICPC2"
    OTHER = "Other"


class InjuryGroup(str, Enum):
    """Broad category of a treatment injury."""
    SURGICAL = "Surgical"
    MEDICATION = "Medication"
    INFECTION = "Infection"
    DIAGNOSTIC = "Diagnostic"
    OTHER = "Other"


class PatientSex(str, Enum):
    """Patient sex as registered on the claim."""
    MALE = "M"
    FEMALE = "F"
    OTHER = "X"
    UNKNOWN = "U"


class ClaimStatus(str, Enum):
    """Claim processing status."""
    RECEIVED = "Received"
    IN_REVIEW = "InReview"
    CLOSED = "Closed"


class Decision(str, Enum):
    """Adjudication outcome of a Closed claim."""
    APPROVED = "Approved"
    REJECTED = "Rejected"
    PARTIALLY_APPROVED = "PartiallyApproved"


# Decisions that count towards the approval rate
APPROVING_DECISIONS = frozenset({Decision.APPROVED, Decision.PARTIALLY_APPROVED})


class CareLevel(str, Enum):
    """Tier of care the claim relates to."""
    PRIMARY = "Primary"
    SPECIALIST = "Specialist"
    HOSPITAL = "Hospital"


class CodeRole(str, Enum):
    """Role of a medical code on a claim."""
    PRIMARY = "Primary"
    SECONDARY = "Secondary"

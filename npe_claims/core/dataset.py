"""
In-memory container for one generated (or loaded) dataset.

Holds the rows of all six tables. Table order here is parent-first, which is
the order rows are inserted in; clearing happens in the reverse order.
"""

from dataclasses import dataclass, field
from typing import Any

from npe_claims.domain.claims import Claim, ClaimInjury, ClaimMedicalCode
from npe_claims.domain.dimensions import InjuryType, MedicalCode, Provider

# Parent tables first
TABLE_INSERT_ORDER = [
    "providers",
    "medical_codes",
    "injury_types",
    "claims",
    "claim_medical_codes",
    "claim_injuries",
]

# Child tables first
TABLE_CLEAR_ORDER = list(reversed(TABLE_INSERT_ORDER))


@dataclass
class SeedDataset:
    """
    Rows of the six claims tables.

    Claims own their bridge rows: removing a claim removes its
    claim_medical_codes and claim_injuries rows too.
    """

    providers: list[Provider] = field(default_factory=list)
    medical_codes: list[MedicalCode] = field(default_factory=list)
    injury_types: list[InjuryType] = field(default_factory=list)
    claims: list[Claim] = field(default_factory=list)
    claim_medical_codes: list[ClaimMedicalCode] = field(default_factory=list)
    claim_injuries: list[ClaimInjury] = field(default_factory=list)

    def table(self, table_name: str) -> list[Any]:
        """Rows of a table by its stored name."""
        if table_name not in TABLE_INSERT_ORDER:
            raise KeyError(f"Unknown table: {table_name}")
        return getattr(self, table_name)

    def table_counts(self) -> dict[str, int]:
        """Row count per table, in insert order."""
        return {name: len(self.table(name)) for name in TABLE_INSERT_ORDER}

    def active_medical_codes(self) -> list[MedicalCode]:
        return [code for code in self.medical_codes if code.active]

    def active_injury_types(self) -> list[InjuryType]:
        return [injury for injury in self.injury_types if injury.active]

    def providers_by_id(self) -> dict[int, Provider]:
        return {p.provider_id: p for p in self.providers}

    def medical_codes_by_id(self) -> dict[int, MedicalCode]:
        return {c.medical_code_id: c for c in self.medical_codes}

    def injury_types_by_id(self) -> dict[int, InjuryType]:
        return {i.injury_type_id: i for i in self.injury_types}

    def remove_claim(self, claim_id: int) -> bool:
        """
        Delete a claim and cascade to its bridge rows.

        Args:
            claim_id: Claim identity

        Returns:
            True if the claim existed
        """
        before = len(self.claims)
        self.claims = [c for c in self.claims if c.claim_id != claim_id]
        if len(self.claims) == before:
            return False

        self.claim_medical_codes = [
            row for row in self.claim_medical_codes if row.claim_id != claim_id
        ]
        self.claim_injuries = [
            row for row in self.claim_injuries if row.claim_id != claim_id
        ]
        return True

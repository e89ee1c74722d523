"""
Association generator for NPE Claims Analytics.

Attaches medical codes and injury types to claims (the two bridge tables).
"""

from typing import Any

from npe_claims.config.models import AssociationConfig
from npe_claims.domain.claims import Claim, ClaimInjury, ClaimMedicalCode
from npe_claims.domain.dimensions import InjuryType, MedicalCode
from npe_claims.domain.enums import CodeRole
from npe_claims.generators.base import BaseGenerator


class AssociationGenerator(BaseGenerator[list[ClaimMedicalCode]]):
    """
    Draws distinct active codes and injury types per claim.

    The first row drawn for a claim is its primary one; which row that is
    depends only on draw order.
    """

    def __init__(self, rng, config: AssociationConfig | None = None):
        """
        Initialize the association generator.

        Args:
            rng: NumPy random number generator
            config: Optional association configuration
        """
        super().__init__(rng)
        self.config = config or AssociationConfig()

    def _draw_count(self, bounds: tuple[int, int]) -> int:
        low, high = bounds
        return self.uniform_int(low, high + 1)

    def generate(
        self,
        claim: Claim,
        active_codes: list[MedicalCode],
        **kwargs: Any,
    ) -> list[ClaimMedicalCode]:
        """
        Attach medical codes to one claim.

        Args:
            claim: Claim to attach codes to
            active_codes: Active medical codes to draw from

        Returns:
            Bridge rows, Primary first
        """
        count = self._draw_count(self.config.codes_per_claim)
        drawn = self.sample(active_codes, count)
        return [
            ClaimMedicalCode(
                claim_id=claim.claim_id,
                medical_code_id=code.medical_code_id,
                code_role=CodeRole.PRIMARY if position == 0 else CodeRole.SECONDARY,
            )
            for position, code in enumerate(drawn)
        ]

    def generate_injuries(
        self,
        claim: Claim,
        active_injuries: list[InjuryType],
    ) -> list[ClaimInjury]:
        """
        Attach injury types to one claim.

        Args:
            claim: Claim to attach injuries to
            active_injuries: Active injury types to draw from

        Returns:
            Bridge rows, primary first
        """
        count = self._draw_count(self.config.injuries_per_claim)
        drawn = self.sample(active_injuries, count)
        return [
            ClaimInjury(
                claim_id=claim.claim_id,
                injury_type_id=injury.injury_type_id,
                is_primary=position == 0,
            )
            for position, injury in enumerate(drawn)
        ]

    def generate_all_codes(
        self,
        claims: list[Claim],
        active_codes: list[MedicalCode],
    ) -> list[ClaimMedicalCode]:
        """Attach medical codes to every claim, in claim order."""
        rows: list[ClaimMedicalCode] = []
        for claim in claims:
            rows.extend(self.generate(claim, active_codes))
        return rows

    def generate_all_injuries(
        self,
        claims: list[Claim],
        active_injuries: list[InjuryType],
    ) -> list[ClaimInjury]:
        """Attach injury types to every claim, in claim order."""
        rows: list[ClaimInjury] = []
        for claim in claims:
            rows.extend(self.generate_injuries(claim, active_injuries))
        return rows

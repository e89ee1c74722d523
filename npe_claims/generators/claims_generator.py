"""
Claims generator for NPE Claims Analytics.

Generates the claims fact table. Every claim is drawn independently; the
draw order within a claim is fixed so a seed reproduces the same rows.
"""

from datetime import date
from decimal import Decimal
from typing import Any

from npe_claims.config.models import ClaimsConfig
from npe_claims.domain.claims import Claim
from npe_claims.domain.dimensions import Provider
from npe_claims.domain.enums import (
    CareLevel,
    ClaimStatus,
    Decision,
    PatientSex,
    Region,
)
from npe_claims.generators.base import BaseGenerator
from npe_claims.generators.id_generator import IDGenerator
from npe_claims.statistics.distributions import sample_payout_amount
from npe_claims.utils.time_conversion import add_days

ZERO_NOK = Decimal("0.00")


class ClaimsGenerator(BaseGenerator[Claim]):
    """
    Generates claims against a fixed provider population.

    The provider is drawn uniformly from all providers, independently of the
    claim's own region.
    """

    def __init__(
        self,
        rng,
        id_generator: IDGenerator,
        as_of_date: date,
        config: ClaimsConfig | None = None,
    ):
        """
        Initialize the claims generator.

        Args:
            rng: NumPy random number generator
            id_generator: ID generator
            as_of_date: Date treated as today; received dates look back from it
            config: Optional claims configuration (uses defaults if not provided)
        """
        super().__init__(rng)
        self.id_generator = id_generator
        self.as_of_date = as_of_date
        self.config = config or ClaimsConfig()

    def generate(self, providers: list[Provider], **kwargs: Any) -> Claim:
        """
        Generate one claim.

        Draw order: received offset, status, age, sex, care level, region,
        provider, then (Closed only) decision, decision delay and payout.

        Args:
            providers: Provider population to attach the claim to

        Returns:
            Claim with the next identity value
        """
        if not providers:
            raise ValueError("Cannot generate claims without providers")

        cfg = self.config
        claim_id = self.id_generator.next_id("claims")

        received_date = add_days(
            self.as_of_date, -self.uniform_int(0, cfg.lookback_days + 1)
        )
        status = ClaimStatus(self.choice_from_dict(cfg.status_distribution))
        age_low, age_high = cfg.patient_age_range
        patient_age = self.uniform_int(age_low, age_high + 1)
        patient_sex = PatientSex(self.choice_from_dict(cfg.sex_distribution))
        care_level = CareLevel(self.choice_from_dict(cfg.care_level_distribution))
        region = Region(self.choice_from_dict(cfg.region_distribution))
        provider = self.choice(providers)

        decision = None
        decision_date = None
        amount = ZERO_NOK

        if status == ClaimStatus.CLOSED:
            decision, decision_date, amount = self._close(received_date)

        return Claim(
            claim_id=claim_id,
            claim_reference=self.id_generator.generate_claim_reference(claim_id),
            patient_age=patient_age,
            patient_sex=patient_sex,
            region=region,
            received_date=received_date,
            decision_date=decision_date,
            status=status,
            decision=decision,
            care_level=care_level,
            claim_amount_nok=amount,
            provider_id=provider.provider_id,
        )

    def _close(self, received_date: date) -> tuple[Decision, date, Decimal]:
        """Draw the decision, decision date and payout of a Closed claim."""
        cfg = self.config
        decision = Decision(self.choice_from_dict(cfg.decision_distribution))

        delay_low, delay_high = cfg.decision_delay_days
        decision_date = add_days(received_date, self.uniform_int(delay_low, delay_high + 1))

        if decision == Decision.REJECTED:
            amount = ZERO_NOK
        else:
            amount = sample_payout_amount(self.rng, cfg.payout)

        return decision, decision_date, amount

    def generate_all(self, count: int, providers: list[Provider]) -> list[Claim]:
        """
        Generate the claims fact table.

        Args:
            count: Number of claims
            providers: Provider population

        Returns:
            Claims in sequence order
        """
        return [self.generate(providers=providers) for _ in range(count)]

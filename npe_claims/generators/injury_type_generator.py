"""
Injury type generator for NPE Claims Analytics.
"""

from typing import Any

from npe_claims.domain.dimensions import InjuryType
from npe_claims.domain.enums import InjuryGroup
from npe_claims.generators.base import BaseGenerator
from npe_claims.generators.id_generator import IDGenerator


class InjuryTypeGenerator(BaseGenerator[InjuryType]):
    """
    Generates injury types with groups and severities cycling by sequence.

    Consumes no randomness; every injury type is active.
    """

    # Alphabetical by stored value: Diagnostic, Infection, Medication, Other, Surgical
    GROUP_CYCLE = sorted(InjuryGroup, key=lambda g: g.value)

    def __init__(self, rng, id_generator: IDGenerator):
        super().__init__(rng)
        self.id_generator = id_generator

    def generate(self, seq: int, **kwargs: Any) -> InjuryType:
        """
        Generate one injury type.

        Args:
            seq: 1-based sequence number

        Returns:
            InjuryType with severity 1 + ((seq - 1) mod 5)
        """
        group = self.GROUP_CYCLE[(seq - 1) % len(self.GROUP_CYCLE)]
        return InjuryType(
            injury_type_id=self.id_generator.next_id("injury_types"),
            injury_group=group,
            injury_name=f"{group.value} issue {seq}",
            severity=1 + ((seq - 1) % 5),
            active=True,
        )

    def generate_all(self, count: int) -> list[InjuryType]:
        """Generate the full injury type dimension."""
        return [self.generate(seq=seq) for seq in range(1, count + 1)]

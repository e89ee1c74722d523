"""
Provider generator for NPE Claims Analytics.

Generates the provider dimension: a fixed number of provider slots in every
region.
"""

from typing import Any

from npe_claims.config.models import ProviderConfig
from npe_claims.domain.dimensions import Provider
from npe_claims.domain.enums import ProviderType, Region
from npe_claims.generators.base import BaseGenerator
from npe_claims.generators.id_generator import IDGenerator


class ProviderGenerator(BaseGenerator[Provider]):
    """
    Generates providers for every (region, slot) pair.

    Provider types cycle through the types in alphabetical order by slot, and
    the slot letter suffix keeps names unique within a region.
    """

    # Name label per provider type
    NAME_LABELS = {
        ProviderType.HOSPITAL: "Hospital",
        ProviderType.CLINIC: "Clinic",
        ProviderType.GP: "GP Center",
        ProviderType.SPECIALIST: "Specialist",
        ProviderType.OTHER: "Provider",
    }

    # Alphabetical by stored value: Clinic, GP, Hospital, Other, Specialist
    TYPE_CYCLE = sorted(ProviderType, key=lambda t: t.value)

    def __init__(
        self,
        rng,
        id_generator: IDGenerator,
        config: ProviderConfig | None = None,
    ):
        """
        Initialize the provider generator.

        Args:
            rng: NumPy random number generator
            id_generator: ID generator
            config: Optional provider configuration (uses defaults if not provided)
        """
        super().__init__(rng)
        self.id_generator = id_generator
        self.config = config or ProviderConfig()

    def provider_type_for_slot(self, slot: int) -> ProviderType:
        """Provider type assigned to a 1-based slot."""
        return self.TYPE_CYCLE[(slot - 1) % len(self.TYPE_CYCLE)]

    def generate(self, region: Region, slot: int, **kwargs: Any) -> Provider:
        """
        Generate one provider.

        Args:
            region: Provider region
            slot: 1-based slot within the region (1 -> suffix "A")

        Returns:
            Provider with the next identity value
        """
        provider_type = self.provider_type_for_slot(slot)
        name = f"{region.value} {self.NAME_LABELS[provider_type]} {chr(64 + slot)}"

        return Provider(
            provider_id=self.id_generator.next_id("providers"),
            provider_name=name,
            org_number=self.id_generator.generate_org_number(),
            provider_type=provider_type,
            region=region,
            active=self.bernoulli(self.config.active_probability),
        )

    def generate_all(self, providers_per_region: int) -> list[Provider]:
        """
        Generate the full provider dimension.

        Args:
            providers_per_region: Number of slots per region

        Returns:
            Providers ordered by region, then slot
        """
        return [
            self.generate(region=region, slot=slot)
            for region in Region
            for slot in range(1, providers_per_region + 1)
        ]

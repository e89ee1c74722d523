"""
ID generator for NPE Claims Analytics.

Generates identity values and business identifiers (organisation numbers,
claim references) in a deterministic, reproducible manner.
"""

from datetime import date

from npe_claims.utils.time_conversion import date_stamp


class IDGenerator:
    """
    Generates identifiers for seeded entities.

    Identity counters start at 1 for every table, matching a freshly
    truncated table with ``RESTART IDENTITY``. Business identifiers are
    derived from sequence numbers and the as-of date, so no randomness is
    consumed here.

    Usage:
        id_gen = IDGenerator(as_of_date=date(2024, 6, 30))
        provider_id = id_gen.next_id("providers")
        org_number = id_gen.generate_org_number()
        reference = id_gen.generate_claim_reference(claim_id)
    """

    TABLES = (
        "providers",
        "medical_codes",
        "injury_types",
        "claims",
    )

    def __init__(
        self,
        as_of_date: date,
        reference_prefix: str = "CLM",
        org_number_prefix: str = "NO",
        org_number_base: int = 100000000,
    ):
        """
        Initialize the ID generator.

        Args:
            as_of_date: Generation date stamped into claim references
            reference_prefix: Claim reference prefix
            org_number_prefix: Two-letter organisation number prefix
            org_number_base: Base added to the organisation number counter
        """
        self.as_of_date = as_of_date
        self.reference_prefix = reference_prefix
        self.org_number_prefix = org_number_prefix
        self.org_number_base = org_number_base

        self._identity: dict[str, int] = {}
        self._org_counter = 0
        self.reset()

    def reset(self) -> None:
        """Restart all identity counters at their initial value."""
        self._identity = {table: 0 for table in self.TABLES}
        self._org_counter = 0

    def next_id(self, table: str) -> int:
        """
        Allocate the next identity value for a table.

        Args:
            table: Table name (one of TABLES)

        Returns:
            1-based identity value
        """
        if table not in self._identity:
            raise KeyError(f"No identity counter for table: {table}")
        self._identity[table] += 1
        return self._identity[table]

    def generate_org_number(self) -> str:
        """
        Generate a unique organisation number.

        Format: CC + 9 digits (e.g. NO100000001)

        Returns:
            Organisation number string
        """
        self._org_counter += 1
        return f"{self.org_number_prefix}{self.org_number_base + self._org_counter:09d}"

    def generate_claim_reference(self, sequence: int) -> str:
        """
        Generate a claim reference.

        Format: CLM-YYYYMMDD-NNNNNN (date is the generation date)

        Args:
            sequence: Claim sequence number within the run

        Returns:
            Claim reference string, unique within one run
        """
        return f"{self.reference_prefix}-{date_stamp(self.as_of_date)}-{sequence:06d}"

"""
Unit tests for the seed pipeline (generation, gate, load, verification).
"""

from collections import Counter

import pytest

from npe_claims.config.models import AssociationConfig, GenerationConfig, MedicalCodeConfig, ScaleConfig
from npe_claims.config.validation import ConfigurationError
from npe_claims.core.dataset import SeedDataset
from npe_claims.core.seeder import SeedGenerator
from npe_claims.db.protocol import DatasetWriterProtocol
from npe_claims.domain.enums import ClaimStatus, CodeRole


class InMemoryWriter:
    """Writer that keeps the last loaded dataset."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.dataset: SeedDataset | None = None
        self._counts: dict[str, int] = {}

    def load(self, dataset: SeedDataset) -> dict[str, int]:
        if self.fail:
            raise RuntimeError("storage unavailable")
        self.dataset = dataset
        self._counts = dataset.table_counts()
        return self._counts

    def get_all_counts(self) -> dict[str, int]:
        return dict(self._counts)


@pytest.fixture(scope="module")
def reference_dataset() -> SeedDataset:
    """Dataset at the reference scale (generated once per module)."""
    from datetime import date

    config = GenerationConfig(seed=42, as_of_date=date(2024, 6, 30))
    return SeedGenerator(config).generate()


class TestReferenceScale:
    """The default configuration reproduces the reference dataset shape."""

    def test_dimension_and_fact_counts(self, reference_dataset: SeedDataset):
        """39 providers, 84 codes, 16 injury types, 1200 claims."""
        counts = reference_dataset.table_counts()

        assert counts["providers"] == 39
        assert counts["medical_codes"] == 84
        assert counts["injury_types"] == 16
        assert counts["claims"] == 1200

    def test_bridge_counts_bounded(self, reference_dataset: SeedDataset):
        """Bridge tables hold 1..3 codes and 1..2 injuries per claim."""
        counts = reference_dataset.table_counts()

        assert 1200 <= counts["claim_medical_codes"] <= 3600
        assert 1200 <= counts["claim_injuries"] <= 2400

    def test_one_primary_per_claim(self, reference_dataset: SeedDataset):
        """Every claim has exactly one primary code and one primary injury."""
        code_primaries = Counter(
            r.claim_id for r in reference_dataset.claim_medical_codes
            if r.code_role == CodeRole.PRIMARY
        )
        injury_primaries = Counter(
            r.claim_id for r in reference_dataset.claim_injuries if r.is_primary
        )

        assert set(code_primaries.values()) == {1}
        assert set(injury_primaries.values()) == {1}
        assert len(code_primaries) == len(injury_primaries) == 1200

    def test_associations_use_active_rows(self, reference_dataset: SeedDataset):
        """Bridge rows only point at active codes."""
        active = {c.medical_code_id for c in reference_dataset.active_medical_codes()}

        assert {r.medical_code_id for r in reference_dataset.claim_medical_codes} <= active

    def test_status_decision_coupling(self, reference_dataset: SeedDataset):
        """Decision present exactly on Closed claims."""
        for claim in reference_dataset.claims:
            assert (claim.decision is not None) == (claim.status == ClaimStatus.CLOSED)


class TestSeedGenerator:
    """Tests for SeedGenerator."""

    def test_same_seed_same_dataset(self, small_config: GenerationConfig):
        """Two runs with the same seed and date produce identical rows."""
        def rows(dataset: SeedDataset):
            return {
                table: [r.model_dump(exclude={"created_at"}) for r in dataset.table(table)]
                for table in dataset.table_counts()
            }

        first = SeedGenerator(small_config).generate()
        second = SeedGenerator(small_config).generate()

        assert rows(first) == rows(second)

    def test_different_seed_different_claims(self, small_config: GenerationConfig):
        """Changing the seed changes the claims."""
        other = small_config.model_copy(update={"seed": small_config.seed + 1})

        first = SeedGenerator(small_config).generate()
        second = SeedGenerator(other).generate()

        assert [c.received_date for c in first.claims] != [c.received_date for c in second.claims]

    def test_run_with_writer_loads_dataset(self, small_config: GenerationConfig):
        """run() hands the gated dataset to the writer and verifies it."""
        writer = InMemoryWriter()
        assert isinstance(writer, DatasetWriterProtocol)

        result = SeedGenerator(small_config).run(writer=writer)

        assert result.loaded
        assert writer.dataset is result.dataset
        assert writer.get_all_counts()["claims"] == 150
        assert result.report.passed
        assert result.report.table_counts["claims"] == 150

    def test_dry_run(self, small_config: GenerationConfig):
        """run() without a writer still verifies."""
        result = SeedGenerator(small_config).run()

        assert not result.loaded
        assert result.report.table_counts["providers"] == 26

    def test_writer_failure_propagates(self, small_config: GenerationConfig):
        """A failed load surfaces to the caller."""
        with pytest.raises(RuntimeError, match="storage unavailable"):
            SeedGenerator(small_config).run(writer=InMemoryWriter(fail=True))

    def test_impossible_association_count_is_config_error(self, small_config: GenerationConfig):
        """Asking for more codes per claim than exist fails before generation."""
        config = small_config.model_copy(
            update={"associations": AssociationConfig(codes_per_claim=(1, 30))}
        )

        with pytest.raises(ConfigurationError):
            SeedGenerator(config).generate()

    def test_too_few_active_codes_is_config_error(self, small_config: GenerationConfig):
        """Maxima are re-checked against the codes actually flagged active."""
        config = small_config.model_copy(
            update={
                "scale": ScaleConfig(
                    providers_per_region=1,
                    codes_per_system=1,
                    injury_type_count=4,
                    claim_count=10,
                ),
                "medical_codes": MedicalCodeConfig(active_probability=0.01),
                "associations": AssociationConfig(codes_per_claim=(1, 4)),
            }
        )

        with pytest.raises(ConfigurationError, match="active medical codes"):
            SeedGenerator(config).generate()

"""
Unit tests for the dimension and association generators.
"""

from datetime import date

import numpy as np
import pytest

from npe_claims.config.models import AssociationConfig, MedicalCodeConfig, ProviderConfig
from npe_claims.domain.enums import CodeRole, CodeSystem, InjuryGroup, ProviderType, Region
from npe_claims.generators.association_generator import AssociationGenerator
from npe_claims.generators.id_generator import IDGenerator
from npe_claims.generators.injury_type_generator import InjuryTypeGenerator
from npe_claims.generators.medical_code_generator import MedicalCodeGenerator
from npe_claims.generators.provider_generator import ProviderGenerator


class TestIDGenerator:
    """Tests for IDGenerator."""

    def test_identities_start_at_one_per_table(self, id_generator: IDGenerator):
        """Each table has its own counter starting at 1."""
        assert id_generator.next_id("providers") == 1
        assert id_generator.next_id("providers") == 2
        assert id_generator.next_id("claims") == 1

    def test_unknown_table_rejected(self, id_generator: IDGenerator):
        """Tables without an identity column have no counter."""
        with pytest.raises(KeyError):
            id_generator.next_id("claim_injuries")

    def test_org_number_format(self, id_generator: IDGenerator):
        """Organisation numbers are NO + 9 digits from 100000001."""
        assert id_generator.generate_org_number() == "NO100000001"
        assert id_generator.generate_org_number() == "NO100000002"

    def test_claim_reference_format(self, id_generator: IDGenerator):
        """Claim references embed the as-of date and a 6-digit sequence."""
        assert id_generator.generate_claim_reference(7) == "CLM-20240630-000007"

    def test_reset_restarts_counters(self, id_generator: IDGenerator):
        """Reset mirrors TRUNCATE ... RESTART IDENTITY."""
        id_generator.next_id("claims")
        id_generator.generate_org_number()
        id_generator.reset()

        assert id_generator.next_id("claims") == 1
        assert id_generator.generate_org_number() == "NO100000001"


class TestProviderGenerator:
    """Tests for ProviderGenerator."""

    def test_generate_all_covers_every_region_and_slot(
        self, test_rng: np.random.Generator, id_generator: IDGenerator
    ):
        """Three slots in each of the 13 regions gives 39 providers."""
        providers = ProviderGenerator(test_rng, id_generator).generate_all(3)

        assert len(providers) == 39
        assert [p.provider_id for p in providers] == list(range(1, 40))
        assert {p.region for p in providers} == set(Region)

    def test_type_cycles_alphabetically_by_slot(
        self, test_rng: np.random.Generator, id_generator: IDGenerator
    ):
        """Slots 1..5 get Clinic, GP, Hospital, Other, Specialist."""
        gen = ProviderGenerator(test_rng, id_generator)

        assert [gen.provider_type_for_slot(s) for s in range(1, 7)] == [
            ProviderType.CLINIC,
            ProviderType.GP,
            ProviderType.HOSPITAL,
            ProviderType.OTHER,
            ProviderType.SPECIALIST,
            ProviderType.CLINIC,
        ]

    def test_names_use_label_and_slot_letter(
        self, test_rng: np.random.Generator, id_generator: IDGenerator
    ):
        """Names are '{region} {label} {letter}'."""
        providers = ProviderGenerator(test_rng, id_generator).generate_all(4)
        oslo = [p.provider_name for p in providers if p.region == Region.OSLO]

        assert oslo == [
            "Oslo Clinic A",
            "Oslo GP Center B",
            "Oslo Hospital C",
            "Oslo Provider D",
        ]

    def test_names_unique_within_region(
        self, test_rng: np.random.Generator, id_generator: IDGenerator
    ):
        """(provider_name, region) is unique."""
        providers = ProviderGenerator(test_rng, id_generator).generate_all(26)
        keys = [p.natural_key for p in providers]

        assert len(keys) == len(set(keys))

    def test_active_probability_respected(self, id_generator: IDGenerator):
        """Probability 0 and 1 give all-inactive and all-active providers."""
        rng = np.random.default_rng(1)
        none_active = ProviderGenerator(
            rng, id_generator, ProviderConfig(active_probability=0.0)
        ).generate_all(2)
        all_active = ProviderGenerator(
            rng, IDGenerator(date(2024, 6, 30)), ProviderConfig(active_probability=1.0)
        ).generate_all(2)

        assert not any(p.active for p in none_active)
        assert all(p.active for p in all_active)


class TestMedicalCodeGenerator:
    """Tests for MedicalCodeGenerator."""

    @pytest.mark.parametrize(
        "code_system,seq,expected",
        [
            (CodeSystem.ICD10, 1, "I01.7"),
            (CodeSystem.ICD10, 10, "I10.0"),
            (CodeSystem.ICD10, 21, "I21.7"),
            (CodeSystem.NCSP, 3, "N003"),
            (CodeSystem.ICPC2, 12, "P12"),
            (CodeSystem.OTHER, 5, "O005"),
        ],
    )
    def test_format_code(self, code_system: CodeSystem, seq: int, expected: str):
        """Code strings follow the per-system pattern."""
        assert MedicalCodeGenerator.format_code(code_system, seq) == expected

    def test_generate_all_counts_and_titles(
        self, test_rng: np.random.Generator, id_generator: IDGenerator
    ):
        """21 codes per system gives 84 codes with templated titles."""
        codes = MedicalCodeGenerator(test_rng, id_generator).generate_all(21)

        assert len(codes) == 84
        assert codes[0].code_title == "ICD10 demo diagnosis 1"
        assert codes[21].code_title == "NCSP demo procedure 1"
        assert codes[42].code_title == "ICPC2 demo primary care code 1"
        assert codes[-1].code_title == "Other demo code 21"

    def test_codes_unique_per_system(
        self, test_rng: np.random.Generator, id_generator: IDGenerator
    ):
        """(code_system, code) is unique."""
        codes = MedicalCodeGenerator(test_rng, id_generator).generate_all(99)
        keys = [c.natural_key for c in codes]

        assert len(keys) == len(set(keys))

    def test_inactive_when_probability_zero(
        self, test_rng: np.random.Generator, id_generator: IDGenerator
    ):
        """Active flag follows the configured probability."""
        codes = MedicalCodeGenerator(
            test_rng, id_generator, MedicalCodeConfig(active_probability=0.0)
        ).generate_all(3)

        assert not any(c.active for c in codes)


class TestInjuryTypeGenerator:
    """Tests for InjuryTypeGenerator."""

    def test_groups_and_severity_cycle(
        self, test_rng: np.random.Generator, id_generator: IDGenerator
    ):
        """Groups cycle alphabetically; severity cycles 1..5."""
        injuries = InjuryTypeGenerator(test_rng, id_generator).generate_all(16)

        assert len(injuries) == 16
        assert [i.injury_group for i in injuries[:6]] == [
            InjuryGroup.DIAGNOSTIC,
            InjuryGroup.INFECTION,
            InjuryGroup.MEDICATION,
            InjuryGroup.OTHER,
            InjuryGroup.SURGICAL,
            InjuryGroup.DIAGNOSTIC,
        ]
        assert [i.severity for i in injuries[:6]] == [1, 2, 3, 4, 5, 1]
        assert injuries[0].injury_name == "Diagnostic issue 1"
        assert injuries[15].injury_name == "Diagnostic issue 16"

    def test_consumes_no_randomness(self, id_generator: IDGenerator):
        """Injury types are fully determined by their sequence."""
        rng = np.random.default_rng(5)
        InjuryTypeGenerator(rng, id_generator).generate_all(16)

        assert rng.random() == np.random.default_rng(5).random()

    def test_all_active(self, test_rng: np.random.Generator, id_generator: IDGenerator):
        """Every injury type is active."""
        injuries = InjuryTypeGenerator(test_rng, id_generator).generate_all(16)

        assert all(i.active for i in injuries)


class TestAssociationGenerator:
    """Tests for AssociationGenerator."""

    @pytest.fixture
    def dimensions(self, id_generator: IDGenerator):
        rng = np.random.default_rng(0)
        codes = MedicalCodeGenerator(
            rng, id_generator, MedicalCodeConfig(active_probability=1.0)
        ).generate_all(3)
        injuries = InjuryTypeGenerator(rng, id_generator).generate_all(4)
        return codes, injuries

    def test_exactly_one_primary_code(self, dimensions, make_claim):
        """The first drawn code is Primary, the rest Secondary."""
        codes, _ = dimensions
        gen = AssociationGenerator(
            np.random.default_rng(3), AssociationConfig(codes_per_claim=(3, 3))
        )

        rows = gen.generate(make_claim(1), codes)

        assert len(rows) == 3
        assert rows[0].code_role == CodeRole.PRIMARY
        assert [r.code_role for r in rows[1:]] == [CodeRole.SECONDARY] * 2
        assert len({r.medical_code_id for r in rows}) == 3

    def test_exactly_one_primary_injury(self, dimensions, make_claim):
        """The first drawn injury is primary."""
        _, injuries = dimensions
        gen = AssociationGenerator(
            np.random.default_rng(3), AssociationConfig(injuries_per_claim=(2, 2))
        )

        rows = gen.generate_injuries(make_claim(1), injuries)

        assert [r.is_primary for r in rows] == [True, False]
        assert rows[0].injury_type_id != rows[1].injury_type_id

    def test_counts_within_bounds(self, dimensions, make_claim):
        """Per-claim counts stay within the configured inclusive range."""
        codes, injuries = dimensions
        gen = AssociationGenerator(np.random.default_rng(11))
        claims = [make_claim(i) for i in range(1, 201)]

        code_rows = gen.generate_all_codes(claims, codes)
        injury_rows = gen.generate_all_injuries(claims, injuries)

        for claim in claims:
            n_codes = sum(1 for r in code_rows if r.claim_id == claim.claim_id)
            n_injuries = sum(1 for r in injury_rows if r.claim_id == claim.claim_id)
            assert 1 <= n_codes <= 3
            assert 1 <= n_injuries <= 2

        # Both ends of the range occur over 200 claims
        per_claim = {
            n for n in (
                sum(1 for r in code_rows if r.claim_id == c.claim_id) for c in claims
            )
        }
        assert per_claim == {1, 2, 3}

    def test_draws_only_from_given_rows(self, dimensions, make_claim):
        """Associations reference only the rows passed in."""
        codes, _ = dimensions
        allowed = codes[:2]
        gen = AssociationGenerator(
            np.random.default_rng(2), AssociationConfig(codes_per_claim=(2, 2))
        )

        rows = gen.generate_all_codes([make_claim(i) for i in range(1, 20)], allowed)

        assert {r.medical_code_id for r in rows} <= {c.medical_code_id for c in allowed}

    def test_more_codes_than_available_rejected(self, dimensions, make_claim):
        """Asking for more rows than exist fails instead of returning fewer."""
        codes, _ = dimensions
        gen = AssociationGenerator(
            np.random.default_rng(2), AssociationConfig(codes_per_claim=(3, 3))
        )

        with pytest.raises(ValueError, match="Cannot sample 3 items"):
            gen.generate(make_claim(1), codes[:2])

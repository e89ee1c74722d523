"""
Unit tests for configuration models, loading and validation.
"""

from datetime import date
from pathlib import Path

import pytest
from pydantic import ValidationError

from npe_claims.config.loader import _deep_merge, load_config
from npe_claims.config.models import (
    AssociationConfig,
    ClaimsConfig,
    GenerationConfig,
    ScaleConfig,
)
from npe_claims.config.validation import (
    ConfigurationError,
    check_active_cardinality,
    validate_config,
)


class TestConfigModels:
    """Tests for the pydantic models."""

    def test_defaults_match_reference_dataset(self):
        """Defaults describe 39 providers, 84 codes, 16 injuries, 1200 claims."""
        config = GenerationConfig()

        assert config.seed == 42
        assert config.scale.providers_per_region == 3
        assert config.scale.codes_per_system == 21
        assert config.scale.injury_type_count == 16
        assert config.scale.claim_count == 1200
        assert config.associations.codes_per_claim == (1, 3)
        assert config.associations.injuries_per_claim == (1, 2)

    def test_distribution_must_sum_to_one(self):
        """Weights that do not sum to 1 are rejected."""
        with pytest.raises(ValidationError):
            ClaimsConfig(status_distribution={"Closed": 0.5, "Received": 0.1})

    def test_negative_weight_rejected(self):
        """Weights are non-negative."""
        with pytest.raises(ValidationError):
            ClaimsConfig(decision_distribution={"Approved": 1.5, "Rejected": -0.5})

    def test_association_range_ordered(self):
        """min <= max and at least one row per claim."""
        with pytest.raises(ValidationError):
            AssociationConfig(codes_per_claim=(3, 1))
        with pytest.raises(ValidationError):
            AssociationConfig(injuries_per_claim=(0, 2))

    def test_slot_letter_limit(self):
        """At most 26 providers per region (A..Z)."""
        with pytest.raises(ValidationError):
            ScaleConfig(providers_per_region=27)

    def test_as_of_date_resolution(self):
        """A configured as-of date wins over today."""
        assert GenerationConfig(as_of_date=date(2024, 6, 30)).resolve_as_of_date() == date(2024, 6, 30)
        assert GenerationConfig().resolve_as_of_date() == date.today()

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch):
        """NPE_CLAIMS_ environment variables override nested fields."""
        monkeypatch.setenv("NPE_CLAIMS_SEED", "7")
        monkeypatch.setenv("NPE_CLAIMS_SCALE__CLAIM_COUNT", "10")

        config = GenerationConfig()

        assert config.seed == 7
        assert config.scale.claim_count == 10


class TestLoader:
    """Tests for YAML loading."""

    def test_load_yaml_with_env_substitution(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        """${VAR:-default} is substituted before validation."""
        monkeypatch.setenv("TEST_DB_NAME", "claims_test")
        path = tmp_path / "generation.yaml"
        path.write_text(
            "seed: 9\n"
            "scale:\n"
            "  claim_count: 25\n"
            "database:\n"
            "  database: ${TEST_DB_NAME}\n"
            "  host: ${TEST_DB_HOST_UNSET:-db.local}\n"
        )

        config = load_config(path)

        assert config.seed == 9
        assert config.scale.claim_count == 25
        assert config.scale.codes_per_system == 21
        assert config.database.database == "claims_test"
        assert config.database.host == "db.local"

    def test_overrides_deep_merge(self, tmp_path: Path):
        """Overrides merge into nested sections."""
        path = tmp_path / "generation.yaml"
        path.write_text("scale:\n  claim_count: 25\n  providers_per_region: 2\n")

        config = load_config(path, override_values={"scale": {"claim_count": 5}})

        assert config.scale.claim_count == 5
        assert config.scale.providers_per_region == 2

    def test_missing_explicit_file(self, tmp_path: Path):
        """An explicit path that does not exist is an error."""
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")

    def test_empty_file_uses_defaults(self, tmp_path: Path):
        """An empty YAML file gives the defaults."""
        path = tmp_path / "generation.yaml"
        path.write_text("")

        assert load_config(path).scale.claim_count == 1200

    def test_deep_merge(self):
        """Nested dictionaries merge; scalars are replaced."""
        merged = _deep_merge({"a": {"b": 1, "c": 2}, "d": 1}, {"a": {"b": 3}, "d": 4})

        assert merged == {"a": {"b": 3, "c": 2}, "d": 4}

    def test_bundled_config_is_valid(self):
        """config/generation.yaml loads and validates."""
        path = Path(__file__).resolve().parents[2] / "config" / "generation.yaml"

        config = load_config(path)

        assert validate_config(config) == []
        assert config.scale.claim_count == 1200

    def test_env_outranks_bundled_file(self, monkeypatch: pytest.MonkeyPatch):
        """NPE_CLAIMS_ variables win over keys the YAML file sets."""
        monkeypatch.setenv("NPE_CLAIMS_SEED", "5")
        monkeypatch.setenv("NPE_CLAIMS_SCALE__CLAIM_COUNT", "77")
        path = Path(__file__).resolve().parents[2] / "config" / "generation.yaml"

        config = load_config(path)

        assert config.seed == 5
        assert config.scale.claim_count == 77
        assert config.scale.codes_per_system == 21

    def test_overrides_outrank_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        """Explicit overrides (CLI flags) win over environment variables."""
        monkeypatch.setenv("NPE_CLAIMS_SEED", "5")
        monkeypatch.setenv("NPE_CLAIMS_SCALE__CLAIM_COUNT", "77")
        path = tmp_path / "generation.yaml"
        path.write_text("seed: 9\nscale:\n  claim_count: 25\n  providers_per_region: 2\n")

        config = load_config(path, override_values={"seed": 11})

        assert config.seed == 11
        assert config.scale.claim_count == 77
        assert config.scale.providers_per_region == 2


class TestValidation:
    """Tests for validate_config and check_active_cardinality."""

    def test_defaults_valid(self):
        """Default configuration has no errors or warnings."""
        assert validate_config(GenerationConfig()) == []

    def test_unknown_distribution_key(self):
        """Distribution keys must be stored values."""
        config = GenerationConfig(
            claims=ClaimsConfig(status_distribution={"Closed": 0.5, "Open": 0.5})
        )

        with pytest.raises(ConfigurationError, match="unknown keys"):
            validate_config(config)

    def test_codes_per_claim_exceeds_codes(self):
        """More codes per claim than codes exist is fatal."""
        config = GenerationConfig(
            scale=ScaleConfig(codes_per_system=1),
            associations=AssociationConfig(codes_per_claim=(1, 5)),
        )

        with pytest.raises(ConfigurationError, match="codes_per_claim"):
            validate_config(config)

    def test_injuries_per_claim_exceeds_injuries(self):
        """More injuries per claim than injury types is fatal."""
        config = GenerationConfig(
            scale=ScaleConfig(injury_type_count=1),
            associations=AssociationConfig(injuries_per_claim=(1, 2)),
        )

        with pytest.raises(ConfigurationError, match="injuries_per_claim"):
            validate_config(config)

    def test_no_closed_claims_warns(self):
        """A status mix without Closed is allowed but warned about."""
        config = GenerationConfig(
            claims=ClaimsConfig(status_distribution={"Received": 0.5, "InReview": 0.5})
        )

        warnings = validate_config(config)

        assert any("Closed" in w for w in warnings)

    def test_active_cardinality(self):
        """Maxima are checked against the active row counts."""
        config = GenerationConfig()

        check_active_cardinality(config, active_code_count=3, active_injury_count=2)
        with pytest.raises(ConfigurationError):
            check_active_cardinality(config, active_code_count=2, active_injury_count=2)
        with pytest.raises(ConfigurationError):
            check_active_cardinality(config, active_code_count=3, active_injury_count=1)

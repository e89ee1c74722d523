"""
Seed generation orchestrator.

Runs the generators in their fixed order against one seeded RNG, gates the
result through the integrity checks, hands it to a writer for an
all-or-nothing load and produces the verification tallies.
"""

import time
from dataclasses import dataclass
from typing import Optional

import numpy as np
import structlog

from npe_claims.config.models import GenerationConfig
from npe_claims.config.validation import check_active_cardinality, validate_config
from npe_claims.core.dataset import SeedDataset
from npe_claims.core.integrity import check_dataset_integrity
from npe_claims.core.verification import VerificationReport, verify_dataset
from npe_claims.db.protocol import DatasetWriterProtocol
from npe_claims.generators.association_generator import AssociationGenerator
from npe_claims.generators.claims_generator import ClaimsGenerator
from npe_claims.generators.id_generator import IDGenerator
from npe_claims.generators.injury_type_generator import InjuryTypeGenerator
from npe_claims.generators.medical_code_generator import MedicalCodeGenerator
from npe_claims.generators.provider_generator import ProviderGenerator
from npe_claims.utils.logging import GenerationLogger

logger = structlog.get_logger()


@dataclass
class SeedResult:
    """Outcome of one seed run."""

    dataset: SeedDataset
    report: VerificationReport
    loaded: bool
    elapsed_seconds: float
    warnings: list[str]


class SeedGenerator:
    """
    Generates a complete, constraint-consistent claims dataset.

    Randomness is drawn from a single ``numpy.random.Generator`` created from
    the configured seed, in the order providers, medical codes, injury types,
    claims, claim medical codes, claim injuries. The same seed and as-of date
    therefore reproduce the same dataset.

    Usage:
        seeder = SeedGenerator(config)
        dataset = seeder.generate()
        result = seeder.run(writer=DatasetWriter(engine))
    """

    def __init__(self, config: GenerationConfig):
        """
        Initialize the seeder.

        Args:
            config: Generation configuration
        """
        self.config = config
        self.as_of_date = config.resolve_as_of_date()
        self._warnings: list[str] = []

    def generate(self) -> SeedDataset:
        """
        Generate and gate a dataset without writing it anywhere.

        Returns:
            SeedDataset that passed every integrity check

        Raises:
            ConfigurationError: If the configuration cannot produce a valid dataset
            DatasetIntegrityError: If the generated rows violate a constraint
        """
        cfg = self.config
        self._warnings = validate_config(cfg)

        log = GenerationLogger(seed=cfg.seed, as_of_date=self.as_of_date.isoformat())
        log.generation_started(
            claim_count=cfg.scale.claim_count,
            providers_per_region=cfg.scale.providers_per_region,
        )
        started = time.perf_counter()

        rng = np.random.default_rng(cfg.seed)
        id_generator = IDGenerator(
            as_of_date=self.as_of_date,
            reference_prefix=cfg.claims.reference_prefix,
            org_number_prefix=cfg.providers.org_number_prefix,
            org_number_base=cfg.providers.org_number_base,
        )

        dataset = SeedDataset()

        dataset.providers = ProviderGenerator(
            rng, id_generator, cfg.providers
        ).generate_all(cfg.scale.providers_per_region)
        log.table_generated("providers", len(dataset.providers))

        dataset.medical_codes = MedicalCodeGenerator(
            rng, id_generator, cfg.medical_codes
        ).generate_all(cfg.scale.codes_per_system)
        log.table_generated("medical_codes", len(dataset.medical_codes))

        dataset.injury_types = InjuryTypeGenerator(
            rng, id_generator
        ).generate_all(cfg.scale.injury_type_count)
        log.table_generated("injury_types", len(dataset.injury_types))

        active_codes = dataset.active_medical_codes()
        active_injuries = dataset.active_injury_types()
        check_active_cardinality(cfg, len(active_codes), len(active_injuries))

        dataset.claims = ClaimsGenerator(
            rng, id_generator, self.as_of_date, cfg.claims
        ).generate_all(cfg.scale.claim_count, dataset.providers)
        log.table_generated("claims", len(dataset.claims))

        associations = AssociationGenerator(rng, cfg.associations)
        dataset.claim_medical_codes = associations.generate_all_codes(dataset.claims, active_codes)
        log.table_generated("claim_medical_codes", len(dataset.claim_medical_codes))

        dataset.claim_injuries = associations.generate_all_injuries(dataset.claims, active_injuries)
        log.table_generated("claim_injuries", len(dataset.claim_injuries))

        check_dataset_integrity(dataset)

        log.generation_completed(time.perf_counter() - started, **dataset.table_counts())
        return dataset

    def run(self, writer: Optional[DatasetWriterProtocol] = None) -> SeedResult:
        """
        Generate, load and verify.

        Args:
            writer: Destination for the dataset; None for a dry run

        Returns:
            SeedResult with the dataset and its verification tallies
        """
        started = time.perf_counter()
        dataset = self.generate()

        loaded = False
        if writer is not None:
            writer.load(dataset)
            loaded = True

        report = verify_dataset(dataset)
        logger.info(
            "seed_run_verified",
            loaded=loaded,
            decisions_when_not_closed=report.decisions_when_not_closed,
            min_received_date=str(report.min_received_date),
            max_received_date=str(report.max_received_date),
            avg_amount=str(report.avg_amount),
        )

        return SeedResult(
            dataset=dataset,
            report=report,
            loaded=loaded,
            elapsed_seconds=time.perf_counter() - started,
            warnings=list(self._warnings),
        )

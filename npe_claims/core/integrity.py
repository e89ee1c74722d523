"""
Dataset integrity checks for NPE Claims Analytics.

Re-implements the storage engine's constraints (check constraints, unique
keys, foreign keys) as explicit validation over a SeedDataset, plus the
generation-time contracts that the schema does not store. The gate has a
single outcome: either every check passes or DatasetIntegrityError is raised
with the complete list of violations and nothing is loaded.
"""

from collections import Counter
from typing import Any, Callable, Iterable

import structlog
from pydantic import BaseModel, ValidationError

from npe_claims.core.dataset import SeedDataset, TABLE_INSERT_ORDER
from npe_claims.domain.enums import ClaimStatus, CodeRole, Decision

logger = structlog.get_logger()


class DatasetIntegrityError(Exception):
    """Raised when a dataset violates a stored constraint or generation contract."""

    def __init__(self, violations: list[str]):
        self.violations = violations
        preview = "\n".join(f"  - {v}" for v in violations[:20])
        more = f"\n  ... and {len(violations) - 20} more" if len(violations) > 20 else ""
        super().__init__(
            f"Dataset failed {len(violations)} integrity check(s):\n{preview}{more}"
        )


def _duplicates(keys: Iterable[Any]) -> list[Any]:
    return sorted(
        (key for key, n in Counter(keys).items() if n > 1),
        key=str,
    )


def _check_rows(table: str, rows: list[BaseModel]) -> list[str]:
    """Re-run each row's field and model validators."""
    violations = []
    for row in rows:
        try:
            type(row).model_validate(row.model_dump())
        except ValidationError as e:
            for err in e.errors():
                violations.append(f"{table}: {err['msg']} ({err['loc'] or 'row'})")
    return violations


def _check_unique(
    table: str,
    rows: list[Any],
    key: Callable[[Any], Any],
    label: str,
) -> list[str]:
    return [
        f"{table}: duplicate {label} {dup}"
        for dup in _duplicates(key(row) for row in rows)
    ]


def find_stored_constraint_violations(dataset: SeedDataset) -> list[str]:
    """
    Check the constraints the database schema enforces.

    Covers check constraints (via the row models), primary and unique keys,
    and foreign keys.

    Args:
        dataset: Dataset to check

    Returns:
        Violation messages (empty when the dataset would load cleanly)
    """
    violations: list[str] = []

    for table in TABLE_INSERT_ORDER:
        violations.extend(_check_rows(table, dataset.table(table)))

    # Primary and unique keys
    violations += _check_unique("providers", dataset.providers, lambda p: p.provider_id, "provider_id")
    violations += _check_unique("providers", dataset.providers, lambda p: p.natural_key, "(provider_name, region)")
    violations += _check_unique("medical_codes", dataset.medical_codes, lambda c: c.medical_code_id, "medical_code_id")
    violations += _check_unique("medical_codes", dataset.medical_codes, lambda c: c.natural_key, "(code_system, code)")
    violations += _check_unique("injury_types", dataset.injury_types, lambda i: i.injury_type_id, "injury_type_id")
    violations += _check_unique("injury_types", dataset.injury_types, lambda i: i.natural_key, "(injury_group, injury_name)")
    violations += _check_unique("claims", dataset.claims, lambda c: c.claim_id, "claim_id")
    violations += _check_unique("claims", dataset.claims, lambda c: c.claim_reference, "claim_reference")
    violations += _check_unique(
        "claim_medical_codes",
        dataset.claim_medical_codes,
        lambda r: (r.claim_id, r.medical_code_id),
        "(claim_id, medical_code_id)",
    )
    violations += _check_unique(
        "claim_injuries",
        dataset.claim_injuries,
        lambda r: (r.claim_id, r.injury_type_id),
        "(claim_id, injury_type_id)",
    )

    # Foreign keys
    provider_ids = {p.provider_id for p in dataset.providers}
    code_ids = {c.medical_code_id for c in dataset.medical_codes}
    injury_ids = {i.injury_type_id for i in dataset.injury_types}
    claim_ids = {c.claim_id for c in dataset.claims}

    for claim in dataset.claims:
        if claim.provider_id not in provider_ids:
            violations.append(
                f"claims: {claim.claim_reference} references missing provider {claim.provider_id}"
            )
    for row in dataset.claim_medical_codes:
        if row.claim_id not in claim_ids:
            violations.append(f"claim_medical_codes: references missing claim {row.claim_id}")
        if row.medical_code_id not in code_ids:
            violations.append(
                f"claim_medical_codes: references missing medical code {row.medical_code_id}"
            )
    for row in dataset.claim_injuries:
        if row.claim_id not in claim_ids:
            violations.append(f"claim_injuries: references missing claim {row.claim_id}")
        if row.injury_type_id not in injury_ids:
            violations.append(
                f"claim_injuries: references missing injury type {row.injury_type_id}"
            )

    return violations


def find_generation_contract_violations(dataset: SeedDataset) -> list[str]:
    """
    Check the contracts the generator keeps but the schema does not store.

    - decision_date is present exactly when status is Closed
    - payout is zero unless the claim is Closed and not Rejected
    - every claim has at least one code and one injury, with exactly one primary each
    - bridge rows only reference active dimension rows

    Args:
        dataset: Dataset to check

    Returns:
        Violation messages
    """
    violations: list[str] = []

    for claim in dataset.claims:
        is_closed = claim.status == ClaimStatus.CLOSED
        if is_closed != (claim.decision_date is not None):
            violations.append(
                f"claims: {claim.claim_reference} has status {claim.status.value} "
                f"and decision_date {claim.decision_date}"
            )
        pays_out = is_closed and claim.decision != Decision.REJECTED
        if not pays_out and claim.claim_amount_nok != 0:
            violations.append(
                f"claims: {claim.claim_reference} pays {claim.claim_amount_nok} "
                f"with status {claim.status.value} and decision "
                f"{claim.decision.value if claim.decision else None}"
            )

    code_primaries = Counter(
        row.claim_id for row in dataset.claim_medical_codes if row.code_role == CodeRole.PRIMARY
    )
    injury_primaries = Counter(row.claim_id for row in dataset.claim_injuries if row.is_primary)
    claims_with_codes = {row.claim_id for row in dataset.claim_medical_codes}
    claims_with_injuries = {row.claim_id for row in dataset.claim_injuries}

    for claim in dataset.claims:
        if claim.claim_id not in claims_with_codes:
            violations.append(f"claim_medical_codes: claim {claim.claim_id} has no medical code")
        elif code_primaries[claim.claim_id] != 1:
            violations.append(
                f"claim_medical_codes: claim {claim.claim_id} has "
                f"{code_primaries[claim.claim_id]} primary codes"
            )
        if claim.claim_id not in claims_with_injuries:
            violations.append(f"claim_injuries: claim {claim.claim_id} has no injury type")
        elif injury_primaries[claim.claim_id] != 1:
            violations.append(
                f"claim_injuries: claim {claim.claim_id} has "
                f"{injury_primaries[claim.claim_id]} primary injuries"
            )

    active_codes = {c.medical_code_id for c in dataset.medical_codes if c.active}
    active_injuries = {i.injury_type_id for i in dataset.injury_types if i.active}
    for row in dataset.claim_medical_codes:
        if row.medical_code_id not in active_codes:
            violations.append(
                f"claim_medical_codes: claim {row.claim_id} uses inactive code {row.medical_code_id}"
            )
    for row in dataset.claim_injuries:
        if row.injury_type_id not in active_injuries:
            violations.append(
                f"claim_injuries: claim {row.claim_id} uses inactive injury {row.injury_type_id}"
            )

    return violations


def check_dataset_integrity(
    dataset: SeedDataset,
    include_generation_contracts: bool = True,
) -> None:
    """
    Run the integrity gate.

    Args:
        dataset: Dataset to check
        include_generation_contracts: Also enforce the generation-only contracts

    Raises:
        DatasetIntegrityError: If any check fails
    """
    violations = find_stored_constraint_violations(dataset)
    if include_generation_contracts:
        violations += find_generation_contract_violations(dataset)

    if violations:
        logger.error("dataset_integrity_failed", violation_count=len(violations))
        raise DatasetIntegrityError(violations)

    logger.debug("dataset_integrity_passed", **dataset.table_counts())

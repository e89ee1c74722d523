"""
Exploratory analytics over a claims dataset.

Each function answers one reporting question and returns plain dictionaries
(one per result row) so the CLI can print them as a table or as JSON.
Percentages are on a 0-100 scale.
"""

from collections import Counter, defaultdict
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Optional

from npe_claims.core.dataset import SeedDataset
from npe_claims.domain.claims import Claim
from npe_claims.domain.enums import ClaimStatus, CodeRole, Decision

GROUPABLE_FIELDS = ("region", "care_level", "patient_sex", "status", "decision")


def _round(value: Decimal, places: str) -> Decimal:
    return value.quantize(Decimal(places), rounding=ROUND_HALF_UP)


def _pct(part: int, whole: int, places: str = "0.01") -> Optional[Decimal]:
    if whole == 0:
        return None
    return _round(Decimal(100) * part / whole, places)


def _text(value: Any) -> Any:
    return getattr(value, "value", value)


def _closed(claims: list[Claim]) -> list[Claim]:
    return [c for c in claims if c.status == ClaimStatus.CLOSED]


def _share_rows(values: list[Any], label: str) -> list[dict[str, Any]]:
    total = len(values)
    counts = Counter(_text(v) for v in values)
    return [
        {label: key, "count": count, "pct": _pct(count, total)}
        for key, count in sorted(counts.items(), key=lambda kv: (-kv[1], str(kv[0])))
    ]


def status_distribution(claims: list[Claim]) -> list[dict[str, Any]]:
    """Claims per status with percent of all claims, most common first."""
    return _share_rows([c.status for c in claims], "status")


def decision_distribution(claims: list[Claim]) -> list[dict[str, Any]]:
    """Closed claims per decision with percent of Closed claims."""
    return _share_rows([c.decision for c in _closed(claims)], "decision")


def amount_summary_by_decision(claims: list[Claim]) -> list[dict[str, Any]]:
    """Count, average, sum and maximum payout per decision on Closed claims."""
    groups: dict[Decision, list[Decimal]] = defaultdict(list)
    for claim in _closed(claims):
        if claim.decision is not None:
            groups[claim.decision].append(claim.claim_amount_nok)

    rows = []
    for decision, amounts in groups.items():
        total = sum(amounts, Decimal(0))
        rows.append({
            "decision": decision.value,
            "claim_count": len(amounts),
            "avg_amount_nok": _round(total / len(amounts), "0.01"),
            "sum_amount_nok": _round(total, "0.01"),
            "max_amount_nok": _round(max(amounts), "0.01"),
        })
    return sorted(rows, key=lambda r: (-r["claim_count"], r["decision"]))


def claims_by(claims: list[Claim], field: str) -> list[dict[str, Any]]:
    """
    Claim counts grouped by one claim attribute.

    Args:
        claims: Claims to count
        field: One of region, care_level, patient_sex, status, decision

    Returns:
        Rows of {field, claims_count}, most common first
    """
    if field not in GROUPABLE_FIELDS:
        raise ValueError(f"Cannot group claims by {field!r}")
    counts = Counter(_text(getattr(c, field)) for c in claims)
    return [
        {field: key, "claims_count": count}
        for key, count in sorted(counts.items(), key=lambda kv: (-kv[1], str(kv[0])))
    ]


def top_providers(dataset: SeedDataset, n: int = 10) -> list[dict[str, Any]]:
    """Providers with the most claims; ties by provider name."""
    providers = dataset.providers_by_id()
    counts = Counter(c.provider_id for c in dataset.claims)
    rows = [
        {
            "provider_name": providers[pid].provider_name,
            "provider_region": providers[pid].region.value,
            "claims_count": count,
        }
        for pid, count in counts.items()
    ]
    rows.sort(key=lambda r: (-r["claims_count"], r["provider_name"]))
    return rows[:n]


def processing_days_by(claims: list[Claim], field: Optional[str] = None) -> list[dict[str, Any]]:
    """
    Processing-day statistics of Closed claims, overall or per group.

    Args:
        claims: Claims to summarise
        field: Claim attribute to group by; None for a single overall row

    Returns:
        Rows with closed_count, min_days, avg_days (1 dp), max_days; slowest
        groups first
    """
    if field is not None and field not in GROUPABLE_FIELDS:
        raise ValueError(f"Cannot group claims by {field!r}")

    groups: dict[Any, list[int]] = defaultdict(list)
    for claim in _closed(claims):
        days = claim.processing_days
        if days is None:
            continue
        key = _text(getattr(claim, field)) if field else "all"
        groups[key].append(days)

    rows = []
    for key, days in groups.items():
        rows.append({
            field or "scope": key,
            "closed_count": len(days),
            "min_days": min(days),
            "avg_days": _round(Decimal(sum(days)) / len(days), "0.1"),
            "max_days": max(days),
        })
    return sorted(rows, key=lambda r: (-r["avg_days"], -r["closed_count"]))


def backlog_by_region(claims: list[Claim]) -> list[dict[str, Any]]:
    """Open claims (InReview and Received) per claim region, largest backlog first."""
    in_review: Counter = Counter()
    received: Counter = Counter()
    regions = set()
    for claim in claims:
        regions.add(claim.region.value)
        if claim.status == ClaimStatus.IN_REVIEW:
            in_review[claim.region.value] += 1
        elif claim.status == ClaimStatus.RECEIVED:
            received[claim.region.value] += 1

    rows = [
        {
            "region": region,
            "inreview_count": in_review[region],
            "received_count": received[region],
            "backlog_total": in_review[region] + received[region],
        }
        for region in regions
    ]
    return sorted(rows, key=lambda r: (-r["backlog_total"], r["region"]))


def top_provider_per_region(dataset: SeedDataset) -> list[dict[str, Any]]:
    """
    Provider with the most Closed claims within each claim region.

    Ties go to the lowest provider_id.
    """
    providers = dataset.providers_by_id()
    counts: Counter = Counter(
        (c.region.value, c.provider_id) for c in _closed(dataset.claims)
    )

    best: dict[str, tuple[int, int]] = {}
    for (region, provider_id), count in counts.items():
        current = best.get(region)
        if current is None or (count, -provider_id) > (current[1], -current[0]):
            best[region] = (provider_id, count)

    rows = [
        {
            "region": region,
            "provider_name": providers[provider_id].provider_name,
            "provider_id": provider_id,
            "closed_claims": count,
        }
        for region, (provider_id, count) in best.items()
    ]
    return sorted(rows, key=lambda r: (-r["closed_claims"], r["region"]))


def most_common_code_per_region(dataset: SeedDataset) -> list[dict[str, Any]]:
    """
    Most used medical code within each claim region.

    Ties go to the lowest medical_code_id.
    """
    claim_regions = {c.claim_id: c.region.value for c in dataset.claims}
    codes = dataset.medical_codes_by_id()
    counts: Counter = Counter(
        (claim_regions[row.claim_id], row.medical_code_id)
        for row in dataset.claim_medical_codes
        if row.claim_id in claim_regions
    )

    best: dict[str, tuple[int, int]] = {}
    for (region, code_id), uses in counts.items():
        current = best.get(region)
        if current is None or (uses, -code_id) > (current[1], -current[0]):
            best[region] = (code_id, uses)

    rows = []
    for region, (code_id, uses) in best.items():
        code = codes[code_id]
        rows.append({
            "region": region,
            "medical_code_id": code_id,
            "code_system": code.code_system.value,
            "code": code.code,
            "code_title": code.code_title,
            "code_uses": uses,
        })
    return sorted(rows, key=lambda r: (-r["code_uses"], r["region"]))


def rejection_rate_by_care_level(claims: list[Claim]) -> list[dict[str, Any]]:
    """Rejected share of Closed claims per care level (percent, 1 dp)."""
    closed: Counter = Counter()
    rejected: Counter = Counter()
    for claim in _closed(claims):
        closed[claim.care_level.value] += 1
        if claim.decision == Decision.REJECTED:
            rejected[claim.care_level.value] += 1

    rows = [
        {
            "care_level": level,
            "closed_count": closed[level],
            "rejected_count": rejected[level],
            "rejection_rate_pct": _pct(rejected[level], closed[level], "0.1"),
        }
        for level in closed
    ]
    return sorted(
        rows,
        key=lambda r: (
            -(r["rejection_rate_pct"] if r["rejection_rate_pct"] is not None else Decimal(-1)),
            -r["closed_count"],
        ),
    )


def top_payouts(dataset: SeedDataset, n: int = 20) -> list[dict[str, Any]]:
    """Claims with the highest amounts, with their provider's name."""
    providers = dataset.providers_by_id()
    ranked = sorted(dataset.claims, key=lambda c: (-c.claim_amount_nok, c.claim_id))[:n]
    return [
        {
            "claim_id": c.claim_id,
            "claim_reference": c.claim_reference,
            "received_date": c.received_date,
            "status": c.status.value,
            "decision": _text(c.decision),
            "claim_amount_nok": c.claim_amount_nok,
            "region": c.region.value,
            "provider_name": providers[c.provider_id].provider_name,
        }
        for c in ranked
    ]


def top_medical_codes(dataset: SeedDataset, n: int = 10) -> list[dict[str, Any]]:
    """Most used medical codes; ties by code system, then code."""
    codes = dataset.medical_codes_by_id()
    counts = Counter(row.medical_code_id for row in dataset.claim_medical_codes)
    primaries = Counter(
        row.medical_code_id
        for row in dataset.claim_medical_codes
        if row.code_role == CodeRole.PRIMARY
    )
    rows = [
        {
            "medical_code_id": code_id,
            "code_system": codes[code_id].code_system.value,
            "code": codes[code_id].code,
            "code_title": codes[code_id].code_title,
            "usage_count": uses,
            "primary_count": primaries[code_id],
        }
        for code_id, uses in counts.items()
    ]
    rows.sort(key=lambda r: (-r["usage_count"], r["code_system"], r["code"]))
    return rows[:n]


def top_injury_types(dataset: SeedDataset, n: int = 10) -> list[dict[str, Any]]:
    """Most used injury types; ties by group, then name."""
    injuries = dataset.injury_types_by_id()
    counts = Counter(row.injury_type_id for row in dataset.claim_injuries)
    rows = [
        {
            "injury_group": injuries[injury_id].injury_group.value,
            "injury_name": injuries[injury_id].injury_name,
            "usage_count": uses,
        }
        for injury_id, uses in counts.items()
    ]
    rows.sort(key=lambda r: (-r["usage_count"], r["injury_group"], r["injury_name"]))
    return rows[:n]


def data_quality_checks(claims: list[Claim]) -> dict[str, int]:
    """
    Counts of rows breaking the expected claim rules; all should be 0.

    Returns:
        closed_with_decision_null, decision_before_received,
        rejected_with_positive_amount
    """
    return {
        "closed_with_decision_null": sum(
            1 for c in claims if c.status == ClaimStatus.CLOSED and c.decision is None
        ),
        "decision_before_received": sum(
            1
            for c in claims
            if c.decision_date is not None and c.decision_date < c.received_date
        ),
        "rejected_with_positive_amount": sum(
            1 for c in claims if c.decision == Decision.REJECTED and c.claim_amount_nok > 0
        ),
    }

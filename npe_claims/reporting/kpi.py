"""
KPI views over claims.

Three read-only aggregations with fixed grains: calendar month, claim region
and provider. They compute the same figures as the SQL views in
``npe_claims/db/views.sql`` and can also normalise rows read from those views.

Metric rules shared by all three:

- approval rate = (Approved + PartiallyApproved) / Closed, None when no claim
  is Closed
- payout = sum of amounts on Closed claims, 0.00 when there are none
- average processing days = mean of (decision_date - received_date) over
  Closed claims with both dates, kept fractional, None when there are none
"""

from dataclasses import asdict, dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Iterable, Optional

from npe_claims.domain.claims import Claim
from npe_claims.domain.dimensions import Provider
from npe_claims.domain.enums import APPROVING_DECISIONS, Decision, ProviderType, Region
from npe_claims.utils.time_conversion import days_between, first_of_month

CENTS = Decimal("0.01")

REGION_ORDER = {region: position for position, region in enumerate(Region)}


def _rate(part: int, whole: int) -> Optional[float]:
    if whole == 0:
        return None
    return part / whole


@dataclass
class _ClosedAccumulator:
    """Running totals over Closed claims."""

    closed: int = 0
    approved: int = 0
    rejected: int = 0
    payout: Decimal = field(default_factory=lambda: Decimal("0.00"))
    days_total: int = 0
    days_count: int = 0

    def add(self, claim: Claim) -> None:
        self.closed += 1
        if claim.decision in APPROVING_DECISIONS:
            self.approved += 1
        elif claim.decision == Decision.REJECTED:
            self.rejected += 1
        self.payout += claim.claim_amount_nok
        if claim.decision_date is not None:
            self.days_total += days_between(claim.received_date, claim.decision_date)
            self.days_count += 1

    @property
    def approval_rate(self) -> Optional[float]:
        return _rate(self.approved, self.closed)

    @property
    def rejected_rate(self) -> Optional[float]:
        return _rate(self.rejected, self.closed)

    @property
    def total_payout(self) -> Decimal:
        return self.payout.quantize(CENTS)

    @property
    def avg_days(self) -> Optional[float]:
        if self.days_count == 0:
            return None
        return self.days_total / self.days_count


@dataclass
class MonthlyKpiRow:
    month_start_date: date
    claims_received: int
    closed_claims: int
    approval_rate_closed: Optional[float]
    rejected_rate_closed: Optional[float]
    total_payout_nok: Decimal
    avg_processing_days_closed: Optional[float]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class RegionKpiRow:
    region: Region
    total_claims: int
    closed_claims: int
    approval_rate_closed: Optional[float]
    total_payout_nok: Decimal
    avg_processing_days_closed: Optional[float]

    def to_dict(self) -> dict[str, Any]:
        row = asdict(self)
        row["region"] = self.region.value
        return row


@dataclass
class ProviderSummaryRow:
    provider_id: int
    provider_name: str
    provider_type: ProviderType
    region: Region
    total_claims: int
    closed_claims: int
    approval_rate_closed: Optional[float]
    total_payout_nok: Decimal
    avg_processing_days_closed: Optional[float]

    def to_dict(self) -> dict[str, Any]:
        row = asdict(self)
        row["provider_type"] = self.provider_type.value
        row["region"] = self.region.value
        return row


def monthly_kpi(claims: Iterable[Claim]) -> list[MonthlyKpiRow]:
    """
    Monthly KPI rows.

    A month appears when any claim was received in it or any claim has a
    decision date in it. Received counts group by received month; the Closed
    metrics group Closed claims by decision month, so a month with only
    decisions still gets a row with claims_received = 0.

    Args:
        claims: Claims to aggregate

    Returns:
        One row per anchor month, ascending
    """
    received: dict[date, int] = {}
    closed: dict[date, _ClosedAccumulator] = {}
    months: set[date] = set()

    for claim in claims:
        received_month = first_of_month(claim.received_date)
        months.add(received_month)
        received[received_month] = received.get(received_month, 0) + 1

        if claim.decision_date is None:
            continue
        decision_month = first_of_month(claim.decision_date)
        months.add(decision_month)
        if claim.is_closed:
            closed.setdefault(decision_month, _ClosedAccumulator()).add(claim)

    rows = []
    for month in sorted(months):
        acc = closed.get(month, _ClosedAccumulator())
        rows.append(
            MonthlyKpiRow(
                month_start_date=month,
                claims_received=received.get(month, 0),
                closed_claims=acc.closed,
                approval_rate_closed=acc.approval_rate,
                rejected_rate_closed=acc.rejected_rate,
                total_payout_nok=acc.total_payout,
                avg_processing_days_closed=acc.avg_days,
            )
        )
    return rows


def region_kpi(claims: Iterable[Claim]) -> list[RegionKpiRow]:
    """
    Region KPI rows, one per claim region that has at least one claim.

    Args:
        claims: Claims to aggregate

    Returns:
        Rows in canonical region order
    """
    totals: dict[Region, int] = {}
    closed: dict[Region, _ClosedAccumulator] = {}

    for claim in claims:
        totals[claim.region] = totals.get(claim.region, 0) + 1
        acc = closed.setdefault(claim.region, _ClosedAccumulator())
        if claim.is_closed:
            acc.add(claim)

    return [
        RegionKpiRow(
            region=region,
            total_claims=totals[region],
            closed_claims=closed[region].closed,
            approval_rate_closed=closed[region].approval_rate,
            total_payout_nok=closed[region].total_payout,
            avg_processing_days_closed=closed[region].avg_days,
        )
        for region in sorted(totals, key=REGION_ORDER.__getitem__)
    ]


def provider_summary(
    providers: Iterable[Provider],
    claims: Iterable[Claim],
) -> list[ProviderSummaryRow]:
    """
    Provider summary rows; every provider appears, with zero counts when it
    has no claims.

    Args:
        providers: All providers
        claims: Claims to aggregate

    Returns:
        Rows ordered by provider_id
    """
    totals: dict[int, int] = {}
    closed: dict[int, _ClosedAccumulator] = {}

    for claim in claims:
        totals[claim.provider_id] = totals.get(claim.provider_id, 0) + 1
        if claim.is_closed:
            closed.setdefault(claim.provider_id, _ClosedAccumulator()).add(claim)

    rows = []
    for provider in sorted(providers, key=lambda p: p.provider_id):
        acc = closed.get(provider.provider_id, _ClosedAccumulator())
        rows.append(
            ProviderSummaryRow(
                provider_id=provider.provider_id,
                provider_name=provider.provider_name,
                provider_type=provider.provider_type,
                region=provider.region,
                total_claims=totals.get(provider.provider_id, 0),
                closed_claims=acc.closed,
                approval_rate_closed=acc.approval_rate,
                total_payout_nok=acc.total_payout,
                avg_processing_days_closed=acc.avg_days,
            )
        )
    return rows


# Rows read back from the SQL views carry numeric/Decimal values and text
# enums; the helpers below convert them to the row types above.

def _opt_float(value: Any) -> Optional[float]:
    return None if value is None else float(value)


def _payout(value: Any) -> Decimal:
    return Decimal(value if value is not None else 0).quantize(CENTS)


def monthly_rows_from_view(rows: Iterable[dict[str, Any]]) -> list[MonthlyKpiRow]:
    """Convert vw_monthly_kpi rows."""
    return sorted(
        (
            MonthlyKpiRow(
                month_start_date=row["month_start_date"],
                claims_received=int(row["claims_received"]),
                closed_claims=int(row["closed_claims"]),
                approval_rate_closed=_opt_float(row["approval_rate_closed"]),
                rejected_rate_closed=_opt_float(row["rejected_rate_closed"]),
                total_payout_nok=_payout(row["total_payout_nok"]),
                avg_processing_days_closed=_opt_float(row["avg_processing_days_closed"]),
            )
            for row in rows
        ),
        key=lambda r: r.month_start_date,
    )


def region_rows_from_view(rows: Iterable[dict[str, Any]]) -> list[RegionKpiRow]:
    """Convert vw_region_kpi rows, re-sorted into canonical region order."""
    converted = [
        RegionKpiRow(
            region=Region(row["region"]),
            total_claims=int(row["total_claims"]),
            closed_claims=int(row["closed_claims"]),
            approval_rate_closed=_opt_float(row["approval_rate_closed"]),
            total_payout_nok=_payout(row["total_payout_nok"]),
            avg_processing_days_closed=_opt_float(row["avg_processing_days_closed"]),
        )
        for row in rows
    ]
    return sorted(converted, key=lambda r: REGION_ORDER[r.region])


def provider_rows_from_view(rows: Iterable[dict[str, Any]]) -> list[ProviderSummaryRow]:
    """Convert vw_provider_summary rows."""
    return sorted(
        (
            ProviderSummaryRow(
                provider_id=int(row["provider_id"]),
                provider_name=row["provider_name"],
                provider_type=ProviderType(row["provider_type"]),
                region=Region(row["region"]),
                total_claims=int(row["total_claims"]),
                closed_claims=int(row["closed_claims"]),
                approval_rate_closed=_opt_float(row["approval_rate_closed"]),
                total_payout_nok=_payout(row["total_payout_nok"]),
                avg_processing_days_closed=_opt_float(row["avg_processing_days_closed"]),
            )
            for row in rows
        ),
        key=lambda r: r.provider_id,
    )

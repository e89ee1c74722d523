"""
Post-generation verification tallies.

Computes the sanity figures surfaced after every regeneration: row counts,
the status mix, the decision/status coupling check, the received-date range
and payout statistics. The figures are reported, never stored.
"""

from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Optional

from npe_claims.core.dataset import SeedDataset
from npe_claims.domain.enums import ClaimStatus


@dataclass
class StatusShare:
    """Count and percentage of claims in one status."""

    status: str
    count: int
    pct: Optional[Decimal]


@dataclass
class VerificationReport:
    """Tallies produced by verify_dataset."""

    table_counts: dict[str, int] = field(default_factory=dict)
    status_mix: list[StatusShare] = field(default_factory=list)
    decisions_when_not_closed: int = 0
    min_received_date: Optional[date] = None
    max_received_date: Optional[date] = None
    min_amount: Optional[Decimal] = None
    max_amount: Optional[Decimal] = None
    avg_amount: Optional[Decimal] = None

    @property
    def passed(self) -> bool:
        """True when the decision/status coupling holds for every claim."""
        return self.decisions_when_not_closed == 0

    def to_dict(self) -> dict[str, Any]:
        """Plain dictionary form, used for logging and JSON output."""
        return {
            "table_counts": dict(self.table_counts),
            "status_mix": [
                {"status": s.status, "count": s.count, "pct": s.pct}
                for s in self.status_mix
            ],
            "decisions_when_not_closed": self.decisions_when_not_closed,
            "min_received_date": self.min_received_date,
            "max_received_date": self.max_received_date,
            "min_amount": self.min_amount,
            "max_amount": self.max_amount,
            "avg_amount": self.avg_amount,
        }


def _pct(part: int, whole: int, places: str = "0.1") -> Optional[Decimal]:
    if whole == 0:
        return None
    return (Decimal(100) * part / whole).quantize(Decimal(places), rounding=ROUND_HALF_UP)


def verify_dataset(dataset: SeedDataset) -> VerificationReport:
    """
    Compute verification tallies for a dataset.

    Args:
        dataset: Generated or loaded dataset

    Returns:
        VerificationReport
    """
    claims = dataset.claims
    total = len(claims)

    status_counts = Counter(c.status.value for c in claims)
    status_mix = [
        StatusShare(status=status, count=count, pct=_pct(count, total))
        for status, count in sorted(status_counts.items(), key=lambda kv: (-kv[1], kv[0]))
    ]

    decisions_when_not_closed = sum(
        1 for c in claims if c.status != ClaimStatus.CLOSED and c.decision is not None
    )

    report = VerificationReport(
        table_counts=dataset.table_counts(),
        status_mix=status_mix,
        decisions_when_not_closed=decisions_when_not_closed,
    )

    if claims:
        received = [c.received_date for c in claims]
        amounts = [c.claim_amount_nok for c in claims]
        report.min_received_date = min(received)
        report.max_received_date = max(received)
        report.min_amount = min(amounts)
        report.max_amount = max(amounts)
        report.avg_amount = (sum(amounts, Decimal(0)) / total).quantize(
            Decimal("0.01"), rounding=ROUND_HALF_UP
        )

    return report

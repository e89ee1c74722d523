"""
Statistical sampling helpers for NPE Claims Analytics.
"""

from npe_claims.statistics.distributions import (
    sample_from_distribution,
    sample_payout_amount,
    round_nok,
)

__all__ = [
    "sample_from_distribution",
    "sample_payout_amount",
    "round_nok",
]

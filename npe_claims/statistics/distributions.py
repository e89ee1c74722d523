"""
Common distribution functions for seed generation.

Provides standalone distribution sampling functions.
"""

from decimal import Decimal, ROUND_HALF_UP

from numpy.random import Generator as RNG

from npe_claims.config.models import PayoutConfig

CENT = Decimal("0.01")


def sample_from_distribution(
    rng: RNG,
    distribution: dict[str, float],
) -> str:
    """
    Sample from a categorical distribution.

    Uses a single uniform draw against the normalised weights, so the
    returned keys follow the configured marginal probabilities exactly.

    Args:
        rng: NumPy random number generator
        distribution: Dict mapping options to probabilities/weights

    Returns:
        Sampled option key
    """
    options = list(distribution.keys())
    weights = list(distribution.values())
    total = sum(weights)
    probs = [w / total for w in weights]
    idx = rng.choice(len(options), p=probs)
    return options[int(idx)]


def round_nok(amount: float) -> Decimal:
    """Round a NOK amount half-up to whole øre (2 decimal places)."""
    return Decimal(repr(amount)).quantize(CENT, rounding=ROUND_HALF_UP)


def sample_payout_amount(rng: RNG, config: PayoutConfig) -> Decimal:
    """
    Sample a payout for an approved or partially approved claim.

    Most payouts come from ``U1 * U2 * scale``, a right-skewed body with
    heavy concentration near zero; the rest from a uniform high-value tail.

    Args:
        rng: NumPy random number generator
        config: Payout parameters

    Returns:
        Non-negative amount rounded to 2 decimal places
    """
    if rng.random() < config.low_value_probability:
        amount = rng.random() * rng.random() * config.low_value_scale
    else:
        span = config.high_value_ceiling - config.high_value_floor
        amount = config.high_value_floor + rng.random() * span

    return round_nok(float(amount))

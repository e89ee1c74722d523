"""
Utility modules for NPE Claims Analytics.

Provides:
- Date helpers used by generation and reporting
- Structured logging configuration
"""

from npe_claims.utils.time_conversion import (
    days_between,
    add_days,
    first_of_month,
    date_stamp,
)
from npe_claims.utils.logging import configure_logging, GenerationLogger

__all__ = [
    # Time conversion
    "days_between",
    "add_days",
    "first_of_month",
    "date_stamp",
    # Logging
    "configure_logging",
    "GenerationLogger",
]

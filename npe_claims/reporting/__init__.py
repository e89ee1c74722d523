"""
Reporting layer for NPE Claims Analytics.

Provides:
- Monthly, region and provider KPI views
- Exploratory analytics queries
"""

from npe_claims.reporting.kpi import (
    MonthlyKpiRow,
    ProviderSummaryRow,
    RegionKpiRow,
    monthly_kpi,
    provider_summary,
    region_kpi,
)

__all__ = [
    "MonthlyKpiRow",
    "ProviderSummaryRow",
    "RegionKpiRow",
    "monthly_kpi",
    "provider_summary",
    "region_kpi",
]

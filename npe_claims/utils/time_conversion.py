"""
Date helpers for NPE Claims Analytics.

Provides the date arithmetic shared by the generators and the KPI views.
"""

from datetime import date, timedelta


def days_between(start: date, end: date) -> int:
    """
    Calculate the number of days between two dates.

    Args:
        start: Start date
        end: End date

    Returns:
        Number of days (positive if end > start)
    """
    return (end - start).days


def add_days(d: date, days: int) -> date:
    """
    Add days to a date.

    Args:
        d: Base date
        days: Number of days to add (can be negative)

    Returns:
        New date
    """
    return d + timedelta(days=days)


def first_of_month(d: date) -> date:
    """
    Get the first day of the month.

    Args:
        d: Any date in the month

    Returns:
        First day of that month
    """
    return date(d.year, d.month, 1)


def date_stamp(d: date) -> str:
    """Compact YYYYMMDD stamp used in claim references."""
    return d.strftime("%Y%m%d")

"""
NPE Claims Analytics
====================

Synthetic patient-injury claims generator and KPI reporting layer.

This package seeds a relational claims database with a reproducible,
constraint-consistent dataset and computes the monthly, regional and
per-provider KPI rollups consumed by the BI front end.
"""

__version__ = "0.1.0"
__author__ = "NPE Claims Analytics"

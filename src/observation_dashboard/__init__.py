"""
Classroom Observation Dashboard

Aggregation and live-view derivation for classroom observation scores:
record joining, averages, KPIs, rankings and freshness-driven reloads.
"""

__version__ = "0.1.0"

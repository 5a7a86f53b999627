"""
Complaint dashboard analytics.

- Aggregation core (filters, distributions, area risk, map markers): `cdash/services/analytics_service.py`.
- Snapshot loading from CSV/JSON exports: `cdash/services/snapshot_service.py`.
- HTTP surface: `cdash/main.py` and `cdash/routes/`.
"""

__version__ = "0.1.0"

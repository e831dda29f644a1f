"""
Metrics package.

Handles aggregation of stored assessment results for the administrator dashboard.
"""

from .models import DashboardSummary
from .service import DashboardService

__all__ = [
    "DashboardSummary",
    "DashboardService",
]

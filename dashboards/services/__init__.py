"""
Dashboard services module
"""

from .submissions import SubmissionDashboardService

__all__ = [
    'SubmissionDashboardService',
]

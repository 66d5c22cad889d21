"""Application layer package."""

from .dashboard_service import DashboardSummary, MissingInputError, run_dashboard_pipeline
from .report_service import run_reporting_pipeline
from .upload_session import UploadSession

__all__ = [
    "DashboardSummary",
    "MissingInputError",
    "run_dashboard_pipeline",
    "run_reporting_pipeline",
    "UploadSession",
]

"""Circus Daily video analytics package."""

from .aggregation import group_by_title, monthly_rollup, summary_stats
from .application import DashboardSummary, MissingInputError, UploadSession, run_dashboard_pipeline, run_reporting_pipeline
from .config import VARIANTS, PipelineConfig, TruncationMode, get_variant
from .ingestion import read_sheet_rows, write_output_excel

__all__ = [
    "group_by_title",
    "monthly_rollup",
    "summary_stats",
    "DashboardSummary",
    "MissingInputError",
    "UploadSession",
    "run_dashboard_pipeline",
    "run_reporting_pipeline",
    "VARIANTS",
    "PipelineConfig",
    "TruncationMode",
    "get_variant",
    "read_sheet_rows",
    "write_output_excel",
]

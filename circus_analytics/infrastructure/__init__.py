"""Infrastructure layer package."""

from .excel_repository import load_reference_rows, load_target_rows, save_output_workbook
from .report_exporter import save_summary_json

__all__ = ["load_target_rows", "load_reference_rows", "save_output_workbook", "save_summary_json"]

"""Infrastructure adapter for Excel-based upload sources and outputs."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List

import polars as pl

from circus_analytics.config import PipelineConfig
from circus_analytics.ingestion import read_sheet_rows, write_output_excel


def load_target_rows(path: Path, config: PipelineConfig) -> List[Dict[str, Any]]:
    return read_sheet_rows(path, sheet_name=config.target_sheet_name)


def load_reference_rows(path: Path, config: PipelineConfig) -> List[Dict[str, Any]]:
    return read_sheet_rows(path, sheet_name=config.reference_sheet_name)


def save_output_workbook(path: Path, sheets: dict[str, pl.DataFrame]) -> tuple[bool, str]:
    try:
        write_output_excel(path, sheets)
    except PermissionError as exc:
        return False, str(exc)
    return True, ""

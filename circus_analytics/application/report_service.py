"""Dashboard reporting entrypoint: load uploads, aggregate, export."""

from __future__ import annotations

from pathlib import Path
from time import perf_counter
from typing import Dict

import polars as pl

from circus_analytics.application.dashboard_service import DashboardSummary
from circus_analytics.application.reporting.rendering import benchmark_lines, leaderboard_lines
from circus_analytics.application.upload_session import UploadSession
from circus_analytics.config import PipelineConfig
from circus_analytics.infrastructure.excel_repository import (
    load_reference_rows,
    load_target_rows,
    save_output_workbook,
)
from circus_analytics.infrastructure.report_exporter import save_summary_json


def build_summary_frames(summary: DashboardSummary) -> Dict[str, pl.DataFrame]:
    return summary.to_frames()


def run_reporting_pipeline(
    target_path: Path,
    reference_path: Path | None,
    config: PipelineConfig,
    output_dir: Path,
) -> DashboardSummary | None:
    pipeline_start = perf_counter()
    stage_start = pipeline_start
    stage_timings: list[tuple[str, float]] = []

    def _mark(stage_name: str) -> None:
        nonlocal stage_start
        now = perf_counter()
        stage_timings.append((stage_name, now - stage_start))
        stage_start = now

    output_json_path = output_dir / "summary.json"
    output_excel_path = output_dir / "summary.xlsx"

    session = UploadSession(config=config)
    session.set_target(load_target_rows(target_path, config))
    if reference_path is not None:
        session.set_reference(load_reference_rows(reference_path, config))
    _mark("load_uploads")

    summary = session.run_if_ready()
    if summary is None:
        print(f"Waiting for inputs ({config.variant}): missing {', '.join(session.missing_inputs())}")
        return None
    _mark("run_dashboard_pipeline")

    save_summary_json(output_json_path, summary.to_dict())
    _mark("save_json")

    excel_saved, excel_error_message = save_output_workbook(output_excel_path, build_summary_frames(summary))
    _mark("save_excel")
    total_elapsed = perf_counter() - pipeline_start

    reference_count = summary.reference_stats.count if summary.reference_stats is not None else 0
    print(
        "Summary prepared: "
        f"variant={summary.variant}, "
        f"target_videos={summary.target_stats.count}, "
        f"reference_videos={reference_count}, "
        f"months={len(summary.monthly)}"
    )
    for line in summary.comments:
        print(line)
    for line in benchmark_lines(summary.benchmark_comparisons):
        print(line)
    for line in leaderboard_lines(summary.leaderboards.get("target", ())):
        print(line)
    stage_text = ", ".join([f"{name}={seconds:.3f}s" for name, seconds in stage_timings])
    print(f"Stage Timing: {stage_text}")
    print(f"Total Elapsed: {total_elapsed:.3f}s")
    print(f"Saved JSON: {output_json_path}")
    if excel_saved:
        print(f"Saved Excel: {output_excel_path}")
    else:
        print(f"Excel save skipped (file may be open/locked): {excel_error_message}")
    return summary

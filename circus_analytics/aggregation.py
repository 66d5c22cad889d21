"""Aggregation engine: title grouping, summary statistics and monthly rollup."""

from __future__ import annotations

import math
from typing import Any, Dict, Iterable, List, Sequence

import polars as pl

from circus_analytics.domain.coercion import month_label
from circus_analytics.domain.models import (
    MEAN_COLUMNS,
    METRIC_COLUMNS,
    ROW_COLUMNS,
    MonthlyBucket,
    NormalizedRow,
    SummaryStats,
)

ROW_SCHEMA: Dict[str, Any] = {
    "title": pl.Utf8,
    "catalogue": pl.Utf8,
    "date_day": pl.Utf8,
    "streams": pl.Float64,
    "comp25": pl.Float64,
    "comp50": pl.Float64,
    "comp75": pl.Float64,
    "comp100": pl.Float64,
    "completion_rate": pl.Float64,
    "view_time": pl.Float64,
    "language": pl.Utf8,
}
CHECKPOINT_COLUMNS: List[str] = ["comp25", "comp50", "comp75", "comp100"]


def _safe_ratio(num: float, den: float) -> float:
    if den <= 0:
        return 0.0
    return num / den


def _finite(value: float) -> float:
    return value if math.isfinite(value) else 0.0


def _finite_fsum(values: Iterable[float]) -> float:
    try:
        return _finite(math.fsum(values))
    except OverflowError:
        return 0.0


def _finite_expr(column_name: str) -> pl.Expr:
    column = pl.col(column_name)
    return pl.when(column.is_finite()).then(column).otherwise(0.0).alias(column_name)


def _mean_expr(column_name: str) -> pl.Expr:
    return pl.col(column_name).mean().fill_null(0.0).alias(column_name)


def rows_to_frame(rows: Sequence[NormalizedRow]) -> pl.DataFrame:
    data: Dict[str, list[Any]] = {column: [getattr(row, column) for row in rows] for column in ROW_COLUMNS}
    data["language"] = [row.language.value if row.language is not None else None for row in rows]
    return pl.DataFrame(data, schema=ROW_SCHEMA)


def frame_to_rows(frame: pl.DataFrame) -> List[NormalizedRow]:
    return [NormalizedRow.from_record(record) for record in frame.iter_rows(named=True)]


def group_by_title(rows: Sequence[NormalizedRow]) -> List[NormalizedRow]:
    """Collapse rows sharing a trimmed title: streams are summed, rates averaged.

    catalogue/date_day/language come from the first row of each group. This
    assumes they do not vary between duplicates; the first value is kept even
    when they do. An empty title is a group of its own like any other key.
    """
    if not rows:
        return []
    grouped = (
        rows_to_frame(rows)
        .group_by("title", maintain_order=True)
        .agg(
            [
                pl.col("catalogue").first(),
                pl.col("date_day").first(),
                pl.col("streams").sum(),
                *[pl.col(column).mean() for column in MEAN_COLUMNS],
                pl.col("language").first(),
            ]
        )
        .with_columns([_finite_expr(column) for column in METRIC_COLUMNS])
        .select(list(ROW_SCHEMA))
    )
    return frame_to_rows(grouped)


def summary_stats(rows: Sequence[NormalizedRow]) -> SummaryStats:
    """Count, total and unweighted means over ``rows``; zeros for an empty set."""
    if not rows:
        return SummaryStats.empty()

    count = len(rows)

    # fsum is exactly rounded, so the result does not depend on row order.
    # A sum past the float range collapses to 0 like any unusable value.
    def _mean(column: str) -> float:
        return _finite_fsum(getattr(row, column) for row in rows) / count

    total_streams = _finite_fsum(row.streams for row in rows)
    return SummaryStats(
        count=count,
        total_streams=total_streams,
        avg_streams_per_video=_safe_ratio(total_streams, count),
        comp25=_mean("comp25"),
        comp50=_mean("comp50"),
        comp75=_mean("comp75"),
        comp100=_mean("comp100"),
        avg_completion_rate=_mean("completion_rate"),
        avg_view_time=_mean("view_time"),
    )


def monthly_rollup(rows: Sequence[NormalizedRow]) -> List[MonthlyBucket]:
    """Per YYYY-MM bucket counts and means, ascending by month. Undated rows are skipped."""
    if not rows:
        return []
    monthly = (
        rows_to_frame(rows)
        .filter(pl.col("date_day").is_not_null())
        .with_columns(pl.col("date_day").str.slice(0, 7).alias("month"))
        .group_by("month")
        .agg(
            [
                pl.len().alias("video_count"),
                pl.col("streams").sum().alias("total_streams"),
                *[_mean_expr(column) for column in CHECKPOINT_COLUMNS],
            ]
        )
        .with_columns([_finite_expr(column) for column in ["total_streams", *CHECKPOINT_COLUMNS]])
        .sort("month")
    )

    buckets: List[MonthlyBucket] = []
    for record in monthly.iter_rows(named=True):
        video_count = int(record["video_count"])
        total_streams = float(record["total_streams"] or 0.0)
        buckets.append(
            MonthlyBucket(
                month=str(record["month"]),
                month_label=month_label(str(record["month"])),
                video_count=video_count,
                total_streams=total_streams,
                avg_streams_per_video=_safe_ratio(total_streams, video_count),
                comp25=float(record["comp25"]),
                comp50=float(record["comp50"]),
                comp75=float(record["comp75"]),
                comp100=float(record["comp100"]),
            )
        )
    return buckets

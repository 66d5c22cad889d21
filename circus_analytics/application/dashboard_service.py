"""Application service for the video dashboard aggregation use case."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Sequence

import polars as pl

from circus_analytics.aggregation import group_by_title, monthly_rollup, rows_to_frame, summary_stats
from circus_analytics.application.reporting.funnel import build_dropoff, build_funnel
from circus_analytics.application.reporting.rendering import overview_comment, versus_comment
from circus_analytics.application.reporting.selectors import (
    rank_by,
    select_by_keywords,
    select_catalogue,
    take_head,
)
from circus_analytics.config import MetricFields, PipelineConfig, TruncationMode
from circus_analytics.domain.language import classify_language
from circus_analytics.domain.models import (
    BenchmarkComparison,
    DropOff,
    FunnelPoint,
    LanguageBreakdown,
    LanguageTag,
    MonthlyBucket,
    NormalizedRow,
    SummaryStats,
)
from circus_analytics.domain.recommendation import (
    checkpoint_comparisons,
    compare_to_benchmarks,
    recommended_actions,
)

RawRow = Mapping[str, Any]
REFERENCE_LABEL = "Reference publisher"
RANKING_KEY = "streams"

MONTHLY_SCHEMA: Dict[str, Any] = {
    "month": pl.Utf8,
    "month_label": pl.Utf8,
    "video_count": pl.Int64,
    "total_streams": pl.Float64,
    "avg_streams_per_video": pl.Float64,
    "comp25": pl.Float64,
    "comp50": pl.Float64,
    "comp75": pl.Float64,
    "comp100": pl.Float64,
}
STAGE_SCHEMA: Dict[str, Any] = {"stage": pl.Utf8, "target": pl.Float64, "reference": pl.Float64}
STATS_SCHEMA: Dict[str, Any] = {
    "count": pl.Int64,
    "total_streams": pl.Float64,
    "avg_streams_per_video": pl.Float64,
    "comp25": pl.Float64,
    "comp50": pl.Float64,
    "comp75": pl.Float64,
    "comp100": pl.Float64,
    "avg_completion_rate": pl.Float64,
    "avg_view_time": pl.Float64,
}
COMPARISON_SCHEMA: Dict[str, Any] = {
    "metric": pl.Utf8,
    "label": pl.Utf8,
    "value": pl.Float64,
    "benchmark": pl.Float64,
    "is_above": pl.Boolean,
    "diff_pct": pl.Float64,
    "gap": pl.Float64,
}


class MissingInputError(ValueError):
    """A required dataset was not supplied; callers must gate on readiness."""


def _records_df(records: Sequence[Mapping[str, Any]], schema: Dict[str, Any]) -> pl.DataFrame:
    return pl.DataFrame(
        {column: [record.get(column) for record in records] for column in schema},
        schema=schema,
    )


@dataclass(frozen=True)
class DashboardSummary:
    variant: str
    target_stats: SummaryStats
    reference_stats: SummaryStats | None
    target_videos: tuple[NormalizedRow, ...]
    reference_videos: tuple[NormalizedRow, ...]
    monthly: tuple[MonthlyBucket, ...]
    funnel: tuple[FunnelPoint, ...]
    dropoff: tuple[DropOff, ...]
    leaderboards: Mapping[str, tuple[NormalizedRow, ...]]
    language_breakdown: tuple[LanguageBreakdown, ...] | None
    benchmark_comparisons: tuple[BenchmarkComparison, ...]
    checkpoint_comparisons: tuple[BenchmarkComparison, ...]
    recommendations: tuple[str, ...]
    comments: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        # read-only view over a private copy
        object.__setattr__(self, "leaderboards", MappingProxyType(dict(self.leaderboards)))

    def to_dict(self) -> dict[str, Any]:
        return {
            "variant": self.variant,
            "target_stats": self.target_stats.to_dict(),
            "reference_stats": self.reference_stats.to_dict() if self.reference_stats is not None else None,
            "target_videos": [row.to_dict() for row in self.target_videos],
            "reference_videos": [row.to_dict() for row in self.reference_videos],
            "monthly": [bucket.to_dict() for bucket in self.monthly],
            "funnel": [point.to_dict() for point in self.funnel],
            "dropoff": [item.to_dict() for item in self.dropoff],
            "leaderboards": {name: [row.to_dict() for row in rows] for name, rows in self.leaderboards.items()},
            "language_breakdown": (
                [item.to_dict() for item in self.language_breakdown] if self.language_breakdown is not None else None
            ),
            "benchmark_comparisons": [item.to_dict() for item in self.benchmark_comparisons],
            "checkpoint_comparisons": [item.to_dict() for item in self.checkpoint_comparisons],
            "recommendations": list(self.recommendations),
            "comments": list(self.comments),
        }

    def to_frames(self) -> Dict[str, pl.DataFrame]:
        """Named polars frames, one per workbook sheet."""
        stats_records: List[Dict[str, Any]] = [dict(side="target", **self.target_stats.to_dict())]
        if self.reference_stats is not None:
            stats_records.append(dict(side="reference", **self.reference_stats.to_dict()))
        comparisons = [item.to_dict() for item in (*self.benchmark_comparisons, *self.checkpoint_comparisons)]

        frames: Dict[str, pl.DataFrame] = {
            "stats": _records_df(stats_records, {"side": pl.Utf8, **STATS_SCHEMA}),
            "target_videos": rows_to_frame(self.target_videos),
            "monthly": _records_df([bucket.to_dict() for bucket in self.monthly], MONTHLY_SCHEMA),
            "funnel": _records_df([point.to_dict() for point in self.funnel], STAGE_SCHEMA),
            "dropoff": _records_df([item.to_dict() for item in self.dropoff], STAGE_SCHEMA),
            "benchmarks": _records_df(comparisons, COMPARISON_SCHEMA),
        }
        if self.reference_stats is not None:
            frames["reference_videos"] = rows_to_frame(self.reference_videos)
        for name, rows in self.leaderboards.items():
            frames[f"leaderboard_{name}"] = rows_to_frame(rows)
        if self.language_breakdown is not None:
            frames["languages"] = _records_df(
                [item.to_dict() for item in self.language_breakdown],
                {"language": pl.Utf8, **STATS_SCHEMA},
            )
        return frames


def normalize_rows(rows: Sequence[RawRow], source_fields: MetricFields) -> List[NormalizedRow]:
    return [NormalizedRow.from_row(row, source_fields) for row in rows]


def _select_videos(rows: Sequence[NormalizedRow], config: PipelineConfig) -> List[NormalizedRow]:
    if config.truncation is TruncationMode.HEAD_BEFORE_GROUPING:
        # source order, not performance order
        return group_by_title(take_head(rows, config.selection_size))
    return rank_by(group_by_title(rows), RANKING_KEY, config.selection_size)


def _run_side(
    raw_rows: Sequence[RawRow],
    selector: Callable[[Sequence[NormalizedRow]], List[NormalizedRow]],
    config: PipelineConfig,
) -> List[NormalizedRow]:
    normalized = normalize_rows(raw_rows, config.fields)
    videos = _select_videos(selector(normalized), config)
    if config.classify_language:
        videos = [row.with_language(classify_language(row.title)) for row in videos]
    return videos


def language_breakdown(rows: Sequence[NormalizedRow]) -> List[LanguageBreakdown]:
    breakdown: List[LanguageBreakdown] = []
    for tag in LanguageTag:
        tagged = [row for row in rows if row.language is tag]
        if tagged:
            breakdown.append(LanguageBreakdown(language=tag, stats=summary_stats(tagged)))
    return breakdown


def run_dashboard_pipeline(
    target_rows: Sequence[RawRow] | None,
    reference_rows: Sequence[RawRow] | None,
    config: PipelineConfig,
) -> DashboardSummary:
    """Turn decoded spreadsheet rows into the summary consumed by the dashboard view."""
    if target_rows is None:
        raise MissingInputError("Target dataset has not been supplied.")
    if config.requires_reference and reference_rows is None:
        raise MissingInputError(f"Variant {config.variant} requires a reference dataset.")

    label = config.target_catalogue_label
    target_videos = _run_side(target_rows, lambda rows: select_catalogue(rows, label), config)
    target_stats = summary_stats(target_videos)

    reference_videos: List[NormalizedRow] = []
    reference_stats: SummaryStats | None = None
    if config.requires_reference and reference_rows is not None:
        keywords = config.reference_keywords
        reference_videos = _run_side(reference_rows, lambda rows: select_by_keywords(rows, keywords), config)
        reference_stats = summary_stats(reference_videos)

    leaderboards: Dict[str, tuple[NormalizedRow, ...]] = {
        "target": tuple(rank_by(target_videos, RANKING_KEY, config.leaderboard_size)),
    }
    comments: List[str] = [overview_comment(label, target_stats)]
    if reference_stats is not None:
        leaderboards["reference"] = tuple(rank_by(reference_videos, RANKING_KEY, config.leaderboard_size))
        comments.append(overview_comment(REFERENCE_LABEL, reference_stats))
        comments.append(versus_comment(label, target_stats, REFERENCE_LABEL, reference_stats))

    headline = compare_to_benchmarks(target_stats, config.benchmarks)
    breakdown = tuple(language_breakdown(target_videos)) if config.classify_language else None

    return DashboardSummary(
        variant=config.variant,
        target_stats=target_stats,
        reference_stats=reference_stats,
        target_videos=tuple(target_videos),
        reference_videos=tuple(reference_videos),
        monthly=tuple(monthly_rollup(target_videos)),
        funnel=tuple(build_funnel(target_stats, reference_stats)),
        dropoff=tuple(build_dropoff(target_stats, reference_stats)),
        leaderboards=leaderboards,
        language_breakdown=breakdown,
        benchmark_comparisons=tuple(headline),
        checkpoint_comparisons=tuple(checkpoint_comparisons(target_stats, config.benchmarks)),
        recommendations=tuple(recommended_actions(headline)),
        comments=tuple(comments),
    )

"""Domain policies for benchmark comparison and canned recommendations."""

from __future__ import annotations

from typing import Sequence

from circus_analytics.config import BenchmarkSet
from circus_analytics.domain.models import BenchmarkComparison, SummaryStats

CHECKPOINT_LABELS: tuple[tuple[str, str], ...] = (
    ("comp25", "25% Watched"),
    ("comp50", "50% Watched"),
    ("comp75", "75% Watched"),
    ("comp100", "100% Completed"),
)


def _comparison(metric: str, label: str, value: float, benchmark: float) -> BenchmarkComparison:
    diff_pct = (value - benchmark) / benchmark * 100 if benchmark > 0 else 0.0
    return BenchmarkComparison(
        metric=metric,
        label=label,
        value=value,
        benchmark=benchmark,
        is_above=value > benchmark,
        diff_pct=diff_pct,
        gap=max(0.0, benchmark - value),
    )


def compare_to_benchmarks(stats: SummaryStats, benchmarks: BenchmarkSet) -> list[BenchmarkComparison]:
    return [
        _comparison("streams_per_video", "Streams/Video", stats.avg_streams_per_video, benchmarks.streams_per_video),
        _comparison("completion_rate", "Completion Rate", stats.comp100, benchmarks.completion_rate),
        _comparison("view_time", "View Time", stats.avg_view_time, benchmarks.view_time_minutes),
    ]


def checkpoint_comparisons(stats: SummaryStats, benchmarks: BenchmarkSet) -> list[BenchmarkComparison]:
    return [
        _comparison(metric, label, float(getattr(stats, metric)), float(getattr(benchmarks, metric)))
        for metric, label in CHECKPOINT_LABELS
    ]


def market_verdict(comparison: BenchmarkComparison) -> str:
    """Headline verdict; at-benchmark counts as above, as on the overview cards."""
    if comparison.value >= comparison.benchmark:
        return "Above market avg"
    return "Below market avg"


def recommended_actions(comparisons: Sequence[BenchmarkComparison]) -> list[str]:
    below = {item.metric for item in comparisons if not item.is_above and item.gap > 0}
    actions: list[str] = []

    if "streams_per_video" in below:
        actions.append(
            "Reach gap: use team-focused titles (e.g. \"Standard vs Anderlecht\"), local player names "
            "and the score in the thumbnail to lift streams per video."
        )
    if "completion_rate" in below:
        actions.append(
            "Completion gap: hook in the first 3 seconds, remove intros and target 1-2 minute cuts."
        )
    if "view_time" in below:
        actions.append(
            "View time gap: add captions for sound-off viewing and build mobile-first goal compilations."
        )
    if {"completion_rate", "view_time"} <= below:
        actions.append("Ad load: prefer shorter 15-30s pre-rolls until completion recovers.")

    if not actions:
        actions.append("At or above market on every headline metric: keep the current format and scale output.")
    return actions

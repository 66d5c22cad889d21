"""Text rendering helpers for the dashboard summary."""

from __future__ import annotations

from typing import List, Sequence

from circus_analytics.application.reporting.metrics import fmt_minutes, fmt_pct, fmt_signed_pct, fmt_streams
from circus_analytics.domain.models import BenchmarkComparison, NormalizedRow, SummaryStats
from circus_analytics.domain.recommendation import market_verdict


def overview_comment(label: str, stats: SummaryStats) -> str:
    if stats.count == 0:
        return f"{label}: no videos matched."
    return (
        f"{label}: {stats.count} videos, {fmt_streams(stats.total_streams)} streams "
        f"({round(stats.avg_streams_per_video)} per video), "
        f"completion {fmt_pct(stats.comp100)}, view time {fmt_minutes(stats.avg_view_time)}."
    )


def versus_comment(label: str, target: SummaryStats, reference_label: str, reference: SummaryStats) -> str:
    def _side(value: float, other: float) -> str:
        if value > other:
            return "ahead of"
        if value < other:
            return "behind"
        return "level with"

    return (
        f"{label} is {_side(target.avg_streams_per_video, reference.avg_streams_per_video)} {reference_label} "
        f"on streams/video ({round(target.avg_streams_per_video)} vs {round(reference.avg_streams_per_video)}) "
        f"and {_side(target.comp100, reference.comp100)} on completion "
        f"({fmt_pct(target.comp100)} vs {fmt_pct(reference.comp100)})."
    )


def benchmark_lines(comparisons: Sequence[BenchmarkComparison]) -> List[str]:
    lines: List[str] = []
    for item in comparisons:
        lines.append(
            f"{item.label}: {item.value:.1f} vs market {item.benchmark:g} "
            f"({fmt_signed_pct(item.diff_pct)}, {market_verdict(item)})"
        )
    return lines


def leaderboard_lines(rows: Sequence[NormalizedRow]) -> List[str]:
    if not rows:
        return ["No videos ranked."]
    return [
        f"{idx}) {row.title or '(untitled)'}: {fmt_streams(row.streams)} streams, "
        f"{fmt_pct(row.comp100)} completion, {fmt_minutes(row.view_time)} view time"
        for idx, row in enumerate(rows, start=1)
    ]

"""Retention funnel and drop-off derivation."""

from __future__ import annotations

from typing import List

from circus_analytics.domain.models import DropOff, FunnelPoint, SummaryStats

FUNNEL_STAGES: List[tuple[str, str | None]] = [
    ("Start", None),
    ("25%", "comp25"),
    ("50%", "comp50"),
    ("75%", "comp75"),
    ("100%", "comp100"),
]
DROPOFF_STAGES: List[str] = ["Start→25%", "25→50%", "50→75%", "75→100%"]


def _stage_value(stats: SummaryStats, attr: str | None) -> float:
    if attr is None:
        return 100.0
    return float(getattr(stats, attr))


def _checkpoints(stats: SummaryStats) -> List[float]:
    return [_stage_value(stats, attr) for _, attr in FUNNEL_STAGES]


def build_funnel(target: SummaryStats, reference: SummaryStats | None = None) -> List[FunnelPoint]:
    return [
        FunnelPoint(
            stage=stage,
            target=_stage_value(target, attr),
            reference=_stage_value(reference, attr) if reference is not None else None,
        )
        for stage, attr in FUNNEL_STAGES
    ]


def _deltas(stats: SummaryStats) -> List[float]:
    # Not clamped: non-monotonic checkpoints give negative drop-offs.
    points = _checkpoints(stats)
    return [points[idx] - points[idx + 1] for idx in range(len(points) - 1)]


def build_dropoff(target: SummaryStats, reference: SummaryStats | None = None) -> List[DropOff]:
    target_deltas = _deltas(target)
    reference_deltas = _deltas(reference) if reference is not None else [None] * len(DROPOFF_STAGES)
    return [
        DropOff(stage=stage, target=target_delta, reference=reference_delta)
        for stage, target_delta, reference_delta in zip(DROPOFF_STAGES, target_deltas, reference_deltas)
    ]

"""Named pipeline options and the shipped dashboard variants."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from enum import Enum


class TruncationMode(str, Enum):
    RANK_AFTER_GROUPING = "rank_after_grouping"
    HEAD_BEFORE_GROUPING = "head_before_grouping"


@dataclass(frozen=True)
class MetricFields:
    """Source column names; they carry accents and punctuation, so never inline them."""

    title: str = "video"
    catalogue: str = "catalogue"
    date: str = "jour"
    streams: str = "Streams"
    comp25: str = "Complétion Vidéo 25%"
    comp50: str = "Complétion Vidéo 50%"
    comp75: str = "Complétion Vidéo 75%"
    comp100: str = "Complétion Vidéo 100%"
    completion_rate: str = "Taux de complétion moyen (%)"
    view_time: str = "Average viewing time (m)"


@dataclass(frozen=True)
class BenchmarkSet:
    """Belgian sports publisher market averages."""

    streams_per_video: float = 4200.0
    completion_rate: float = 68.0
    view_time_minutes: float = 2.1
    comp25: float = 75.0
    comp50: float = 70.0
    comp75: float = 65.0
    comp100: float = 68.0


DEFAULT_REFERENCE_KEYWORDS: tuple[str, ...] = (
    "pro league",
    "jupiler",
    "rode duivels",
    "diables rouges",
    "club brugge",
    "anderlecht",
    "standard",
    "genk",
)


@dataclass(frozen=True)
class PipelineConfig:
    variant: str
    target_catalogue_label: str = "Circus Daily"
    reference_keywords: tuple[str, ...] = DEFAULT_REFERENCE_KEYWORDS
    requires_reference: bool = False
    truncation: TruncationMode = TruncationMode.RANK_AFTER_GROUPING
    selection_size: int = 100
    leaderboard_size: int = 10
    classify_language: bool = False
    target_sheet_name: str | None = "Raw data"
    reference_sheet_name: str | None = None
    fields: MetricFields = field(default_factory=MetricFields)
    benchmarks: BenchmarkSet = field(default_factory=BenchmarkSet)

    def with_overrides(self, **changes: object) -> "PipelineConfig":
        return replace(self, **changes)


VARIANTS: dict[str, PipelineConfig] = {
    "circus_top100": PipelineConfig(variant="circus_top100"),
    "publisher_head100": PipelineConfig(
        variant="publisher_head100",
        requires_reference=True,
        truncation=TruncationMode.HEAD_BEFORE_GROUPING,
    ),
    "publisher_ranked": PipelineConfig(
        variant="publisher_ranked",
        requires_reference=True,
        leaderboard_size=15,
    ),
    "publisher_language": PipelineConfig(
        variant="publisher_language",
        requires_reference=True,
        classify_language=True,
    ),
}


def get_variant(name: str) -> PipelineConfig:
    key = str(name or "").strip()
    if key not in VARIANTS:
        raise ValueError(f"Unknown dashboard variant: {name!r} (expected one of {sorted(VARIANTS)})")
    return VARIANTS[key]


def _default_variant_name() -> str:
    raw = os.getenv("CIRCUS_VARIANT", "circus_top100").strip()
    if raw not in VARIANTS:
        raise ValueError(f"Invalid CIRCUS_VARIANT: {raw}")
    return raw


DEFAULT_VARIANT = _default_variant_name()

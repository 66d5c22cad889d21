"""Domain models for the video dashboard pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from enum import Enum
from typing import Any, Mapping

from circus_analytics.domain.coercion import coerce_numeric, coerce_text, parse_day
from circus_analytics.config import MetricFields

METRIC_COLUMNS: tuple[str, ...] = (
    "streams",
    "comp25",
    "comp50",
    "comp75",
    "comp100",
    "completion_rate",
    "view_time",
)
MEAN_COLUMNS: tuple[str, ...] = METRIC_COLUMNS[1:]
ROW_COLUMNS: tuple[str, ...] = ("title", "catalogue", "date_day", *METRIC_COLUMNS)


class LanguageTag(str, Enum):
    FR = "FR"
    NL = "NL"


@dataclass(frozen=True)
class NormalizedRow:
    """One video row with canonical names; metrics are always finite floats."""

    title: str
    catalogue: str
    date_day: str | None
    streams: float = 0.0
    comp25: float = 0.0
    comp50: float = 0.0
    comp75: float = 0.0
    comp100: float = 0.0
    completion_rate: float = 0.0
    view_time: float = 0.0
    language: LanguageTag | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any], source_fields: MetricFields | None = None) -> "NormalizedRow":
        names = source_fields or MetricFields()
        day = parse_day(row.get(names.date))
        return cls(
            title=coerce_text(row.get(names.title)).strip(),
            catalogue=coerce_text(row.get(names.catalogue)),
            date_day=day.isoformat() if day is not None else None,
            streams=coerce_numeric(row.get(names.streams)),
            comp25=coerce_numeric(row.get(names.comp25)),
            comp50=coerce_numeric(row.get(names.comp50)),
            comp75=coerce_numeric(row.get(names.comp75)),
            comp100=coerce_numeric(row.get(names.comp100)),
            completion_rate=coerce_numeric(row.get(names.completion_rate)),
            view_time=coerce_numeric(row.get(names.view_time)),
        )

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "NormalizedRow":
        known = {item.name for item in fields(cls)}
        values = {key: value for key, value in record.items() if key in known}
        language = values.get("language")
        if language is not None and not isinstance(language, LanguageTag):
            values["language"] = LanguageTag(str(language))
        return cls(**values)

    def with_language(self, language: LanguageTag) -> "NormalizedRow":
        return replace(self, language=language)

    @property
    def month_key(self) -> str | None:
        if self.date_day is None:
            return None
        return self.date_day[:7]

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["language"] = self.language.value if self.language is not None else None
        return payload


@dataclass(frozen=True)
class SummaryStats:
    count: int = 0
    total_streams: float = 0.0
    avg_streams_per_video: float = 0.0
    comp25: float = 0.0
    comp50: float = 0.0
    comp75: float = 0.0
    comp100: float = 0.0
    avg_completion_rate: float = 0.0
    avg_view_time: float = 0.0

    @classmethod
    def empty(cls) -> "SummaryStats":
        return cls()

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class MonthlyBucket:
    month: str
    month_label: str
    video_count: int
    total_streams: float
    avg_streams_per_video: float
    comp25: float
    comp50: float
    comp75: float
    comp100: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class FunnelPoint:
    stage: str
    target: float
    reference: float | None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class DropOff:
    stage: str
    target: float
    reference: float | None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class LanguageBreakdown:
    language: LanguageTag
    stats: SummaryStats

    def to_dict(self) -> dict[str, Any]:
        payload = self.stats.to_dict()
        payload["language"] = self.language.value
        return payload


@dataclass(frozen=True)
class BenchmarkComparison:
    metric: str
    label: str
    value: float
    benchmark: float
    is_above: bool
    diff_pct: float
    gap: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

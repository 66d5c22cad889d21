"""Row selection, truncation and leaderboard helpers."""

from __future__ import annotations

from typing import Any, List, Mapping, Sequence, TypeVar

from circus_analytics.domain.coercion import coerce_numeric
from circus_analytics.domain.models import NormalizedRow

RowT = TypeVar("RowT")


def select_catalogue(rows: Sequence[NormalizedRow], label: str) -> List[NormalizedRow]:
    return [row for row in rows if row.catalogue == label]


def select_by_keywords(rows: Sequence[NormalizedRow], keywords: Sequence[str]) -> List[NormalizedRow]:
    """Rows whose title contains any keyword, case-insensitively."""
    needles = [keyword.lower() for keyword in keywords if keyword]
    if not needles:
        return []
    return [row for row in rows if any(needle in row.title.lower() for needle in needles)]


def take_head(rows: Sequence[RowT], size: int) -> List[RowT]:
    return list(rows[: max(0, size)])


def _key_value(row: Any, key: str) -> float:
    if isinstance(row, Mapping):
        return coerce_numeric(row.get(key))
    return coerce_numeric(getattr(row, key, None))


def rank_by(rows: Sequence[RowT], key: str, size: int) -> List[RowT]:
    """Descending by ``key``; ties keep input order since ``sorted`` is stable."""
    ordered = sorted(rows, key=lambda row: -_key_value(row, key))
    return ordered[: max(0, size)]

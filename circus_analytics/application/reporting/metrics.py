"""Shared numeric/formatting utilities for reporting."""

from __future__ import annotations


def fmt_streams(value: float | None) -> str:
    if value is None:
        return "0"
    if abs(value) >= 1_000_000:
        return f"{value / 1_000_000:.1f}M"
    if abs(value) >= 1_000:
        return f"{round(value / 1_000)}K"
    return f"{round(value)}"


def fmt_pct(value: float | None, digits: int = 1) -> str:
    if value is None:
        return "N/A"
    return f"{value:.{digits}f}%"


def fmt_minutes(value: float | None) -> str:
    if value is None:
        return "N/A"
    return f"{value:.1f}m"


def fmt_signed_pct(value: float | None) -> str:
    if value is None:
        return "N/A"
    arrow = "↑" if value > 0 else "↓"
    return f"{arrow} {abs(value):.0f}%"

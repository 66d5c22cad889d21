"""Domain layer package."""

from .language import classify_language
from .models import LanguageTag, NormalizedRow, SummaryStats
from .recommendation import compare_to_benchmarks, recommended_actions

__all__ = [
    "LanguageTag",
    "NormalizedRow",
    "SummaryStats",
    "classify_language",
    "compare_to_benchmarks",
    "recommended_actions",
]

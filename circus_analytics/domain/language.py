"""Keyword-based language tagging for Belgian sports video titles.

This is a heuristic decision list, not a language model. Rules run in
order and the first one that returns a tag wins, so the precedence of
the club-name overrides is part of the output contract.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from circus_analytics.domain.models import LanguageTag

FRENCH_KEYWORDS: tuple[str, ...] = (
    "victoire",
    "défaite",
    "match nul",
    "résumé",
    "buts",
    "contre",
    "avec",
    "les ",
    "des ",
    "du ",
    "entraîneur",
    "joueur",
    "coupe",
    "championnat",
    "diables rouges",
    "liège",
    "charleroi",
    "namur",
    "mons",
)
DUTCH_KEYWORDS: tuple[str, ...] = (
    "overwinning",
    "nederlaag",
    "gelijkspel",
    "samenvatting",
    "doelpunt",
    "tegen",
    "met ",
    "het ",
    "van ",
    "een ",
    "trainer",
    "speler",
    "beker",
    "kampioen",
    "rode duivels",
    "brugge",
    " gent",
    "antwerpen",
    "mechelen",
    "leuven",
)
DUTCH_CLUB_OVERRIDES: tuple[str, ...] = ("club brugge", "krc genk", "racing genk")
FRENCH_CLUB_OVERRIDES: tuple[str, ...] = ("standard liège", "standard de liège")
GENERIC_FRENCH_CLUBS: tuple[str, ...] = ("standard", "anderlecht", "bruges")
DEFAULT_LANGUAGE = LanguageTag.NL


@dataclass(frozen=True)
class TitleSignals:
    text: str
    french_score: int
    dutch_score: int

    @classmethod
    def from_title(cls, title: str) -> "TitleSignals":
        text = title.lower()
        return cls(
            text=text,
            french_score=keyword_score(text, FRENCH_KEYWORDS),
            dutch_score=keyword_score(text, DUTCH_KEYWORDS),
        )

    def mentions(self, keywords: tuple[str, ...]) -> bool:
        return any(keyword in self.text for keyword in keywords)


@dataclass(frozen=True)
class LanguageRule:
    name: str
    decide: Callable[[TitleSignals], LanguageTag | None]


def keyword_score(text: str, keywords: tuple[str, ...]) -> int:
    # leading space lets " gent" hit a title that opens with the city but not "argent"
    padded = f" {text}"
    return sum(1 for keyword in keywords if keyword in padded)


def _dutch_club_override(signals: TitleSignals) -> LanguageTag | None:
    return LanguageTag.NL if signals.mentions(DUTCH_CLUB_OVERRIDES) else None


def _french_club_override(signals: TitleSignals) -> LanguageTag | None:
    return LanguageTag.FR if signals.mentions(FRENCH_CLUB_OVERRIDES) else None


def _higher_score(signals: TitleSignals) -> LanguageTag | None:
    if signals.french_score > signals.dutch_score:
        return LanguageTag.FR
    if signals.dutch_score > signals.french_score:
        return LanguageTag.NL
    return None


def _unscored_generic_club(signals: TitleSignals) -> LanguageTag | None:
    if signals.french_score == 0 and signals.dutch_score == 0 and signals.mentions(GENERIC_FRENCH_CLUBS):
        return LanguageTag.FR
    return None


LANGUAGE_RULES: tuple[LanguageRule, ...] = (
    LanguageRule("dutch_club_override", _dutch_club_override),
    LanguageRule("french_club_override", _french_club_override),
    LanguageRule("higher_keyword_score", _higher_score),
    LanguageRule("unscored_generic_club", _unscored_generic_club),
)


def matching_rule(title: str | None) -> str:
    """Name of the rule that decides ``title``; "default" when none fires."""
    if not title:
        return "default"
    signals = TitleSignals.from_title(title)
    for rule in LANGUAGE_RULES:
        if rule.decide(signals) is not None:
            return rule.name
    return "default"


def classify_language(title: str | None) -> LanguageTag:
    if not title:
        return DEFAULT_LANGUAGE
    signals = TitleSignals.from_title(title)
    for rule in LANGUAGE_RULES:
        tag = rule.decide(signals)
        if tag is not None:
            return tag
    return DEFAULT_LANGUAGE

"""Specificity: how narrowly a rule's activation targets a context."""

from __future__ import annotations

from typing import Iterable

from rule_resolver.constants import LANGUAGE_TAGS

_WILDCARD_CHARS = "*?[{"
_LITERAL_CAP = 32
_LANGUAGE_BONUS = 0.1


def _literal_prefix(pattern: str) -> str:
    for index, char in enumerate(pattern):
        if char in _WILDCARD_CHARS:
            return pattern[:index]
    return pattern


def _wildcard_weight(pattern: str) -> int:
    weight = 0
    for segment in pattern.split("/"):
        if segment == "**":
            weight += 2
            continue
        weight += sum(1 for char in segment if char in _WILDCARD_CHARS)
    return weight


def pattern_specificity(pattern: str) -> float:
    """Score a single pattern in [0, 1].

    Longer literal prefixes and fewer wildcards score higher; a pattern with
    no wildcards at all names one exact path.
    """
    text = pattern.strip().lstrip("/")
    prefix = _literal_prefix(text)
    literals = sum(1 for char in text if char not in _WILDCARD_CHARS and char != "/")
    prefix_score = min(len(prefix), _LITERAL_CAP) / _LITERAL_CAP
    literal_score = min(literals, _LITERAL_CAP) / _LITERAL_CAP
    wildcard_score = 1.0 / (1 + _wildcard_weight(text))
    return 0.5 * prefix_score + 0.2 * literal_score + 0.3 * wildcard_score


def is_language_qualified(topic: str) -> bool:
    head, sep, _ = topic.partition(":")
    if sep:
        return head in LANGUAGE_TAGS
    return topic in LANGUAGE_TAGS


def derive_specificity(globs: Iterable[str], topics: Iterable[str]) -> float:
    """Derive a rule's specificity from its valid globs and its topics."""
    best = max((pattern_specificity(pattern) for pattern in globs), default=0.0)
    if any(is_language_qualified(topic) for topic in topics):
        best += _LANGUAGE_BONUS
    return round(min(max(best, 0.0), 1.0), 4)

"""Tokenization shared by relevance scoring and topic inference."""

from __future__ import annotations

import re

_TOKEN_RE = re.compile(r"[a-z0-9]+")

_KEEP_S_ENDINGS = ("ss", "us", "is")

_SUFFIXES: tuple[tuple[str, int], ...] = (
    ("ation", 7),
    ("tion", 7),
    ("ment", 7),
    ("ness", 7),
    ("ible", 7),
    ("able", 7),
    ("ing", 5),
    ("ed", 5),
    ("er", 5),
    ("ly", 5),
)

STOP_WORDS = frozenset(
    {
        # Articles, auxiliaries, modals
        "a", "an", "the", "is", "are", "was", "were", "be", "been", "being",
        "have", "has", "had", "do", "does", "did", "will", "would", "could",
        "should", "may", "might", "shall", "can", "must",
        # Prepositions
        "to", "of", "in", "for", "on", "with", "at", "by", "from", "as",
        "into", "through", "during", "before", "after", "above", "below",
        "between", "out", "off", "over", "under", "again",
        # Adverbs and conjunctions
        "then", "once", "here", "there", "when", "where", "why", "how",
        "all", "both", "each", "few", "more", "most", "other", "some",
        "such", "no", "nor", "not", "only", "own", "same", "so", "than",
        "too", "very", "just", "because", "but", "and", "or", "if",
        # Pronouns and determiners
        "what", "which", "who", "whom", "this", "that", "these", "those",
        "it", "its", "my", "your", "his", "her", "our", "their", "about",
        "up", "also", "any", "many", "much", "i", "we", "you", "they", "me",
        # Filler verbs
        "use", "used", "using", "get", "gets", "make", "makes", "want",
    }
)


def stem(word: str) -> str:
    """Strip a plural ending, then at most one common English suffix.

    The same word always maps to the same stem. Minimum-length guards stop
    short words from collapsing into two-letter stems.
    """
    if len(word) > 4 and word.endswith("ies"):
        word = word[:-3] + "y"
    elif len(word) > 3 and word.endswith("s") and not word.endswith(_KEEP_S_ENDINGS):
        word = word[:-1]

    for suffix, min_length in _SUFFIXES:
        if len(word) > min_length and word.endswith(suffix):
            return word[: -len(suffix)]
    if len(word) > 3 and word.endswith("e") and not word.endswith("ee"):
        return word[:-1]
    return word


def tokenize(text: str) -> list[str]:
    return [token for token in _TOKEN_RE.findall((text or "").lower()) if token not in STOP_WORDS]


def stems(text: str) -> frozenset[str]:
    return frozenset(stem(token) for token in tokenize(text))

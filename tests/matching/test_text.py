"""Tests for tokenizing, stemming and topic inference."""

import pytest

from rule_resolver.matching.text import stem, stems, tokenize
from rule_resolver.matching.topics import infer_topics


@pytest.mark.parametrize(
    "plural, singular",
    [
        ("migrations", "migration"),
        ("identifiers", "identifier"),
        ("libraries", "library"),
        ("tests", "test"),
    ],
)
def test_plural_and_singular_share_stem(plural: str, singular: str) -> None:
    assert stem(plural) == stem(singular)


def test_stem_keeps_short_words() -> None:
    assert stem("bus") == "bus"
    assert stem("is") == "is"
    assert stem("process") == "process"


def test_stem_strips_one_suffix() -> None:
    assert stem("testing") == "test"
    assert stem("migration") == "migr"


def test_tokenize_drops_stop_words_and_punctuation() -> None:
    assert tokenize("How do I handle the DB-migration?") == ["handle", "db", "migration"]


def test_stems_empty_text() -> None:
    assert stems("") == frozenset()
    assert stems("the and of") == frozenset()


def test_infer_topics_from_description() -> None:
    assert infer_topics("Database migrations and SQL queries") == frozenset({"database"})
    assert infer_topics("Write pytest tests with good coverage") == frozenset({"testing"})


def test_infer_topics_multiple() -> None:
    assert infer_topics("Log every exception before retrying") == frozenset({"logging", "errors"})


def test_infer_topics_none() -> None:
    assert infer_topics("") == frozenset()
    assert infer_topics("Prefer composition") == frozenset()


def test_gerund_shares_stem_with_noun() -> None:
    assert stem("naming") == stem("name") == stem("names")
    assert stem("typing") == stem("types")


def test_short_gerund_kept() -> None:
    assert stem("thing") == "thing"

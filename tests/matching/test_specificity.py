"""Tests for specificity derivation and topic inference."""

from rule_resolver.matching.specificity import (
    derive_specificity,
    is_language_qualified,
    pattern_specificity,
)
from rule_resolver.matching.topics import infer_topics


def test_exact_path_outranks_wildcards() -> None:
    assert pattern_specificity("src/api/handlers.py") > pattern_specificity("src/**/*.py")


def test_longer_literal_prefix_outranks_shorter() -> None:
    assert pattern_specificity("src/api/**/*.py") > pattern_specificity("src/**/*.py")


def test_globstar_is_less_specific_than_star() -> None:
    assert pattern_specificity("src/*.py") > pattern_specificity("src/**/*.py")


def test_pattern_specificity_is_bounded() -> None:
    for pattern in ["**", "*", "a" * 200, "src/**/*.{ts,tsx}"]:
        assert 0.0 <= pattern_specificity(pattern) <= 1.0


def test_derive_specificity_uses_best_pattern() -> None:
    best = derive_specificity(["**/*", "src/api/routes.py"], [])
    assert best == round(pattern_specificity("src/api/routes.py"), 4)


def test_derive_specificity_without_globs_is_zero() -> None:
    assert derive_specificity([], ["naming"]) == 0.0


def test_language_qualified_topic_adds_bonus() -> None:
    plain = derive_specificity(["src/**/*.py"], ["naming"])
    qualified = derive_specificity(["src/**/*.py"], ["python:naming"])
    assert qualified > plain


def test_is_language_qualified() -> None:
    assert is_language_qualified("python:naming")
    assert is_language_qualified("typescript")
    assert not is_language_qualified("naming")
    assert not is_language_qualified("team:naming")


def test_infer_topics_from_description() -> None:
    assert infer_topics("Naming conventions for identifiers") == frozenset({"naming"})
    assert "testing" in infer_topics("How to write pytest tests")
    assert "errors" in infer_topics("Handle crashes and exceptions")


def test_infer_topics_empty_description() -> None:
    assert infer_topics("") == frozenset()

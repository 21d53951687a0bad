"""Tests for rule parser (YAML frontmatter + markdown)."""

from pathlib import Path

import pytest

from rule_resolver.errors import InvalidRuleFileError
from rule_resolver.rules.parser import parse_rule


def test_parse_with_all_fields(tmp_path: Path) -> None:
    path = tmp_path / "python-style.md"
    path.write_text(
        "---\n"
        "description: Python coding standards\n"
        "globs:\n"
        '  - "*.py"\n'
        '  - "src/**/*.py"\n'
        "alwaysApply: false\n"
        "topics:\n  - \"python:style\"\n  - Naming\n"
        "specificity: 0.7\n"
        "---\n"
        "\n"
        "Always use type hints.\n",
        encoding="utf-8",
    )
    rule = parse_rule(path)
    assert rule.id == "python-style"
    assert rule.description == "Python coding standards"
    assert rule.globs == ("*.py", "src/**/*.py")
    assert rule.always_apply is False
    assert rule.topics == frozenset({"python:style", "naming"})
    assert rule.specificity == 0.7
    assert rule.body == "Always use type hints.\n"
    assert rule.source_path == path


def test_parse_cursor_style_comma_separated_globs(tmp_path: Path) -> None:
    path = tmp_path / "web.mdc"
    path.write_text(
        "---\n"
        "description: Web rules\n"
        "globs: src/**/*.ts, src/**/*.tsx\n"
        "alwaysApply: true\n"
        "---\n"
        "Use strict mode.\n",
        encoding="utf-8",
    )
    rule = parse_rule(path)
    assert rule.globs == ("src/**/*.ts", "src/**/*.tsx")
    assert rule.always_apply is True


def test_parse_snake_case_always_apply(tmp_path: Path) -> None:
    path = tmp_path / "global.md"
    path.write_text("---\nalways_apply: true\n---\nApplies everywhere.\n", encoding="utf-8")
    assert parse_rule(path).always_apply is True


def test_parse_explicit_id_overrides_file_name(tmp_path: Path) -> None:
    path = tmp_path / "file-name.md"
    path.write_text("---\nid: custom-id\n---\nBody.\n", encoding="utf-8")
    assert parse_rule(path, default_id="nested/file-name").id == "custom-id"


def test_parse_default_id(tmp_path: Path) -> None:
    path = tmp_path / "file-name.md"
    path.write_text("Body.\n", encoding="utf-8")
    assert parse_rule(path, default_id="nested/file-name").id == "nested/file-name"


def test_parse_no_frontmatter(tmp_path: Path) -> None:
    path = tmp_path / "plain.md"
    path.write_text("# Just Markdown\n\nNo frontmatter here.\n", encoding="utf-8")
    rule = parse_rule(path)
    assert rule.description == ""
    assert rule.globs == ()
    assert rule.always_apply is False
    assert rule.body.startswith("# Just Markdown")


def test_parse_empty_file(tmp_path: Path) -> None:
    path = tmp_path / "empty.md"
    path.write_text("", encoding="utf-8")
    rule = parse_rule(path)
    assert rule.id == "empty"
    assert rule.body == ""


def test_parse_invalid_yaml(tmp_path: Path) -> None:
    path = tmp_path / "broken.md"
    path.write_text("---\nglobs: [unclosed\n---\nBody.\n", encoding="utf-8")
    with pytest.raises(InvalidRuleFileError):
        parse_rule(path)


def test_parse_non_mapping_frontmatter(tmp_path: Path) -> None:
    path = tmp_path / "list.md"
    path.write_text("---\n- a\n- b\n---\nBody.\n", encoding="utf-8")
    with pytest.raises(InvalidRuleFileError):
        parse_rule(path)


def test_parse_out_of_range_specificity(tmp_path: Path) -> None:
    path = tmp_path / "bad.md"
    path.write_text("---\nspecificity: 3\n---\nBody.\n", encoding="utf-8")
    with pytest.raises(InvalidRuleFileError):
        parse_rule(path)

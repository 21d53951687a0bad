"""Tests for rules CLI commands."""

import json
from pathlib import Path

from rule_resolver.__main__ import cli


def test_rules_list_empty(cli_runner) -> None:
    result = cli_runner.invoke(cli, ["rules", "list"])
    assert result.exit_code == 0
    assert "No rules" in result.output


def test_rules_list_populated(rules_dir: Path, cli_runner) -> None:
    (rules_dir / "python-style.md").write_text(
        "---\ndescription: Python standards\nglobs: \"*.py\"\n---\n\nUse type hints.\n",
        encoding="utf-8",
    )
    result = cli_runner.invoke(cli, ["rules", "list"])
    assert result.exit_code == 0
    assert "python-style" in result.output
    assert "Python standards" in result.output


def test_rules_list_custom_dir(tmp_path: Path, cli_runner) -> None:
    custom = tmp_path / "custom"
    custom.mkdir()
    (custom / "mine.md").write_text("Mine.\n", encoding="utf-8")

    result = cli_runner.invoke(cli, ["rules", "list", "--rules-dir", str(custom)])

    assert result.exit_code == 0
    assert "mine" in result.output


def test_rules_list_dir_from_config(tmp_path: Path, app_root: Path, cli_runner) -> None:
    custom = tmp_path / "configured"
    custom.mkdir()
    (custom / "configured-rule.md").write_text("Body.\n", encoding="utf-8")
    app_root.mkdir(parents=True, exist_ok=True)
    (app_root / "config.json").write_text(json.dumps({"rulesDir": str(custom)}), encoding="utf-8")

    result = cli_runner.invoke(cli, ["rules", "list"])

    assert result.exit_code == 0
    assert "configured-rule" in result.output


def test_rules_list_invalid_rule_file(rules_dir: Path, cli_runner) -> None:
    (rules_dir / "broken.md").write_text("---\nglobs: [unclosed\n---\nBody.\n", encoding="utf-8")

    result = cli_runner.invoke(cli, ["rules", "list"])

    assert result.exit_code != 0
    assert "Invalid rule file" in result.output


def test_rules_check_clean(write_rule, cli_runner) -> None:
    write_rule("style", "Body.", globs=["*.py"])

    result = cli_runner.invoke(cli, ["rules", "check"])

    assert result.exit_code == 0
    assert "no issues" in result.output


def test_rules_check_reports_issues(write_rule, cli_runner) -> None:
    write_rule("bad", "Body.", globs=["src/**.py"])
    write_rule("empty", "", description="Nothing here")

    result = cli_runner.invoke(cli, ["rules", "check"])

    assert result.exit_code == 1
    assert "invalid-pattern" in result.output
    assert "missing-body" in result.output


def test_rules_check_strict_is_fatal(write_rule, cli_runner) -> None:
    write_rule("empty", "", description="Nothing here")

    result = cli_runner.invoke(cli, ["rules", "check", "--strict"])

    assert result.exit_code != 0
    assert "Fatal" in result.output


def test_rules_list_shows_bracketed_text(rules_dir: Path, cli_runner) -> None:
    (rules_dir / "odd.md").write_text(
        '---\nid: "[/x]"\nglobs: "src/[ab]*.ts"\n---\nBody.\n',
        encoding="utf-8",
    )

    result = cli_runner.invoke(cli, ["rules", "list"])

    assert result.exit_code == 0, result.output
    assert "[/x]" in result.output
    assert "src/[ab]*.ts" in result.output


def test_rules_check_shows_bracketed_pattern(write_rule, cli_runner) -> None:
    write_rule("bad", "Body.", globs=["[ab]**.py"])

    result = cli_runner.invoke(cli, ["rules", "check"])

    assert result.exit_code == 1
    assert "[ab]**.py" in result.output

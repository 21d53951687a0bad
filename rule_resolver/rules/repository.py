"""Repository that loads rule documents from a directory tree."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from rule_resolver.constants import RULE_FILE_SUFFIXES
from rule_resolver.rules.models import RuleDocument
from rule_resolver.rules.parser import parse_rule


class RulesRepository:
    def __init__(self, rules_dir: Path) -> None:
        self._rules_dir = rules_dir

    @property
    def rules_dir(self) -> Path:
        return self._rules_dir

    def list_paths(self) -> list[Path]:
        """Rule files below the directory, in load order (sorted relative path)."""
        if not self._rules_dir.is_dir():
            return []
        paths: list[Path] = []
        for child in self._rules_dir.rglob("*"):
            relative = child.relative_to(self._rules_dir)
            if any(part.startswith(".") for part in relative.parts):
                continue
            if child.is_file() and child.suffix in RULE_FILE_SUFFIXES:
                paths.append(child)
        return sorted(paths, key=lambda item: item.relative_to(self._rules_dir).as_posix())

    def rule_id_for(self, path: Path) -> str:
        return path.relative_to(self._rules_dir).with_suffix("").as_posix()

    def list_rules(self) -> list[RuleDocument]:
        return [parse_rule(path, default_id=self.rule_id_for(path)) for path in self.list_paths()]

    def get_rule(self, rule_id: str) -> Optional[RuleDocument]:
        for rule in self.list_rules():
            if rule.id == rule_id:
                return rule
        return None

"""Parse rule documents from Markdown with YAML frontmatter."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Optional

import yaml

from rule_resolver.errors import InvalidRuleFileError
from rule_resolver.rules.models import RuleDocument

_FRONTMATTER_RE = re.compile(r"^---\s*\n(.*?)\n---\s*(?:\n|\Z)", re.DOTALL)

_TRUE_STRINGS = {"true", "yes", "on", "1"}


def _as_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value if item is not None]
    return [str(value)]


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


def _as_specificity(value: Any, path: Path) -> Optional[float]:
    if value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidRuleFileError(path, f"specificity must be a number, got {value!r}") from exc
    if not 0.0 <= number <= 1.0:
        raise InvalidRuleFileError(path, f"specificity must be within [0, 1], got {number}")
    return number


def split_frontmatter(text: str, path: Path) -> tuple[dict[str, Any], str]:
    match = _FRONTMATTER_RE.match(text)
    if not match:
        return {}, text
    try:
        raw = yaml.safe_load(match.group(1)) or {}
    except yaml.YAMLError as exc:
        raise InvalidRuleFileError(path, f"frontmatter is not valid YAML: {exc}") from exc
    if not isinstance(raw, dict):
        raise InvalidRuleFileError(path, "frontmatter must be a mapping")
    return raw, text[match.end() :]


def parse_rule(path: Path, default_id: Optional[str] = None) -> RuleDocument:
    """Read one rule file.

    Accepts both ``alwaysApply`` and ``always_apply``. ``globs`` and
    ``topics`` may be lists or comma-separated strings.
    """
    text = path.read_text(encoding="utf-8")
    raw, body = split_frontmatter(text, path)

    always_apply = raw.get("alwaysApply", raw.get("always_apply", False))
    rule_id = str(raw.get("id") or default_id or path.stem).strip()
    if not rule_id:
        raise InvalidRuleFileError(path, "rule id must not be empty")

    return RuleDocument(
        id=rule_id,
        body=body.lstrip("\n"),
        description=str(raw.get("description") or ""),
        globs=tuple(_as_list(raw.get("globs"))),
        always_apply=_as_bool(always_apply),
        topics=frozenset(_as_list(raw.get("topics"))),
        specificity=_as_specificity(raw.get("specificity"), path),
        source_path=path,
    )

"""Resolver settings and the JSON config file they are read from."""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from jsonschema import Draft202012Validator

from rule_resolver.constants import (
    APP_DIRNAME,
    CONFIG_FILENAME,
    DEFAULT_BOUNDARY,
    DEFAULT_SEPARATOR,
    DEFAULT_SIZE_BUDGET,
    DEFAULT_THRESHOLD,
    RULES_DIRNAME,
)
from rule_resolver.errors import (
    InvalidConfigSchemaError,
    InvalidJsonFormatError,
    MissingConfigFileError,
)
from rule_resolver.utils import read_json_safe


class SizeUnit(str, Enum):
    CHARS = "chars"
    BYTES = "bytes"


class ConflictPolicy(str, Enum):
    PARTIAL = "partial"
    WHOLE = "whole"


CONFIG_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "threshold": {"type": "number", "minimum": 0, "maximum": 1},
        "sizeBudget": {"type": "integer", "minimum": 0},
        "sizeUnit": {"enum": [unit.value for unit in SizeUnit]},
        "boundary": {"type": "string"},
        "separator": {"type": "string"},
        "conflictPolicy": {"enum": [policy.value for policy in ConflictPolicy]},
        "strict": {"type": "boolean"},
        "inferTopics": {"type": "boolean"},
        "maxDescriptionMatches": {"type": ["integer", "null"], "minimum": 1},
        "rulesDir": {"type": "string"},
    },
}

_KEY_MAP: dict[str, str] = {
    "threshold": "threshold",
    "sizeBudget": "size_budget",
    "sizeUnit": "size_unit",
    "boundary": "boundary",
    "separator": "separator",
    "conflictPolicy": "conflict_policy",
    "strict": "strict",
    "inferTopics": "infer_topics",
    "maxDescriptionMatches": "max_description_matches",
}


def format_schema_error(error: Any) -> str:
    path = ".".join([str(part) for part in error.path])
    return f"{error.message} at {path}" if path else str(error.message)


@dataclass(frozen=True)
class ResolverConfig:
    threshold: float = DEFAULT_THRESHOLD
    size_budget: int = DEFAULT_SIZE_BUDGET
    size_unit: SizeUnit = SizeUnit.CHARS
    boundary: str = DEFAULT_BOUNDARY
    separator: str = DEFAULT_SEPARATOR
    conflict_policy: ConflictPolicy = ConflictPolicy.PARTIAL
    strict: bool = False
    infer_topics: bool = True
    max_description_matches: Optional[int] = None

    def __post_init__(self) -> None:
        if not 0.0 <= self.threshold <= 1.0:
            raise ValueError("threshold must be within [0, 1]")
        if self.size_budget < 0:
            raise ValueError("size_budget must not be negative")
        object.__setattr__(self, "size_unit", SizeUnit(self.size_unit))
        object.__setattr__(self, "conflict_policy", ConflictPolicy(self.conflict_policy))

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "ResolverConfig":
        kwargs = {_KEY_MAP[key]: value for key, value in payload.items() if key in _KEY_MAP}
        return cls(**kwargs)

    def with_overrides(self, **overrides: Any) -> "ResolverConfig":
        known = {item.name for item in fields(self)}
        values = {name: getattr(self, name) for name in known}
        values.update({key: value for key, value in overrides.items() if value is not None and key in known})
        return ResolverConfig(**values)


class ConfigRepository:
    def __init__(self, root: Optional[Path] = None) -> None:
        self._root = root or (Path.home() / ".config" / APP_DIRNAME)

    @property
    def root(self) -> Path:
        return self._root

    @property
    def config_path(self) -> Path:
        return self.root / CONFIG_FILENAME

    @property
    def rules_dir(self) -> Path:
        return self.root / RULES_DIRNAME

    def load_payload(self, path: Optional[Path] = None) -> dict[str, Any]:
        """Read and validate the raw config object.

        An explicit ``path`` must exist; the default location may be absent.
        """
        target = path or self.config_path
        if path is not None and not path.exists():
            raise MissingConfigFileError(path)

        payload, error = read_json_safe(target)
        if error is not None:
            raise InvalidJsonFormatError(target, error)
        if payload is None:
            return {}
        if not isinstance(payload, dict):
            raise InvalidConfigSchemaError(target, "top-level value must be an object")

        validator = Draft202012Validator(CONFIG_SCHEMA)
        errors = sorted(validator.iter_errors(payload), key=lambda item: [str(part) for part in item.path])
        if errors:
            raise InvalidConfigSchemaError(target, format_schema_error(errors[0]))
        return payload

    def load(self, path: Optional[Path] = None) -> ResolverConfig:
        return ResolverConfig.from_dict(self.load_payload(path))

    def resolve_rules_dir(self, path: Optional[Path] = None) -> Path:
        payload = self.load_payload(path)
        configured = payload.get("rulesDir")
        if configured:
            return Path(configured).expanduser()
        return self.rules_dir

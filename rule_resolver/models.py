from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from rule_resolver.errors import Issue


class Activation(str, Enum):
    ALWAYS = "always"
    GLOB = "glob"
    DESCRIPTION = "description"


class ExclusionReason(str, Enum):
    SUPERSEDED = "superseded"
    OVER_BUDGET = "over-budget"
    NO_MATCH = "no-match"
    DUPLICATE_CONTENT = "duplicate-content"


class Decision(str, Enum):
    INCLUDED = "included"
    EXCLUDED = "excluded"


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass(frozen=True)
class QueryContext:
    file_path: Optional[str] = None
    free_text: Optional[str] = None
    size_budget: Optional[int] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "file_path", _clean(self.file_path))
        object.__setattr__(self, "free_text", _clean(self.free_text))
        if self.size_budget is not None and self.size_budget < 0:
            raise ValueError("size_budget must not be negative")

    @property
    def is_empty(self) -> bool:
        return self.file_path is None and self.free_text is None


@dataclass(frozen=True)
class Candidate:
    """A document eligible for inclusion, with how it got there."""

    rule_id: str
    activations: tuple[Activation, ...]
    score: Optional[float] = None
    matched_pattern: Optional[str] = None


@dataclass(frozen=True)
class Exclusion:
    rule_id: str
    reason: ExclusionReason
    detail: str = ""

    def as_dict(self) -> dict[str, str]:
        return {
            "id": self.rule_id,
            "reason": self.reason.value,
            "detail": self.detail,
        }


@dataclass(frozen=True)
class TraceEntry:
    rule_id: str
    decision: Decision
    activations: tuple[Activation, ...] = ()
    score: Optional[float] = None
    matched_pattern: Optional[str] = None
    covered_topics: tuple[str, ...] = ()
    superseded_topics: tuple[str, ...] = ()
    reason: Optional[ExclusionReason] = None
    detail: str = ""

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.rule_id,
            "decision": self.decision.value,
            "activations": [item.value for item in self.activations],
            "score": self.score,
            "matched_pattern": self.matched_pattern,
            "covered_topics": list(self.covered_topics),
            "superseded_topics": list(self.superseded_topics),
            "reason": self.reason.value if self.reason is not None else None,
            "detail": self.detail,
        }


@dataclass(frozen=True)
class ResolutionResult:
    included: tuple[str, ...]
    excluded: tuple[Exclusion, ...]
    payload: str
    size: int
    size_budget: int
    trace: tuple[TraceEntry, ...] = ()
    warnings: tuple[Issue, ...] = field(default_factory=tuple)

    def excluded_ids(self, reason: Optional[ExclusionReason] = None) -> list[str]:
        return [item.rule_id for item in self.excluded if reason is None or item.reason == reason]

    def as_dict(self) -> dict[str, Any]:
        return {
            "included": list(self.included),
            "excluded": [item.as_dict() for item in self.excluded],
            "payload": self.payload,
            "size": self.size,
            "size_budget": self.size_budget,
            "trace": [item.as_dict() for item in self.trace],
            "warnings": [item.as_dict() for item in self.warnings],
        }

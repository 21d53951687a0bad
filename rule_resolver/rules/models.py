"""Rule document model."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional


def _normalize_globs(globs: Iterable[str]) -> tuple[str, ...]:
    seen: set[str] = set()
    ordered: list[str] = []
    for pattern in globs:
        text = str(pattern).strip()
        if not text or text in seen:
            continue
        seen.add(text)
        ordered.append(text)
    return tuple(ordered)


def _normalize_topics(topics: Iterable[str]) -> frozenset[str]:
    return frozenset(str(topic).strip().lower() for topic in topics if str(topic).strip())


@dataclass(frozen=True)
class RuleDocument:
    """A unit of guidance: activation metadata plus an opaque body.

    ``specificity`` holds the declared value when the author set one; the
    index replaces it with the effective value at build time. ``load_order``
    is likewise assigned by the index.
    """

    id: str
    body: str
    description: str = ""
    globs: tuple[str, ...] = ()
    always_apply: bool = False
    topics: frozenset[str] = field(default_factory=frozenset)
    specificity: Optional[float] = None
    load_order: int = 0
    topics_inferred: bool = False
    source_path: Optional[Path] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if not str(self.id).strip():
            raise ValueError("Rule id must not be empty")
        object.__setattr__(self, "description", (self.description or "").strip())
        object.__setattr__(self, "globs", _normalize_globs(self.globs))
        object.__setattr__(self, "topics", _normalize_topics(self.topics))
        if self.specificity is not None:
            value = float(self.specificity)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"Rule {self.id}: specificity must be within [0, 1]")
            object.__setattr__(self, "specificity", value)

    @property
    def is_glob_scoped(self) -> bool:
        return bool(self.globs)

    @property
    def is_description_scoped(self) -> bool:
        return bool(self.description) and not self.always_apply

    @property
    def effective_specificity(self) -> float:
        return self.specificity if self.specificity is not None else 0.0

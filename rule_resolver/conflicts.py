"""Topic conflict detection and precedence ordering.

Two candidates conflict when they declare a shared topic. For every such
topic the highest-precedence candidate wins:

1. always-apply documents outrank context-activated ones
2. higher specificity outranks lower
3. the most recently loaded document wins a remaining tie
4. the lexicographically smaller id is the final tiebreak

Always-apply documents are never superseded: a standing policy stays in the
result even when another standing policy covers the same topic.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from rule_resolver.config import ConflictPolicy
from rule_resolver.models import Candidate
from rule_resolver.rules.models import RuleDocument

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedRule:
    document: RuleDocument
    candidate: Candidate
    covered_topics: tuple[str, ...] = ()
    superseded_topics: tuple[str, ...] = ()
    superseded_by: tuple[str, ...] = ()

    @property
    def detail(self) -> str:
        if not self.superseded_by:
            return ""
        winners = ", ".join(self.superseded_by)
        topics = ", ".join(self.superseded_topics)
        return f"superseded by {winners} on {topics}"


@dataclass(frozen=True)
class ConflictOutcome:
    ordered: tuple[ResolvedRule, ...]
    superseded: tuple[ResolvedRule, ...]


def precedence_key(doc: RuleDocument) -> tuple:
    return (not doc.always_apply, -doc.effective_specificity, -doc.load_order, doc.id)


def output_key(doc: RuleDocument) -> tuple:
    return (not doc.always_apply, -doc.effective_specificity, doc.id)


class ConflictResolver:
    def __init__(self, policy: ConflictPolicy = ConflictPolicy.PARTIAL) -> None:
        self.policy = ConflictPolicy(policy)

    @staticmethod
    def contested_topics(documents: Sequence[RuleDocument]) -> frozenset[str]:
        counts: dict[str, int] = {}
        for doc in documents:
            for topic in doc.topics:
                counts[topic] = counts.get(topic, 0) + 1
        return frozenset(topic for topic, count in counts.items() if count > 1)

    def resolve(self, candidates: Sequence[tuple[RuleDocument, Candidate]]) -> ConflictOutcome:
        """Order ``candidates`` and mark the superseded ones."""
        contested = self.contested_topics([doc for doc, _ in candidates])
        claimed: dict[str, str] = {}
        kept: list[ResolvedRule] = []
        dropped: list[ResolvedRule] = []

        for doc, candidate in sorted(candidates, key=lambda item: precedence_key(item[0])):
            shared = doc.topics & contested
            lost = sorted(topic for topic in shared if topic in claimed)
            won = sorted(topic for topic in shared if topic not in claimed)
            uncontested = sorted(doc.topics - contested)
            winners = tuple(sorted({claimed[topic] for topic in lost}))

            if doc.always_apply:
                include = True
            elif self.policy == ConflictPolicy.WHOLE:
                include = not lost
            else:
                include = bool(won or uncontested or not shared)

            resolved = ResolvedRule(
                document=doc,
                candidate=candidate,
                covered_topics=tuple(sorted(won + uncontested)),
                superseded_topics=tuple(lost),
                superseded_by=winners,
            )
            if not include:
                logger.debug("Rule %s %s", doc.id, resolved.detail)
                dropped.append(resolved)
                continue

            for topic in won:
                claimed[topic] = doc.id
            kept.append(resolved)

        kept.sort(key=lambda item: output_key(item.document))
        return ConflictOutcome(ordered=tuple(kept), superseded=tuple(dropped))

"""Relevance scoring between free text and rule descriptions."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from rule_resolver.constants import DEFAULT_THRESHOLD
from rule_resolver.matching.text import stems
from rule_resolver.rules.models import RuleDocument

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoredDocument:
    document: RuleDocument
    score: float
    detail: str = ""


class RelevanceScorer:
    """Token-overlap scorer.

    The score is the share of the description's distinct stems that also
    occur in the query, so it lies in [0, 1]. A document needs at least one
    shared stem and a score at or above ``threshold`` to qualify.
    """

    def __init__(self, threshold: float = DEFAULT_THRESHOLD) -> None:
        if not 0.0 <= threshold <= 1.0:
            raise ValueError("threshold must be within [0, 1]")
        self.threshold = threshold

    @staticmethod
    def score(free_text: str, description: str) -> float:
        wanted = stems(description)
        if not wanted:
            return 0.0
        overlap = stems(free_text) & wanted
        return round(len(overlap) / len(wanted), 4)

    def qualifies(self, score: float) -> bool:
        return score > 0.0 and score >= self.threshold

    def partition(
        self,
        free_text: str,
        documents: Iterable[RuleDocument],
        limit: Optional[int] = None,
    ) -> tuple[list[ScoredDocument], list[ScoredDocument]]:
        """Split ``documents`` into (matched, rejected).

        Matched documents are ordered by score, then specificity, then id.
        With ``limit`` set, matches past the limit move to the rejected list.
        """
        matched: list[ScoredDocument] = []
        rejected: list[ScoredDocument] = []
        for doc in documents:
            value = self.score(free_text, doc.description)
            if self.qualifies(value):
                matched.append(ScoredDocument(doc, value))
            else:
                rejected.append(
                    ScoredDocument(doc, value, f"relevance {value:.4f} below threshold {self.threshold:.4f}")
                )

        matched.sort(key=lambda item: (-item.score, -item.document.effective_specificity, item.document.id))
        if limit is not None and len(matched) > limit:
            for item in matched[limit:]:
                rejected.append(ScoredDocument(item.document, item.score, f"outside top {limit} description matches"))
            matched = matched[:limit]

        logger.debug(
            "Description scoring: %d matched, %d rejected (threshold %.4f)",
            len(matched),
            len(rejected),
            self.threshold,
        )
        return matched, rejected

"""Resolution engine: from a query context to an assembled guidance payload."""

from __future__ import annotations

import logging
from typing import Optional

from rule_resolver.assembler import Assembler
from rule_resolver.config import ResolverConfig
from rule_resolver.conflicts import ConflictResolver, ResolvedRule
from rule_resolver.errors import Issue, IssueCode
from rule_resolver.index import DocumentIndex
from rule_resolver.matching.glob import find_matching_pattern
from rule_resolver.models import (
    Activation,
    Candidate,
    Decision,
    Exclusion,
    ExclusionReason,
    QueryContext,
    ResolutionResult,
    TraceEntry,
)
from rule_resolver.scoring import RelevanceScorer

logger = logging.getLogger(__name__)


class _CandidateBuilder:
    def __init__(self) -> None:
        self.activations: list[Activation] = []
        self.score: Optional[float] = None
        self.matched_pattern: Optional[str] = None

    def build(self, rule_id: str) -> Candidate:
        return Candidate(
            rule_id=rule_id,
            activations=tuple(self.activations),
            score=self.score,
            matched_pattern=self.matched_pattern,
        )


class ResolutionEngine:
    """Stateless resolver bound to one index.

    ``resolve`` reads the index and the query only, so the same pair always
    produces the same result and concurrent calls need no locking.
    """

    def __init__(self, index: DocumentIndex, config: Optional[ResolverConfig] = None) -> None:
        self.index = index
        self.config = config or ResolverConfig()
        self.scorer = RelevanceScorer(self.config.threshold)
        self.conflicts = ConflictResolver(self.config.conflict_policy)
        self.assembler = Assembler(
            boundary=self.config.boundary,
            separator=self.config.separator,
            size_unit=self.config.size_unit,
        )

    def resolve(self, query: QueryContext) -> ResolutionResult:
        budget = query.size_budget if query.size_budget is not None else self.config.size_budget
        warnings: list[Issue] = []
        builders: dict[str, _CandidateBuilder] = {}
        misses: dict[str, list[str]] = {}

        for doc in self.index.all_always_apply():
            builders.setdefault(doc.id, _CandidateBuilder()).activations.append(Activation.ALWAYS)

        if query.is_empty:
            logger.info("Empty query context, resolving always-apply rules only")
            warnings.append(
                Issue(
                    code=IssueCode.EMPTY_CONTEXT,
                    message="Neither file path nor free text given; only always-apply rules considered",
                )
            )

        if query.file_path is not None:
            self._collect_glob_matches(query.file_path, builders, misses)

        if query.free_text is not None:
            self._collect_description_matches(query.free_text, builders, misses)

        candidates = [
            (doc, builders[doc.id].build(doc.id)) for doc in self.index.documents if doc.id in builders
        ]
        outcome = self.conflicts.resolve(candidates)
        assembly = self.assembler.assemble([item.document for item in outcome.ordered], budget)

        no_match = [
            Exclusion(doc.id, ExclusionReason.NO_MATCH, "; ".join(misses[doc.id]))
            for doc in self.index.documents
            if doc.id in misses and doc.id not in builders
        ]
        superseded = [
            Exclusion(item.document.id, ExclusionReason.SUPERSEDED, item.detail) for item in outcome.superseded
        ]
        excluded = tuple(superseded) + assembly.excluded + tuple(no_match)

        trace = self._trace(outcome.ordered, outcome.superseded, assembly.included, excluded)
        logger.debug(
            "Resolved %d candidates: %d included, %d excluded, payload size %d/%d",
            len(candidates),
            len(assembly.included),
            len(excluded),
            assembly.size,
            budget,
        )
        return ResolutionResult(
            included=assembly.included,
            excluded=excluded,
            payload=assembly.payload,
            size=assembly.size,
            size_budget=budget,
            trace=trace,
            warnings=tuple(warnings),
        )

    def _collect_glob_matches(
        self,
        file_path: str,
        builders: dict[str, _CandidateBuilder],
        misses: dict[str, list[str]],
    ) -> None:
        for doc in self.index.glob_candidates():
            pattern = find_matching_pattern(file_path, doc.globs)
            if pattern is None:
                if not doc.always_apply:
                    misses.setdefault(doc.id, []).append(f"no glob matched {file_path}")
                continue
            builder = builders.setdefault(doc.id, _CandidateBuilder())
            builder.activations.append(Activation.GLOB)
            builder.matched_pattern = pattern

    def _collect_description_matches(
        self,
        free_text: str,
        builders: dict[str, _CandidateBuilder],
        misses: dict[str, list[str]],
    ) -> None:
        matched, rejected = self.scorer.partition(
            free_text,
            self.index.description_candidates(),
            limit=self.config.max_description_matches,
        )
        for item in matched:
            builder = builders.setdefault(item.document.id, _CandidateBuilder())
            builder.activations.append(Activation.DESCRIPTION)
            builder.score = item.score
        for item in rejected:
            misses.setdefault(item.document.id, []).append(item.detail)

    def _trace(
        self,
        ordered: tuple[ResolvedRule, ...],
        superseded: tuple[ResolvedRule, ...],
        included: tuple[str, ...],
        excluded: tuple[Exclusion, ...],
    ) -> tuple[TraceEntry, ...]:
        resolved = {item.document.id: item for item in ordered + superseded}
        entries: list[TraceEntry] = []
        for rule_id in included:
            entries.append(self._entry(rule_id, resolved.get(rule_id), Decision.INCLUDED))
        for exclusion in excluded:
            entries.append(
                self._entry(
                    exclusion.rule_id,
                    resolved.get(exclusion.rule_id),
                    Decision.EXCLUDED,
                    exclusion,
                )
            )
        return tuple(entries)

    def _entry(
        self,
        rule_id: str,
        resolved: Optional[ResolvedRule],
        decision: Decision,
        exclusion: Optional[Exclusion] = None,
    ) -> TraceEntry:
        reason = exclusion.reason if exclusion is not None else None
        detail = exclusion.detail if exclusion is not None else ""
        if resolved is None:
            return TraceEntry(rule_id=rule_id, decision=decision, reason=reason, detail=detail)
        candidate = resolved.candidate
        return TraceEntry(
            rule_id=rule_id,
            decision=decision,
            activations=candidate.activations,
            score=candidate.score,
            matched_pattern=candidate.matched_pattern,
            covered_topics=resolved.covered_topics,
            superseded_topics=resolved.superseded_topics,
            reason=reason,
            detail=detail,
        )


def resolve(
    index: DocumentIndex,
    query: QueryContext,
    config: Optional[ResolverConfig] = None,
) -> ResolutionResult:
    return ResolutionEngine(index, config).resolve(query)


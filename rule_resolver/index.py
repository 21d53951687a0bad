"""Immutable in-memory index of rule documents."""

from __future__ import annotations

import logging
from dataclasses import replace
from types import MappingProxyType
from typing import Iterable, Iterator, Optional

from rule_resolver.errors import (
    DuplicateIdError,
    InvalidPatternError,
    Issue,
    MissingBodyError,
)
from rule_resolver.matching.glob import compile_pattern
from rule_resolver.matching.specificity import derive_specificity
from rule_resolver.matching.topics import TOPIC_HEURISTIC_VERSION
from rule_resolver.matching.topics import infer_topics as infer_description_topics
from rule_resolver.rules.models import RuleDocument

logger = logging.getLogger(__name__)


class DocumentIndex:
    """Rule documents keyed by activation type.

    Instances are built once through :meth:`build` and never mutated, so any
    number of threads may read one concurrently. A changed document set means
    building a new index.
    """

    def __init__(
        self,
        documents: tuple[RuleDocument, ...],
        warnings: tuple[Issue, ...] = (),
        topic_heuristic_version: int = TOPIC_HEURISTIC_VERSION,
    ) -> None:
        self._documents = documents
        self._warnings = warnings
        self._topic_heuristic_version = topic_heuristic_version
        self._by_id = MappingProxyType({doc.id: doc for doc in documents})
        self._always = tuple(doc for doc in documents if doc.always_apply)
        self._glob = tuple(doc for doc in documents if doc.is_glob_scoped)
        self._description = tuple(doc for doc in documents if doc.is_description_scoped)

    @classmethod
    def build(
        cls,
        documents: Iterable[RuleDocument],
        *,
        strict: bool = False,
        infer_topics: bool = True,
    ) -> "DocumentIndex":
        """Validate and normalize ``documents`` into a new index.

        Duplicate ids always raise DuplicateIdError. Invalid glob patterns are
        dropped and documents with an empty body are left out, both reported
        as warnings; with ``strict=True`` they raise instead.
        """
        incoming = list(documents)
        seen: set[str] = set()
        for doc in incoming:
            if doc.id in seen:
                raise DuplicateIdError(doc.id)
            seen.add(doc.id)

        warnings: list[Issue] = []
        accepted: list[RuleDocument] = []
        for position, doc in enumerate(incoming):
            if not doc.body.strip():
                error = MissingBodyError(doc.id)
                if strict:
                    raise error
                logger.warning("Leaving rule out of index: %s", error)
                warnings.append(error.issue)
                continue

            valid_globs: list[str] = []
            for pattern in doc.globs:
                try:
                    compile_pattern(pattern)
                except InvalidPatternError as exc:
                    error = InvalidPatternError(pattern, exc.detail, rule_id=doc.id)
                    if strict:
                        raise error from exc
                    logger.warning("Disabling pattern: %s", error)
                    warnings.append(error.issue)
                    continue
                valid_globs.append(pattern)

            topics = doc.topics
            inferred = False
            if not topics and infer_topics:
                topics = infer_description_topics(doc.description)
                inferred = bool(topics)

            specificity = doc.specificity
            if specificity is None:
                specificity = derive_specificity(valid_globs, topics)

            accepted.append(
                replace(
                    doc,
                    globs=tuple(valid_globs),
                    topics=topics,
                    topics_inferred=inferred,
                    specificity=specificity,
                    load_order=position,
                )
            )

        index = cls(tuple(accepted), tuple(warnings))
        logger.info(
            "Built rule index: %d documents, %d warnings",
            len(index),
            len(index.warnings),
        )
        return index

    @property
    def documents(self) -> tuple[RuleDocument, ...]:
        return self._documents

    @property
    def warnings(self) -> tuple[Issue, ...]:
        return self._warnings

    @property
    def topic_heuristic_version(self) -> int:
        return self._topic_heuristic_version

    def get(self, rule_id: str) -> Optional[RuleDocument]:
        return self._by_id.get(rule_id)

    def all_always_apply(self) -> tuple[RuleDocument, ...]:
        return self._always

    def glob_candidates(self) -> tuple[RuleDocument, ...]:
        return self._glob

    def description_candidates(self) -> tuple[RuleDocument, ...]:
        return self._description

    def __len__(self) -> int:
        return len(self._documents)

    def __iter__(self) -> Iterator[RuleDocument]:
        return iter(self._documents)

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._by_id


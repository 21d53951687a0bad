"""Single-writer publication of the current rule index."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, Optional, Sequence

from rule_resolver.config import ResolverConfig
from rule_resolver.engine import ResolutionEngine
from rule_resolver.index import DocumentIndex
from rule_resolver.models import QueryContext, ResolutionResult
from rule_resolver.rules.models import RuleDocument

logger = logging.getLogger(__name__)


class IndexPublisher:
    """Holds the published index reference.

    Readers take the reference once and keep using that snapshot, so a swap
    never changes the index under an in-flight resolution. Writers build the
    replacement before taking the lock; only the assignment happens under it.
    """

    def __init__(self, index: Optional[DocumentIndex] = None) -> None:
        self._index = index if index is not None else DocumentIndex.build([])
        self._generation = 0
        self._write_lock = threading.Lock()

    def current(self) -> DocumentIndex:
        return self._index

    @property
    def generation(self) -> int:
        return self._generation

    def publish(self, index: DocumentIndex) -> DocumentIndex:
        """Swap in ``index`` and return the one it replaced."""
        with self._write_lock:
            previous = self._index
            self._index = index
            self._generation += 1
            generation = self._generation
        logger.info("Published rule index generation %d (%d documents)", generation, len(index))
        return previous

    def rebuild(
        self,
        documents: Iterable[RuleDocument],
        *,
        strict: bool = False,
        infer_topics: bool = True,
    ) -> DocumentIndex:
        """Build a new index off to the side, then publish it.

        A failing build leaves the published index untouched.
        """
        index = DocumentIndex.build(documents, strict=strict, infer_topics=infer_topics)
        self.publish(index)
        return index


class RuleResolver:
    """Query-facing service: resolves against whatever index is published."""

    def __init__(
        self,
        publisher: Optional[IndexPublisher] = None,
        config: Optional[ResolverConfig] = None,
    ) -> None:
        self.publisher = publisher or IndexPublisher()
        self.config = config or ResolverConfig()

    @classmethod
    def from_documents(
        cls,
        documents: Iterable[RuleDocument],
        config: Optional[ResolverConfig] = None,
    ) -> "RuleResolver":
        settings = config or ResolverConfig()
        index = DocumentIndex.build(documents, strict=settings.strict, infer_topics=settings.infer_topics)
        return cls(IndexPublisher(index), settings)

    @property
    def index(self) -> DocumentIndex:
        return self.publisher.current()

    def reload(self, documents: Iterable[RuleDocument]) -> DocumentIndex:
        return self.publisher.rebuild(
            documents,
            strict=self.config.strict,
            infer_topics=self.config.infer_topics,
        )

    def resolve(self, query: QueryContext) -> ResolutionResult:
        return ResolutionEngine(self.publisher.current(), self.config).resolve(query)

    def resolve_many(
        self,
        queries: Sequence[QueryContext],
        max_workers: Optional[int] = None,
    ) -> list[ResolutionResult]:
        """Resolve ``queries`` in parallel against one index snapshot.

        Results come back in the order of ``queries``.
        """
        engine = ResolutionEngine(self.publisher.current(), self.config)
        if not queries:
            return []
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            return list(pool.map(engine.resolve, queries))

"""Tests for index publication and the resolver service."""

import threading

import pytest

from rule_resolver.config import ResolverConfig
from rule_resolver.errors import DuplicateIdError
from rule_resolver.index import DocumentIndex
from rule_resolver.models import QueryContext
from rule_resolver.publisher import IndexPublisher, RuleResolver
from rule_resolver.rules.models import RuleDocument


def _doc(rule_id: str, **kwargs) -> RuleDocument:
    return RuleDocument(id=rule_id, body=f"{rule_id} guidance\n", **kwargs)


def test_publisher_starts_with_empty_index() -> None:
    publisher = IndexPublisher()
    assert len(publisher.current()) == 0
    assert publisher.generation == 0


def test_publish_swaps_reference_and_returns_previous() -> None:
    first = DocumentIndex.build([_doc("a")])
    second = DocumentIndex.build([_doc("b")])
    publisher = IndexPublisher(first)

    previous = publisher.publish(second)

    assert previous is first
    assert publisher.current() is second
    assert publisher.generation == 1


def test_failed_rebuild_keeps_published_index() -> None:
    publisher = IndexPublisher(DocumentIndex.build([_doc("a")]))
    before = publisher.current()

    with pytest.raises(DuplicateIdError):
        publisher.rebuild([_doc("x"), _doc("x")])

    assert publisher.current() is before
    assert publisher.generation == 0


def test_snapshot_is_stable_across_swap() -> None:
    resolver = RuleResolver.from_documents([_doc("old", always_apply=True)])
    snapshot = resolver.index

    resolver.reload([_doc("new", always_apply=True)])

    assert [doc.id for doc in snapshot] == ["old"]
    assert resolver.resolve(QueryContext()).included == ("new",)


def test_resolve_many_keeps_query_order() -> None:
    resolver = RuleResolver.from_documents(
        [
            _doc("py", globs=("**/*.py",)),
            _doc("ts", globs=("**/*.ts",)),
        ]
    )
    queries = [
        QueryContext(file_path="a.py"),
        QueryContext(file_path="b.ts"),
        QueryContext(file_path="c.go"),
    ] * 10

    results = resolver.resolve_many(queries, max_workers=4)

    assert [result.included for result in results] == [("py",), ("ts",), ()] * 10


def test_resolve_many_empty() -> None:
    assert RuleResolver().resolve_many([]) == []


def test_concurrent_resolution_during_swaps() -> None:
    config = ResolverConfig(boundary="", separator="")
    resolver = RuleResolver.from_documents([_doc("v0", always_apply=True)], config)
    valid = {("v0",)} | {(f"v{i}",) for i in range(1, 21)}
    seen: list[tuple[str, ...]] = []
    errors: list[Exception] = []

    def reader() -> None:
        try:
            for _ in range(200):
                seen.append(resolver.resolve(QueryContext()).included)
        except Exception as exc:
            errors.append(exc)

    threads = [threading.Thread(target=reader) for _ in range(4)]
    for thread in threads:
        thread.start()
    for i in range(1, 21):
        resolver.reload([_doc(f"v{i}", always_apply=True)])
    for thread in threads:
        thread.join()

    assert errors == []
    assert set(seen) <= valid
    assert resolver.resolve(QueryContext()).included == ("v20",)

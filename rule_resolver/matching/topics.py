"""Keyword-based topic inference for rules that declare no topics.

Only the description is inspected, never the body. The keyword table is
versioned through TOPIC_HEURISTIC_VERSION.
"""

from __future__ import annotations

from typing import Final

from rule_resolver.matching.text import stem, stems

# Bump whenever TOPIC_KEYWORDS changes so resolutions stay reproducible.
TOPIC_HEURISTIC_VERSION: Final[int] = 2

TOPIC_KEYWORDS: dict[str, tuple[str, ...]] = {
    "api": ("api", "endpoint", "rest", "http", "graphql", "route"),
    "concurrency": ("thread", "async", "await", "concurrency", "lock", "race", "parallel"),
    "database": ("database", "sql", "query", "migration", "schema", "orm"),
    "dependencies": ("dependency", "dependencies", "package", "version", "import"),
    "documentation": ("doc", "docs", "docstring", "documentation", "comment", "readme"),
    "errors": ("error", "exception", "crash", "panic", "failure", "retry"),
    "formatting": ("format", "formatting", "indentation", "lint", "linter", "whitespace"),
    "git": ("git", "commit", "branch", "merge", "rebase"),
    "logging": ("log", "logs", "logging", "logger", "trace", "tracing"),
    "memory": ("memory", "leak", "allocation", "garbage", "heap"),
    "naming": ("name", "names", "naming", "identifier", "camelcase", "snake"),
    "performance": ("performance", "latency", "optimize", "optimization", "cache", "profiling"),
    "security": ("security", "secret", "auth", "authentication", "password", "injection", "xss"),
    "testing": ("test", "tests", "testing", "pytest", "jest", "unittest", "coverage", "mock"),
}

_STEMMED_KEYWORDS: dict[str, frozenset[str]] = {
    topic: frozenset(stem(keyword) for keyword in keywords)
    for topic, keywords in TOPIC_KEYWORDS.items()
}


def infer_topics(description: str) -> frozenset[str]:
    found = stems(description)
    if not found:
        return frozenset()
    return frozenset(topic for topic, keywords in _STEMMED_KEYWORDS.items() if keywords & found)

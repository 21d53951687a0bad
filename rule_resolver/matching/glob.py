"""Glob matching for rule activation.

Supported syntax:
- ``*`` matches any run of characters inside one path segment
- ``**`` as a whole segment matches zero or more segments
- ``?`` matches one character inside a segment
- ``[abc]`` / ``[!abc]`` character classes
- ``{a,b}`` alternatives (expanded before compilation)

Matching is case-sensitive and anchored to the whole path. A pattern that
starts with ``**`` therefore matches at any depth, while ``*.md`` only
matches files at the root.

Example:
    matches("src/a/b/c.ts", ["src/**/*.ts"])  # True
    matches("docs/README.md", ["*.md"])       # False
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Iterable, Optional

from rule_resolver.errors import InvalidPatternError

logger = logging.getLogger(__name__)

_GLOBSTAR_RE = "(?:[^/]+/)*"


def normalize_path(path: str) -> str:
    text = str(path).replace("\\", "/")
    while text.startswith("./"):
        text = text[2:]
    return text.lstrip("/")


def _expand_braces(pattern: str) -> list[str]:
    """Expand brace groups like 'src/*.{ts,tsx}' into one pattern per option.

    Multiple groups are expanded recursively. Nested or unbalanced braces are
    rejected.
    """
    start = pattern.find("{")
    close = pattern.find("}")
    if start == -1:
        if close != -1:
            raise InvalidPatternError(pattern, "unbalanced '}'")
        return [pattern]
    if close != -1 and close < start:
        raise InvalidPatternError(pattern, "unbalanced '}'")
    end = pattern.find("}", start + 1)
    if end == -1:
        raise InvalidPatternError(pattern, "unclosed '{'")
    inside = pattern[start + 1 : end]
    if "{" in inside:
        raise InvalidPatternError(pattern, "nested braces are not supported")

    options = inside.split(",")
    if len(options) < 2:
        raise InvalidPatternError(pattern, "brace group needs at least two options")

    out: list[str] = []
    for option in options:
        out.extend(_expand_braces(f"{pattern[:start]}{option}{pattern[end + 1 :]}"))
    return out


def _translate_segment(segment: str, pattern: str) -> str:
    out: list[str] = []
    i = 0
    while i < len(segment):
        char = segment[i]
        if char == "*":
            if i + 1 < len(segment) and segment[i + 1] == "*":
                raise InvalidPatternError(pattern, "'**' must be a whole path segment")
            out.append("[^/]*")
        elif char == "?":
            out.append("[^/]")
        elif char == "[":
            end = segment.find("]", i + 2)
            if end == -1:
                raise InvalidPatternError(pattern, "unclosed '['")
            body = segment[i + 1 : end]
            negated = body.startswith("!")
            if negated:
                body = body[1:]
            if not body:
                raise InvalidPatternError(pattern, "empty character class")
            body = body.replace("\\", "\\\\")
            # Classes never match the separator, even through a range.
            out.append("[^/" + body + "]" if negated else "(?!/)[" + body + "]")
            i = end
        elif char == "]":
            raise InvalidPatternError(pattern, "unbalanced ']'")
        else:
            out.append(re.escape(char))
        i += 1
    return "".join(out)


def _translate(pattern: str, original: str) -> str:
    segments = pattern.split("/")
    parts: list[str] = []
    last = len(segments) - 1
    for index, segment in enumerate(segments):
        if segment == "":
            raise InvalidPatternError(original, "empty path segment")
        if segment == "**":
            parts.append(".*" if index == last else _GLOBSTAR_RE)
            continue
        parts.append(_translate_segment(segment, original))
        if index != last:
            parts.append("/")
    return "".join(parts)


@lru_cache(maxsize=1024)
def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Compile a glob into an anchored regular expression.

    Raises InvalidPatternError for malformed input.
    """
    if not isinstance(pattern, str) or not pattern.strip():
        raise InvalidPatternError(str(pattern), "empty pattern")
    if "\x00" in pattern:
        raise InvalidPatternError(pattern, "NUL byte in pattern")

    text = pattern.strip()
    while text.startswith("./"):
        text = text[2:]
    text = text.lstrip("/")
    if not text:
        raise InvalidPatternError(pattern, "pattern has no segments")

    alternatives = [_translate(expanded, pattern) for expanded in _expand_braces(text)]
    try:
        return re.compile("(?:" + "|".join(alternatives) + r")\Z")
    except re.error as exc:
        raise InvalidPatternError(pattern, str(exc)) from exc


def validate_pattern(pattern: str) -> None:
    compile_pattern(pattern)


def find_matching_pattern(path: str, patterns: Iterable[str]) -> Optional[str]:
    """Return the first pattern matching ``path``.

    Malformed patterns never match; they are logged and skipped.
    """
    target = normalize_path(path)
    if not target:
        return None
    for pattern in patterns:
        try:
            regex = compile_pattern(pattern)
        except InvalidPatternError as exc:
            logger.warning("Skipping %s", exc)
            continue
        if regex.match(target):
            return pattern
    return None


def matches(path: str, patterns: Iterable[str]) -> bool:
    return find_matching_pattern(path, patterns) is not None

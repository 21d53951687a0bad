"""Bounded assembly of rule bodies into one payload."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from rule_resolver.config import SizeUnit
from rule_resolver.constants import DEFAULT_BOUNDARY, DEFAULT_SEPARATOR
from rule_resolver.models import Exclusion, ExclusionReason
from rule_resolver.rules.models import RuleDocument

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Assembly:
    payload: str
    size: int
    included: tuple[str, ...]
    excluded: tuple[Exclusion, ...]


class Assembler:
    """Concatenate bodies in precedence order without exceeding a budget.

    Each body is prefixed with a boundary line rendered from ``boundary``
    (``{id}`` is substituted) and sections are joined with ``separator``;
    both count against the budget. A body is included whole or not at all.
    An overflowing document is skipped and assembly moves on, so a smaller
    lower-precedence document can still fit. Bodies identical to an
    already included body are dropped.
    """

    def __init__(
        self,
        boundary: str = DEFAULT_BOUNDARY,
        separator: str = DEFAULT_SEPARATOR,
        size_unit: SizeUnit = SizeUnit.CHARS,
    ) -> None:
        self.boundary = boundary
        self.separator = separator
        self.size_unit = SizeUnit(size_unit)

    def measure(self, text: str) -> int:
        if self.size_unit == SizeUnit.BYTES:
            return len(text.encode("utf-8"))
        return len(text)

    def section(self, doc: RuleDocument) -> str:
        if not self.boundary:
            return doc.body
        return self.boundary.replace("{id}", doc.id) + "\n" + doc.body

    def assemble(self, ordered: Sequence[RuleDocument], size_budget: int) -> Assembly:
        sections: list[str] = []
        included: list[str] = []
        excluded: list[Exclusion] = []
        seen_bodies: dict[str, str] = {}
        used = 0

        for doc in ordered:
            first_owner = seen_bodies.get(doc.body)
            if first_owner is not None:
                excluded.append(
                    Exclusion(doc.id, ExclusionReason.DUPLICATE_CONTENT, f"same body as {first_owner}")
                )
                continue

            cost = self.measure(self.section(doc))
            if sections:
                cost += self.measure(self.separator)
            if used + cost > size_budget:
                logger.debug("Rule %s does not fit: needs %d, %d left", doc.id, cost, size_budget - used)
                excluded.append(
                    Exclusion(
                        doc.id,
                        ExclusionReason.OVER_BUDGET,
                        f"needs {cost}, {size_budget - used} of {size_budget} left",
                    )
                )
                continue

            sections.append(self.section(doc))
            included.append(doc.id)
            seen_bodies[doc.body] = doc.id
            used += cost

        payload = self.separator.join(sections)
        return Assembly(
            payload=payload,
            size=self.measure(payload),
            included=tuple(included),
            excluded=tuple(excluded),
        )

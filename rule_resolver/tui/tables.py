from collections import Counter

from rich.markup import escape
from rich.table import Column, Table

from rule_resolver.models import Decision, ResolutionResult, TraceEntry
from rule_resolver.rules.models import RuleDocument
from rule_resolver.tui.enums import EXCLUSION_REASON_STYLE, UIStyle
from rule_resolver.utils import shorten


class ResolutionTable:
    @staticmethod
    def summary_block(result: ResolutionResult, query: str):
        counts = Counter(item.reason.value for item in result.excluded)
        chips = [f"{key}={value}" for key, value in sorted(counts.items()) if value > 0]
        if not chips:
            chips = ["none"]

        table = Table.grid(padding=(0, 2))
        table.add_column(style="bold")
        table.add_column()
        table.add_row("Query", escape(query))
        table.add_row("Included", str(len(result.included)))
        table.add_row("Excluded", "  ".join(chips))
        table.add_row("Size", f"{result.size}/{result.size_budget}")
        return table

    @staticmethod
    def included_table(entries: list[TraceEntry]) -> Table:
        table = Table(
            Column(header="#", width=3, justify="right"),
            Column(header="Rule", overflow="fold"),
            Column(header="Activation", width=22),
            Column(header="Match", overflow="ellipsis", max_width=36),
            Column(header="Topics", overflow="ellipsis"),
            expand=True,
            header_style="bold",
        )
        position = 0
        for entry in entries:
            if entry.decision != Decision.INCLUDED:
                continue
            position += 1
            match = entry.matched_pattern or ""
            if entry.score is not None:
                match = f"{match} score={entry.score:.2f}".strip()
            table.add_row(
                str(position),
                escape(entry.rule_id),
                ", ".join(item.value for item in entry.activations),
                escape(match),
                escape(", ".join(entry.covered_topics)),
            )
        return table

    @staticmethod
    def excluded_table(result: ResolutionResult) -> Table:
        table = Table(
            Column(header="Rule", overflow="fold"),
            Column(header="Reason", width=18),
            Column(header="Detail", overflow="ellipsis"),
            expand=True,
            header_style="bold",
        )
        for item in result.excluded:
            style = EXCLUSION_REASON_STYLE.get(item.reason, UIStyle.WHITE.value)
            table.add_row(escape(item.rule_id), f"[{style}]{item.reason.value}[/{style}]", escape(item.detail))
        return table


class RulesTable:
    @staticmethod
    def rules_table(rules: list[RuleDocument]) -> Table:
        table = Table(
            Column(header="Rule", overflow="fold"),
            Column(header="Always", width=7),
            Column(header="Globs", overflow="ellipsis", max_width=40),
            Column(header="Topics", overflow="ellipsis", max_width=30),
            Column(header="Description", overflow="ellipsis"),
            expand=True,
            header_style="bold",
        )
        for rule in rules:
            always = f"[{UIStyle.GREEN.value}]yes[/{UIStyle.GREEN.value}]" if rule.always_apply else ""
            table.add_row(
                escape(rule.id),
                always,
                escape(", ".join(rule.globs)),
                escape(", ".join(sorted(rule.topics))),
                escape(shorten(rule.description)),
            )
        return table

from typing import Iterable, Optional

from rich.console import Console
from rich.text import Text

from rule_resolver.errors import Issue
from rule_resolver.models import QueryContext, ResolutionResult
from rule_resolver.rules.models import RuleDocument
from rule_resolver.tui.enums import UIStyle
from rule_resolver.tui.sections import UISection
from rule_resolver.tui.tables import ResolutionTable, RulesTable
from rule_resolver.utils import compact_home_path, compact_home_paths_in_text


def describe_query(query: QueryContext) -> str:
    parts: list[str] = []
    if query.file_path is not None:
        parts.append(f"path={query.file_path}")
    if query.free_text is not None:
        parts.append(f'text="{query.free_text}"')
    return " ".join(parts) or "(empty)"


class ResolverConsoleUI:
    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def render_resolution(
        self,
        query: QueryContext,
        result: ResolutionResult,
        load_warnings: Iterable[Issue] = (),
        show_payload: bool = True,
    ) -> None:
        self.console.print(
            UISection.wrap(
                "resolution",
                ResolutionTable.summary_block(result, describe_query(query)),
                style=UIStyle.BLUE.value,
            )
        )

        if result.included:
            self.console.print(
                UISection.wrap(
                    "included",
                    ResolutionTable.included_table(list(result.trace)),
                    style=UIStyle.GREEN.value,
                )
            )
        else:
            self.console.print(UISection.note("included", "No rules apply.", style=UIStyle.DIM.value))

        if result.excluded:
            self.console.print(
                UISection.wrap(
                    "excluded",
                    ResolutionTable.excluded_table(result),
                    style=UIStyle.YELLOW.value,
                )
            )

        self.render_issues([*load_warnings, *result.warnings])

        if show_payload and result.payload:
            self.console.print(
                UISection.wrap(
                    "payload",
                    Text(result.payload),
                    style=UIStyle.CYAN.value,
                    subtitle=f"{result.size}/{result.size_budget}",
                )
            )

    def render_issues(self, issues: Iterable[Issue], title: str = "warnings") -> None:
        items = list(issues)
        if not items:
            return
        lines = [f"- [{item.code.value}] {compact_home_paths_in_text(item.message)}" for item in items]
        self.console.print(UISection.note(title, lines, style=UIStyle.RED.value))

    def render_rules(self, rules: list[RuleDocument], rules_dir: Optional[str] = None) -> None:
        subtitle = compact_home_path(rules_dir) if rules_dir else None
        if not rules:
            self.console.print(UISection.note("rules", "No rules found.", style=UIStyle.YELLOW.value))
            return
        self.console.print(
            UISection.wrap(
                "rules",
                RulesTable.rules_table(rules),
                style=UIStyle.BLUE.value,
                subtitle=subtitle,
            )
        )

    def render_check(self, documents: int, issues: list[Issue], heuristic_version: int) -> None:
        if not issues:
            self.console.print(
                UISection.note(
                    "check",
                    f"{documents} rules indexed, no issues (topic heuristic v{heuristic_version}).",
                    style=UIStyle.GREEN.value,
                )
            )
            return
        self.render_issues(issues, title=f"check: {len(issues)} issue(s)")

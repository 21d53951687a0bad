from typing import Iterable, Optional, Union

from rich.console import RenderableType
from rich.panel import Panel
from rich.text import Text

from rule_resolver.tui.enums import UIStyle


class UISection:
    @staticmethod
    def wrap(
        title: str,
        body: RenderableType,
        style: str = UIStyle.BLUE.value,
        subtitle: Optional[str] = None,
    ) -> Panel:
        return Panel(body, title=title, subtitle=subtitle, border_style=style, padding=(0, 1))

    @staticmethod
    def note(title: str, lines: Union[str, Iterable[str]], style: str) -> Panel:
        """Plain-text panel. Rule ids, patterns and messages are not read as markup."""
        text = lines if isinstance(lines, str) else "\n".join(lines)
        return Panel(Text(text), title=title, border_style=style, padding=(0, 1))

from enum import Enum

from rule_resolver.models import ExclusionReason


class UIStyle(str, Enum):
    BLUE = "blue"
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"
    CYAN = "cyan"
    MAGENTA = "magenta"
    DIM = "dim"
    WHITE = "white"


EXCLUSION_REASON_STYLE = {
    ExclusionReason.SUPERSEDED: UIStyle.MAGENTA.value,
    ExclusionReason.OVER_BUDGET: UIStyle.YELLOW.value,
    ExclusionReason.NO_MATCH: UIStyle.DIM.value,
    ExclusionReason.DUPLICATE_CONTENT: UIStyle.CYAN.value,
}

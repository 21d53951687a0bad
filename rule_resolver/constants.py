from typing import Final


APP_DIRNAME: Final[str] = "rule-resolver"
CONFIG_FILENAME: Final[str] = "config.json"
RULES_DIRNAME: Final[str] = "rules"

RULE_FILE_SUFFIXES: Final[tuple[str, ...]] = (
    ".md",
    ".mdc",
)

DEFAULT_THRESHOLD: Final[float] = 0.15
DEFAULT_SIZE_BUDGET: Final[int] = 8000
DEFAULT_BOUNDARY: Final[str] = "<!-- rule: {id} -->"
DEFAULT_SEPARATOR: Final[str] = "\n\n"

LANGUAGE_TAGS: Final[frozenset[str]] = frozenset(
    {
        "c",
        "cpp",
        "csharp",
        "css",
        "dart",
        "go",
        "html",
        "java",
        "javascript",
        "kotlin",
        "php",
        "python",
        "ruby",
        "rust",
        "scala",
        "shell",
        "sql",
        "swift",
        "typescript",
    }
)

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


class IssueCategory(str, Enum):
    LOAD = "load"
    QUERY = "query"


class IssueCode(str, Enum):
    DUPLICATE_ID = "duplicate-id"
    INVALID_PATTERN = "invalid-pattern"
    MISSING_BODY = "missing-body"
    EMPTY_CONTEXT = "empty-context"

    @property
    def category(self) -> IssueCategory:
        if self == IssueCode.EMPTY_CONTEXT:
            return IssueCategory.QUERY
        return IssueCategory.LOAD


@dataclass(frozen=True)
class Issue:
    code: IssueCode
    message: str
    rule_id: Optional[str] = None
    pattern: Optional[str] = None

    def as_dict(self) -> dict[str, Optional[str]]:
        return {
            "code": self.code.value,
            "category": self.code.category.value,
            "message": self.message,
            "rule_id": self.rule_id,
            "pattern": self.pattern,
        }

    def __str__(self) -> str:
        return self.message


class RuleResolverError(Exception):
    """Base user-facing application error."""


class RuleFileError(RuleResolverError):
    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"{message}: {path}")


class MissingConfigFileError(RuleFileError):
    def __init__(self, path: Path) -> None:
        super().__init__(path=path, message="Missing required config file")


class InvalidJsonFormatError(RuleFileError):
    def __init__(self, path: Path, detail: str) -> None:
        self.detail = detail
        super().__init__(path=path, message=f"Invalid JSON format ({detail})")


class InvalidConfigSchemaError(RuleFileError):
    def __init__(self, path: Path, detail: str) -> None:
        self.detail = detail
        super().__init__(path=path, message=f"Invalid config schema ({detail})")


class InvalidRuleFileError(RuleFileError):
    def __init__(self, path: Path, detail: str) -> None:
        self.detail = detail
        super().__init__(path=path, message=f"Invalid rule file ({detail})")


class LoadError(RuleResolverError):
    """Raised by index builds that cannot produce a trustworthy index."""

    code: IssueCode

    def __init__(self, issue: Issue) -> None:
        self.issue = issue
        super().__init__(issue.message)


class DuplicateIdError(LoadError):
    code = IssueCode.DUPLICATE_ID

    def __init__(self, rule_id: str) -> None:
        self.rule_id = rule_id
        super().__init__(
            Issue(
                code=self.code,
                message=f"Duplicate rule id: {rule_id}",
                rule_id=rule_id,
            )
        )


class InvalidPatternError(LoadError):
    code = IssueCode.INVALID_PATTERN

    def __init__(self, pattern: str, detail: str, rule_id: Optional[str] = None) -> None:
        self.pattern = pattern
        self.detail = detail
        self.rule_id = rule_id
        owner = f" in rule {rule_id}" if rule_id else ""
        super().__init__(
            Issue(
                code=self.code,
                message=f"Invalid glob pattern {pattern!r}{owner} ({detail})",
                rule_id=rule_id,
                pattern=pattern,
            )
        )


class MissingBodyError(LoadError):
    code = IssueCode.MISSING_BODY

    def __init__(self, rule_id: str) -> None:
        self.rule_id = rule_id
        super().__init__(
            Issue(
                code=self.code,
                message=f"Rule has an empty body: {rule_id}",
                rule_id=rule_id,
            )
        )

"""Core result data structures for the linter."""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Tuple

from .severity import Severity

SEVERITY_ORDER: Sequence[Severity] = (
    Severity.ERROR,
    Severity.WARNING,
    Severity.INFO,
)

ISSUE_FIELDS = ("rule", "message", "file", "line", "column", "severity")


@dataclass(frozen=True)
class Issue:
    """A single diagnostic produced by a rule.

    ``line`` and ``column`` are 1-based. Rules that cannot resolve a position
    report ``1:1``.
    """

    rule: str
    message: str
    file: str
    line: int
    column: int
    severity: Severity

    def with_severity(self, severity: Severity) -> "Issue":
        if severity is self.severity:
            return self
        return replace(self, severity=severity)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["severity"] = self.severity.value
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Issue":
        missing = [key for key in ISSUE_FIELDS if key not in data]
        if missing:
            raise ValueError(f"Issue is missing keys: {', '.join(missing)}")
        return cls(
            rule=str(data["rule"]),
            message=str(data["message"]),
            file=str(data["file"]),
            line=int(data["line"]),
            column=int(data["column"]),
            severity=Severity.parse(str(data["severity"])),
        )


@dataclass
class Summary:
    """Aggregate issue counts by severity."""

    error: int = 0
    warning: int = 0
    info: int = 0

    @classmethod
    def from_issues(cls, issues: Iterable[Issue]) -> "Summary":
        summary = cls()
        for issue in issues:
            summary.increment(issue.severity)
        return summary

    def increment(self, severity: Severity) -> None:
        attr = severity.value
        setattr(self, attr, getattr(self, attr) + 1)

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)

    def as_rows(self) -> List[Tuple[str, int]]:
        """Return severity/count pairs ordered for reporting."""

        return [(severity.value, getattr(self, severity.value)) for severity in SEVERITY_ORDER]

    @property
    def total(self) -> int:
        return sum(getattr(self, severity.value) for severity in SEVERITY_ORDER)

    @property
    def has_errors(self) -> bool:
        return self.error > 0

    def exit_code(self) -> int:
        return 1 if self.has_errors else 0


def sort_issues(issues: Iterable[Issue]) -> List[Issue]:
    """Order issues by file, then line and column.

    The sort is stable, so issues sharing a position keep the order in which
    the rules produced them.
    """

    return sorted(issues, key=lambda issue: (issue.file, issue.line, issue.column))


def group_by_file(issues: Iterable[Issue]) -> Dict[str, List[Issue]]:
    """Return issues grouped per file, files in lexicographic order."""

    grouped: Dict[str, List[Issue]] = {}
    for issue in sort_issues(issues):
        grouped.setdefault(issue.file, []).append(issue)
    return grouped

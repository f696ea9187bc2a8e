"""Rule contract shared by every component check."""

from __future__ import annotations

from typing import List, Protocol

from orlint.errors import RuleError
from orlint.parser import OrbitFile, ScriptNode, TemplateNode
from orlint.result import Issue
from orlint.severity import Severity


class Rule(Protocol):
    """Protocol implemented by all rule evaluators.

    ``check`` must not mutate the tree, perform I/O or keep state between
    calls: the linter shares one rule instance across files and threads.
    """

    name: str
    description: str
    default_severity: Severity

    def check(self, tree: OrbitFile, file_path: str) -> List[Issue]:
        """Return the issues found in ``tree``, raising ``RuleError`` if it cannot be evaluated."""


def make_issue(
    rule: Rule,
    message: str,
    file_path: str,
    line: int = 1,
    column: int = 1,
    severity: Severity | None = None,
) -> Issue:
    return Issue(
        rule=rule.name,
        message=message,
        file=file_path,
        line=line,
        column=column,
        severity=severity or rule.default_severity,
    )


def require_template(tree: OrbitFile) -> TemplateNode:
    template = getattr(tree, "template", None)
    if template is None:
        raise RuleError("Component tree has no template section")
    return template


def require_script(tree: OrbitFile) -> ScriptNode:
    script = getattr(tree, "script", None)
    if not isinstance(script, ScriptNode):
        raise RuleError("Component tree has no script section")
    return script

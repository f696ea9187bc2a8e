"""Checks on the component script: naming, props, state and methods."""

from __future__ import annotations

import re
from typing import List

from orlint.parser import OrbitFile
from orlint.result import Issue
from orlint.severity import Severity

from . import make_issue, require_script

DEFAULT_COMPONENT_PATTERN = r"^[A-Z][a-zA-Z0-9]*$"


class PublicFunctionRule:
    """Flag components that expose no callable behavior."""

    name = "public-function"
    description = "Component should have at least one public function"
    default_severity = Severity.INFO

    def check(self, tree: OrbitFile, file_path: str) -> List[Issue]:
        script = require_script(tree)
        if script.methods:
            return []
        return [
            make_issue(
                self,
                "Component has no public methods",
                file_path,
                line=script.line,
                column=script.column,
            )
        ]


class ComponentNamingRule:
    """Component names should match a naming convention (PascalCase by default)."""

    name = "component-naming"
    description = "Component names should follow naming conventions (default: PascalCase)"
    default_severity = Severity.WARNING

    def __init__(self, pattern: str = DEFAULT_COMPONENT_PATTERN) -> None:
        # re.error propagates to the caller; the linter reports it as a config error
        self._pattern = re.compile(pattern)

    @property
    def pattern(self) -> str:
        return self._pattern.pattern

    def check(self, tree: OrbitFile, file_path: str) -> List[Issue]:
        script = require_script(tree)
        name = script.component_name
        if not name or self._pattern.search(name):
            return []
        return [
            make_issue(
                self,
                f"Component name '{name}' does not follow naming convention",
                file_path,
                line=script.name_line,
                column=script.name_column,
            )
        ]


class PropTypeRule:
    name = "prop-type-required"
    description = "All component properties should have type annotations"
    default_severity = Severity.ERROR

    def check(self, tree: OrbitFile, file_path: str) -> List[Issue]:
        issues: List[Issue] = []
        for prop in require_script(tree).props:
            if not prop.type_name:
                issues.append(
                    make_issue(
                        self,
                        f"Property '{prop.name}' is missing a type annotation",
                        file_path,
                        line=prop.line,
                        column=prop.column,
                    )
                )
        return issues


class StateVariableRule:
    """Each state variable needs a type and an initial value.

    The two checks are independent, so one variable can yield two issues.
    """

    name = "state-variable-usage"
    description = "Check for proper state variable usage patterns"
    default_severity = Severity.WARNING

    def check(self, tree: OrbitFile, file_path: str) -> List[Issue]:
        issues: List[Issue] = []
        for var in require_script(tree).state:
            if not var.type_name:
                issues.append(
                    make_issue(
                        self,
                        f"State variable '{var.name}' is missing type annotation",
                        file_path,
                        line=var.line,
                        column=var.column,
                    )
                )
            if var.initial is None:
                issues.append(
                    make_issue(
                        self,
                        f"State variable '{var.name}' is missing initial value",
                        file_path,
                        line=var.line,
                        column=var.column,
                    )
                )
        return issues

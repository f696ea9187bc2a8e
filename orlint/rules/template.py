"""Checks on the markup template section."""

from __future__ import annotations

from typing import List

from orlint.parser import Element, OrbitFile
from orlint.result import Issue
from orlint.severity import Severity

from . import make_issue, require_template


class NonEmptyTemplateRule:
    """Warn when the template root element has no children.

    Templates made of a single text node or expression are not empty.
    """

    name = "non-empty-template"
    description = "Template section should not be empty"
    default_severity = Severity.WARNING

    def check(self, tree: OrbitFile, file_path: str) -> List[Issue]:
        template = require_template(tree)
        if isinstance(template, Element) and template.is_empty():
            return [
                make_issue(
                    self,
                    "Template section is empty",
                    file_path,
                    line=template.line,
                    column=template.column,
                )
            ]
        return []

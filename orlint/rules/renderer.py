"""Detect template features the target renderer cannot draw."""

from __future__ import annotations

from typing import Dict, FrozenSet, Iterator, List, Optional, Tuple

from orlint.parser import Element, OrbitFile, walk
from orlint.result import Issue
from orlint.severity import Severity

from . import make_issue, require_template

AUTO_RENDERER = "auto"
KNOWN_RENDERERS = ("auto", "skia", "webgpu")

# Marker (element tag or attribute name) -> renderers able to draw it.
RENDERER_FEATURES: Dict[str, FrozenSet[str]] = {
    "shader": frozenset({"webgpu"}),
    "compute-shader": frozenset({"webgpu"}),
    "canvas3d": frozenset({"webgpu"}),
    "mesh": frozenset({"webgpu"}),
    "gpu-particles": frozenset({"webgpu"}),
    "path-effect": frozenset({"skia"}),
    "skia-picture": frozenset({"skia"}),
}

METADATA_ATTRIBUTE = "renderer"


class RendererCompatibilityRule:
    """Report renderer-specific markup that the configured renderer lacks.

    ``auto`` lets the runtime pick a renderer per component, so nothing is
    flagged for it. With ``check_metadata`` enabled, an explicit
    ``renderer="..."`` attribute naming another renderer is flagged too.
    """

    name = "renderer-compatibility"
    description = "Check component compatibility with specific renderers"
    default_severity = Severity.ERROR

    def __init__(self, renderer: str = AUTO_RENDERER, check_metadata: bool = True) -> None:
        self.renderer = renderer.strip().lower() or AUTO_RENDERER
        self.check_metadata = check_metadata

    def check(self, tree: OrbitFile, file_path: str) -> List[Issue]:
        template = require_template(tree)
        if self.renderer == AUTO_RENDERER:
            return []

        issues: List[Issue] = []
        for element, marker, supported in self._iter_features(template):
            if self.renderer in supported:
                continue
            native = ", ".join(sorted(supported))
            issues.append(
                make_issue(
                    self,
                    f"'{marker}' requires the {native} renderer and is not supported by '{self.renderer}'",
                    file_path,
                    line=element.line,
                    column=element.column,
                )
            )

        if self.check_metadata:
            for element, declared in self._iter_declarations(template):
                issues.append(
                    make_issue(
                        self,
                        f"Component declares renderer '{declared}' but the target renderer is '{self.renderer}'",
                        file_path,
                        line=element.line,
                        column=element.column,
                    )
                )
        return issues

    def _iter_features(self, template) -> Iterator[Tuple[Element, str, FrozenSet[str]]]:
        for node in walk(template):
            if not isinstance(node, Element):
                continue
            tag = node.tag.lower()
            if tag in RENDERER_FEATURES:
                yield node, tag, RENDERER_FEATURES[tag]
            for attribute, _ in node.attributes:
                key = attribute.lower()
                if key in RENDERER_FEATURES:
                    yield node, key, RENDERER_FEATURES[key]

    def _iter_declarations(self, template) -> Iterator[Tuple[Element, str]]:
        for node in walk(template):
            if not isinstance(node, Element):
                continue
            declared: Optional[str] = node.get(METADATA_ATTRIBUTE)
            if declared is None:
                continue
            declared = declared.strip().lower()
            if declared and declared not in (AUTO_RENDERER, self.renderer):
                yield node, declared

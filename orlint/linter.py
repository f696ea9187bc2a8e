"""Run the active rule set against component files."""

from __future__ import annotations

import logging
import re
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from .config import Config
from .errors import ConfigError, RuleError
from .parser import OrbitFile, parse_orbit_file
from .result import Issue
from .rules import Rule
from .rules.component import ComponentNamingRule, PropTypeRule, PublicFunctionRule, StateVariableRule
from .rules.renderer import KNOWN_RENDERERS, RendererCompatibilityRule
from .rules.template import NonEmptyTemplateRule
from .utils import read_text_file

logger = logging.getLogger(__name__)


def build_rules(config: Config) -> List[Rule]:
    """Instantiate the full rule catalog in registration order.

    The renderer rule only exists when renderer analysis is enabled.
    """

    try:
        naming = ComponentNamingRule(config.rules.component_naming.pattern)
    except re.error as exc:
        raise ConfigError(f"'rules.component_naming.pattern' is not a valid regular expression: {exc}") from exc

    rules: List[Rule] = [
        NonEmptyTemplateRule(),
        PublicFunctionRule(),
        naming,
        PropTypeRule(),
        StateVariableRule(),
    ]
    renderer = config.renderer_analysis
    if renderer.enabled:
        if renderer.default_renderer not in KNOWN_RENDERERS:
            logger.warning("Unknown renderer '%s'; every renderer-specific feature will be reported", renderer.default_renderer)
        rules.append(RendererCompatibilityRule(renderer.default_renderer, renderer.check_renderer_metadata))
    return rules


def list_rules() -> List[Rule]:
    """Return the static catalog as seen with the default configuration."""

    return build_rules(Config())


class Linter:
    """Apply the configured rules to parsed component files."""

    def __init__(self, config: Optional[Config] = None) -> None:
        self.config = config or Config()
        self._rules: Tuple[Rule, ...] = tuple(
            rule for rule in build_rules(self.config) if self.config.is_rule_enabled(rule.name)
        )
        if self.config.analyzer.incremental:
            logger.warning("Incremental analysis is not supported; analyzing every file")
        logger.debug("Active rules: %s", ", ".join(rule.name for rule in self._rules) or "<none>")

    @property
    def rules(self) -> Tuple[Rule, ...]:
        return self._rules

    def lint(self, source: Union[str, OrbitFile], file_path: str) -> List[Issue]:
        """Lint one component given its source text or an already parsed tree.

        Issues are returned in rule registration order, each rule's own order
        preserved, after severity overrides and the minimum severity filter.
        """

        tree = source if isinstance(source, OrbitFile) else parse_orbit_file(source, file_path)
        if not self.config.analyzer.semantic_analysis:
            return []

        min_severity = self.config.min_severity
        issues: List[Issue] = []
        for rule in self._rules:
            try:
                produced = rule.check(tree, file_path)
            except RuleError as exc:
                raise RuleError(exc.message, file_path=file_path, rule=rule.name) from exc
            for issue in produced:
                issue = issue.with_severity(self.config.get_rule_severity(issue.rule, issue.severity))
                if issue.severity >= min_severity:
                    issues.append(issue)
        logger.debug("%s: %d issue(s)", file_path, len(issues))
        return issues

    def lint_file(self, path: Union[str, Path]) -> List[Issue]:
        path = Path(path)
        return self.lint(read_text_file(path), str(path))

    def lint_files(self, paths: Iterable[Union[str, Path]]) -> List[Issue]:
        """Lint many files and merge their issues.

        The first I/O, parse or rule failure aborts the whole call. In parallel
        mode files finish in any order, but each file's issues stay together
        and in order.
        """

        paths = list(paths)
        if self.config.parallel and len(paths) > 1:
            return self._lint_parallel(paths)

        issues: List[Issue] = []
        for path in paths:
            issues.extend(self.lint_file(path))
        return issues

    def _lint_parallel(self, paths: Sequence[Union[str, Path]]) -> List[Issue]:
        jobs = self.config.analyzer.jobs
        logger.debug("Linting %d files with %s workers", len(paths), jobs or "default")
        results: List[List[Issue]] = []
        with ThreadPoolExecutor(max_workers=jobs) as executor:
            futures: List[Future[List[Issue]]] = [executor.submit(self.lint_file, path) for path in paths]
            try:
                for future in as_completed(futures):
                    results.append(future.result())
            except BaseException:
                for pending in futures:
                    pending.cancel()
                raise
        return [issue for file_issues in results for issue in file_issues]


def analyze_file(file_path: Union[str, Path], config: Optional[Config] = None) -> List[Issue]:
    """Lint a single component file."""

    return Linter(config).lint_file(file_path)


def analyze_files(file_paths: Iterable[Union[str, Path]], config: Optional[Config] = None) -> List[Issue]:
    """Lint several component files with one shared rule set."""

    return Linter(config).lint_files(file_paths)

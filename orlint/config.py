"""Configuration for the linter.

Settings are read once per run from ``.orlint.toml`` (or ``.orlint.yaml`` /
``.orlint.yml``), found by walking up from the working directory::

    [analyzer]
    enabled_rules = []
    disabled_rules = ["public-function"]
    parallel = true

    [rules.component_naming]
    pattern = "^[A-Z][a-zA-Z0-9]*$"

    [rules.rule_severity]
    non-empty-template = "error"

    [reporter]
    format = "json"
    min_severity = "warning"

    [renderer_analysis]
    enabled = true
    default_renderer = "skia"

A missing file yields the defaults. A file that exists but does not validate
raises :class:`~orlint.errors.ConfigError`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional

from .errors import ConfigError
from .rules.component import DEFAULT_COMPONENT_PATTERN
from .severity import Severity
from .utils import read_toml_file, read_yaml_file

logger = logging.getLogger(__name__)

CONFIG_FILENAMES = (".orlint.toml", ".orlint.yaml", ".orlint.yml")
REPORT_FORMATS = ("text", "json", "html")

_KNOWN_KEYS = {
    "analyzer": {
        "syntax_check",
        "semantic_analysis",
        "metrics_enabled",
        "enabled_rules",
        "disabled_rules",
        "parallel",
        "incremental",
        "jobs",
    },
    "rules": {"component_naming", "rule_severity"},
    "reporter": {"format", "output_path", "min_severity"},
    "renderer_analysis": {"enabled", "default_renderer", "check_renderer_metadata"},
    "rule_severity": None,
}


@dataclass(frozen=True)
class AnalyzerSettings:
    syntax_check: bool = True
    semantic_analysis: bool = True
    metrics_enabled: bool = False
    enabled_rules: frozenset[str] = frozenset()
    disabled_rules: frozenset[str] = frozenset()
    parallel: bool = False
    incremental: bool = False
    jobs: Optional[int] = None


@dataclass(frozen=True)
class ComponentNamingConfig:
    pattern: str = DEFAULT_COMPONENT_PATTERN


@dataclass(frozen=True)
class RulesConfig:
    component_naming: ComponentNamingConfig = field(default_factory=ComponentNamingConfig)
    rule_severity: Mapping[str, Severity] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "rule_severity", MappingProxyType(dict(self.rule_severity)))


@dataclass(frozen=True)
class ReporterConfig:
    format: str = "text"
    output_path: Optional[str] = None
    min_severity: Severity = Severity.INFO


@dataclass(frozen=True)
class RendererAnalysisConfig:
    enabled: bool = True
    default_renderer: str = "auto"
    check_renderer_metadata: bool = True


@dataclass(frozen=True)
class Config:
    analyzer: AnalyzerSettings = field(default_factory=AnalyzerSettings)
    rules: RulesConfig = field(default_factory=RulesConfig)
    reporter: ReporterConfig = field(default_factory=ReporterConfig)
    renderer_analysis: RendererAnalysisConfig = field(default_factory=RendererAnalysisConfig)

    @property
    def min_severity(self) -> Severity:
        return self.reporter.min_severity

    @property
    def parallel(self) -> bool:
        return self.analyzer.parallel

    def is_rule_enabled(self, rule_name: str) -> bool:
        """Disabled rules always lose; a non-empty enabled list is exclusive."""

        if rule_name in self.analyzer.disabled_rules:
            return False
        if self.analyzer.enabled_rules:
            return rule_name in self.analyzer.enabled_rules
        return True

    def get_rule_severity(self, rule_name: str, default_severity: Severity) -> Severity:
        return self.rules.rule_severity.get(rule_name, default_severity)

    def with_overrides(
        self,
        *,
        enabled_rules: Optional[Iterable[str]] = None,
        disabled_rules: Optional[Iterable[str]] = None,
        report_format: Optional[str] = None,
        output_path: Optional[str] = None,
        min_severity: Optional[str | Severity] = None,
        parallel: Optional[bool] = None,
    ) -> "Config":
        """Return a copy with command-line overrides applied.

        ``enabled_rules`` replaces the configured list, ``disabled_rules`` is
        added to it.
        """

        analyzer = self.analyzer
        if enabled_rules is not None:
            analyzer = replace(analyzer, enabled_rules=frozenset(enabled_rules))
        if disabled_rules is not None:
            analyzer = replace(analyzer, disabled_rules=analyzer.disabled_rules | frozenset(disabled_rules))
        if parallel is not None:
            analyzer = replace(analyzer, parallel=parallel)

        reporter = self.reporter
        if report_format is not None:
            reporter = replace(reporter, format=_parse_format(report_format, "format"))
        if output_path is not None:
            reporter = replace(reporter, output_path=output_path)
        if min_severity is not None:
            reporter = replace(reporter, min_severity=_parse_severity(min_severity, "min_severity"))

        return replace(self, analyzer=analyzer, reporter=reporter)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "Config":
        """Build a validated configuration from a parsed TOML/YAML document."""

        if not isinstance(raw, Mapping):
            raise ConfigError("Configuration must be a table of sections")
        _warn_unknown(raw)

        analyzer_raw = _section(raw, "analyzer")
        jobs = analyzer_raw.get("jobs")
        if jobs is not None and (isinstance(jobs, bool) or not isinstance(jobs, int) or jobs < 1):
            raise ConfigError("'analyzer.jobs' must be a positive integer")
        analyzer = AnalyzerSettings(
            syntax_check=_bool(analyzer_raw, "syntax_check", True, "analyzer"),
            semantic_analysis=_bool(analyzer_raw, "semantic_analysis", True, "analyzer"),
            metrics_enabled=_bool(analyzer_raw, "metrics_enabled", False, "analyzer"),
            enabled_rules=frozenset(_string_list(analyzer_raw.get("enabled_rules"), "analyzer.enabled_rules")),
            disabled_rules=frozenset(_string_list(analyzer_raw.get("disabled_rules"), "analyzer.disabled_rules")),
            parallel=_bool(analyzer_raw, "parallel", False, "analyzer"),
            incremental=_bool(analyzer_raw, "incremental", False, "analyzer"),
            jobs=jobs,
        )

        rules_raw = _section(raw, "rules")
        naming_raw = _section(rules_raw, "component_naming", "rules.component_naming")
        pattern = naming_raw.get("pattern", DEFAULT_COMPONENT_PATTERN)
        if not isinstance(pattern, str) or not pattern:
            raise ConfigError("'rules.component_naming.pattern' must be a non-empty string")
        severities = _severity_map(_section(rules_raw, "rule_severity", "rules.rule_severity"), "rules.rule_severity")
        # A top-level [rule_severity] table is accepted as well and wins.
        severities.update(_severity_map(_section(raw, "rule_severity"), "rule_severity"))
        rules = RulesConfig(component_naming=ComponentNamingConfig(pattern=pattern), rule_severity=severities)

        reporter_raw = _section(raw, "reporter")
        output_path = reporter_raw.get("output_path")
        if output_path is not None and not isinstance(output_path, str):
            raise ConfigError("'reporter.output_path' must be a string")
        reporter = ReporterConfig(
            format=_parse_format(reporter_raw.get("format", "text"), "reporter.format"),
            output_path=output_path or None,
            min_severity=_parse_severity(reporter_raw.get("min_severity", Severity.INFO), "reporter.min_severity"),
        )

        renderer_raw = _section(raw, "renderer_analysis")
        default_renderer = renderer_raw.get("default_renderer", "auto")
        if not isinstance(default_renderer, str) or not default_renderer.strip():
            raise ConfigError("'renderer_analysis.default_renderer' must be a non-empty string")
        renderer_analysis = RendererAnalysisConfig(
            enabled=_bool(renderer_raw, "enabled", True, "renderer_analysis"),
            default_renderer=default_renderer.strip().lower(),
            check_renderer_metadata=_bool(renderer_raw, "check_renderer_metadata", True, "renderer_analysis"),
        )

        return cls(analyzer=analyzer, rules=rules, reporter=reporter, renderer_analysis=renderer_analysis)


def load_config(path: str | Path) -> Config:
    """Load and validate the configuration file at ``path``."""

    config_path = Path(path)
    if not config_path.is_file():
        raise ConfigError("Config file not found", file_path=str(config_path))

    if config_path.suffix == ".toml":
        raw = read_toml_file(config_path)
    else:
        raw = read_yaml_file(config_path)
    if raw is None:
        # An empty YAML document parses to None.
        raw = {}

    try:
        config = Config.from_mapping(raw)
    except ConfigError as exc:
        raise ConfigError(exc.message, file_path=str(config_path)) from exc
    logger.info("Loaded configuration from %s", config_path)
    return config


def find_config_file(start: str | Path | None = None) -> Optional[Path]:
    """Return the nearest config file in ``start`` or one of its ancestors."""

    current = Path(start) if start is not None else Path.cwd()
    current = current.resolve()
    for directory in (current, *current.parents):
        for filename in CONFIG_FILENAMES:
            candidate = directory / filename
            if candidate.is_file():
                return candidate
    return None


def find_and_load(start: str | Path | None = None) -> Config:
    """Load the nearest config file, or return defaults when there is none."""

    path = find_config_file(start)
    if path is None:
        logger.debug("No configuration file found, using defaults")
        return Config()
    return load_config(path)


# ----------------------------------------------------------------------
# Validation helpers
# ----------------------------------------------------------------------
def _warn_unknown(raw: Mapping[str, Any]) -> None:
    for section, value in raw.items():
        if section not in _KNOWN_KEYS:
            logger.warning("Ignoring unknown configuration section '%s'", section)
            continue
        known = _KNOWN_KEYS[section]
        if known is None or not isinstance(value, Mapping):
            continue
        for key in value:
            if key not in known:
                logger.warning("Ignoring unknown configuration key '%s.%s'", section, key)


def _section(raw: Mapping[str, Any], key: str, label: Optional[str] = None) -> Mapping[str, Any]:
    value = raw.get(key)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigError(f"'{label or key}' must be a table")
    return value


def _bool(raw: Mapping[str, Any], key: str, default: bool, section: str) -> bool:
    value = raw.get(key, default)
    if not isinstance(value, bool):
        raise ConfigError(f"'{section}.{key}' must be true or false")
    return value


def _string_list(value: object, label: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"'{label}' must be a list of strings")
    return [item.strip() for item in value if item.strip()]


def _severity_map(raw: Mapping[str, Any], label: str) -> dict[str, Severity]:
    return {str(rule): _parse_severity(value, f"{label}.{rule}") for rule, value in raw.items()}


def _parse_severity(value: object, label: str) -> Severity:
    if isinstance(value, Severity):
        return value
    if not isinstance(value, str):
        raise ConfigError(f"'{label}' must be a severity string")
    try:
        return Severity.parse(value)
    except ValueError as exc:
        raise ConfigError(f"'{label}': {exc}") from exc


def _parse_format(value: object, label: str) -> str:
    if not isinstance(value, str) or value.strip().lower() not in REPORT_FORMATS:
        raise ConfigError(f"'{label}' must be one of: {', '.join(REPORT_FORMATS)}")
    return value.strip().lower()

"""Static analysis for .orbit UI component files."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("orlint")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.1.0-dev"

from .config import (
    AnalyzerSettings,
    ComponentNamingConfig,
    Config,
    RendererAnalysisConfig,
    ReporterConfig,
    RulesConfig,
    find_and_load,
    load_config,
)
from .errors import AnalyzerError, AnalyzerIOError, ConfigError, ParserError, RuleError
from .linter import Linter, analyze_file, analyze_files, list_rules
from .parser import OrbitFile, parse_orbit_file
from .reporter import Reporter, ReportFormat
from .result import Issue, Summary
from .rules import Rule
from .rules.component import ComponentNamingRule, PropTypeRule, PublicFunctionRule, StateVariableRule
from .rules.renderer import RendererCompatibilityRule
from .rules.template import NonEmptyTemplateRule
from .severity import Severity

__all__ = [
    "__version__",
    "AnalyzerError",
    "AnalyzerIOError",
    "AnalyzerSettings",
    "ComponentNamingConfig",
    "ComponentNamingRule",
    "Config",
    "ConfigError",
    "Issue",
    "Linter",
    "NonEmptyTemplateRule",
    "OrbitFile",
    "ParserError",
    "PropTypeRule",
    "PublicFunctionRule",
    "RendererAnalysisConfig",
    "RendererCompatibilityRule",
    "ReportFormat",
    "Reporter",
    "ReporterConfig",
    "Rule",
    "RuleError",
    "RulesConfig",
    "Severity",
    "StateVariableRule",
    "Summary",
    "analyze_file",
    "analyze_files",
    "find_and_load",
    "list_rules",
    "load_config",
    "parse_orbit_file",
]

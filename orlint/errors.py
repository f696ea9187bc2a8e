"""Error taxonomy shared by the parser, rules, linter and reporter."""

from __future__ import annotations


class AnalyzerError(Exception):
    """Base class for every failure raised by the analyzer."""

    kind = "analyzer"

    def __init__(self, message: str, file_path: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.file_path = file_path

    def __str__(self) -> str:
        if self.file_path:
            return f"{self.file_path}: {self.message}"
        return self.message


class ParserError(AnalyzerError):
    """Source text could not be turned into a component tree."""

    kind = "parser"

    def __init__(self, message: str, file_path: str | None = None, line: int | None = None) -> None:
        super().__init__(message, file_path)
        self.line = line

    def __str__(self) -> str:
        location = self.file_path or ""
        if self.line is not None:
            location = f"{location}:{self.line}" if location else f"line {self.line}"
        if location:
            return f"{location}: {self.message}"
        return self.message


class RuleError(AnalyzerError):
    """A rule could not evaluate the tree it was given."""

    kind = "rule"

    def __init__(self, message: str, file_path: str | None = None, rule: str | None = None) -> None:
        super().__init__(message, file_path)
        self.rule = rule

    def __str__(self) -> str:
        detail = f"[{self.rule}] {self.message}" if self.rule else self.message
        if self.file_path:
            return f"{self.file_path}: {detail}"
        return detail


class ConfigError(AnalyzerError):
    """Configuration file or override is present but invalid."""

    kind = "config"


class AnalyzerIOError(AnalyzerError):
    """A component file could not be read or a report could not be written."""

    kind = "io"

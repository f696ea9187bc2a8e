"""Render lint issues as text, JSON or HTML and deliver them to a sink."""

from __future__ import annotations

import json
import logging
import sys
import textwrap
from enum import Enum
from pathlib import Path
from typing import Optional, Sequence, TextIO

import jinja2

from .errors import AnalyzerIOError
from .result import Issue, Summary, group_by_file, sort_issues

logger = logging.getLogger(__name__)

NO_ISSUES = "No issues found"
SERIALIZATION_ERROR = "Error serializing issues"


class ReportFormat(str, Enum):
    TEXT = "text"
    JSON = "json"
    HTML = "html"

    @classmethod
    def _missing_(cls, value: object) -> "ReportFormat | None":
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value == lowered:
                    return member
        return None


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


def format_issue_line(issue: Issue) -> str:
    return f"{issue.file}:{issue.line}:{issue.column}: [{issue.severity.value}] {issue.message} ({issue.rule})"


class Reporter:
    """Render issues in one output format.

    Whatever the format, files are listed in lexicographic order and each
    file's issues by line and column.
    """

    def __init__(
        self,
        fmt: ReportFormat | str = ReportFormat.TEXT,
        output_path: Optional[str | Path] = None,
        stream: Optional[TextIO] = None,
    ) -> None:
        self.format = ReportFormat(fmt)
        self.output_path = Path(output_path) if output_path else None
        self._stream = stream

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def render_issues(self, file_path: str, issues: Sequence[Issue]) -> str:
        if self.format is ReportFormat.TEXT:
            return self._render_text_file(file_path, issues)
        if self.format is ReportFormat.JSON:
            return self._render_json(issues)
        return self._render_html(issues, title=f"orlint report: {file_path}")

    def render_all_issues(self, issues: Sequence[Issue]) -> str:
        if self.format is ReportFormat.TEXT:
            return self._render_text_all(issues)
        if self.format is ReportFormat.JSON:
            return self._render_json(issues)
        return self._render_html(issues, title="orlint report")

    def report_issues(self, file_path: str, issues: Sequence[Issue]) -> None:
        self._write(self.render_issues(file_path, issues))

    def report_all_issues(self, issues: Sequence[Issue]) -> None:
        self._write(self.render_all_issues(issues))

    # ------------------------------------------------------------------
    # Text
    # ------------------------------------------------------------------
    def _render_text_file(self, file_path: str, issues: Sequence[Issue]) -> str:
        if not issues:
            return f"{file_path}: {NO_ISSUES}"
        lines = [f"{file_path}: {_plural(len(issues), 'issue')} found"]
        lines.extend(f"  {format_issue_line(issue)}" for issue in sort_issues(issues))
        return "\n".join(lines)

    def _render_text_all(self, issues: Sequence[Issue]) -> str:
        if not issues:
            return NO_ISSUES
        grouped = group_by_file(issues)
        lines = [f"Found {_plural(len(issues), 'issue')} in {_plural(len(grouped), 'file')}"]
        for file_issues in grouped.values():
            lines.extend(format_issue_line(issue) for issue in file_issues)
        return "\n".join(lines)

    # ------------------------------------------------------------------
    # JSON
    # ------------------------------------------------------------------
    def _render_json(self, issues: Sequence[Issue]) -> str:
        try:
            return json.dumps([issue.to_dict() for issue in sort_issues(issues)], indent=2)
        except (TypeError, ValueError):
            logger.exception("Unable to serialize %d issue(s)", len(issues))
            return SERIALIZATION_ERROR

    # ------------------------------------------------------------------
    # HTML
    # ------------------------------------------------------------------
    def _render_html(self, issues: Sequence[Issue], title: str) -> str:
        summary = Summary.from_issues(issues)
        return _HTML_TEMPLATE.render(
            title=title,
            summary=summary.as_rows(),
            total=summary.total,
            files=list(group_by_file(issues).items()),
            no_issues=NO_ISSUES,
        )

    # ------------------------------------------------------------------
    # Sinks
    # ------------------------------------------------------------------
    def _write(self, payload: str) -> None:
        if self.output_path is None:
            stream = self._stream or sys.stdout
            stream.write(payload + "\n")
            return
        try:
            self.output_path.parent.mkdir(parents=True, exist_ok=True)
            self.output_path.write_text(payload + "\n", encoding="utf-8")
        except OSError as exc:
            raise AnalyzerIOError(
                f"Unable to write report: {exc.strerror or exc}", file_path=str(self.output_path)
            ) from exc
        logger.info("Report written to %s", self.output_path)


_DEFAULT_HTML_TEMPLATE = textwrap.dedent("""\
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>{{ title }}</title>
  <style>
    body { font-family: system-ui, sans-serif; margin: 2rem; color: #222; }
    .summary { display: flex; gap: 1rem; margin-bottom: 1.5rem; }
    .summary .count { padding: 0.5rem 1rem; border-radius: 4px; background: #f2f2f2; }
    .file { margin-bottom: 1.5rem; }
    .file h2 { font-size: 1.1rem; font-family: monospace; }
    .issue { border-left: 4px solid #999; padding: 0.4rem 0.8rem; margin: 0.4rem 0; background: #fafafa; }
    .severity-error { border-left-color: #d32f2f; }
    .severity-warning { border-left-color: #f9a825; }
    .severity-info { border-left-color: #1976d2; }
    .location { font-family: monospace; color: #555; }
    .rule { color: #777; font-size: 0.9em; }
  </style>
</head>
<body>
  <h1>{{ title }}</h1>
  <div class="summary">
    <span class="count total">Total: {{ total }}</span>
{% for severity, count in summary %}
    <span class="count severity-{{ severity }}">{{ severity|capitalize }}: {{ count }}</span>
{% endfor %}
  </div>
{% if not files %}
  <p class="no-issues">{{ no_issues }}</p>
{% endif %}
{% for file, issues in files %}
  <section class="file">
    <h2>{{ file }}</h2>
{% for issue in issues %}
    <div class="issue severity-{{ issue.severity.value }}">
      <span class="location">{{ issue.line }}:{{ issue.column }}</span>
      <strong>[{{ issue.severity.value }}]</strong>
      <span class="message">{{ issue.message }}</span>
      <span class="rule">({{ issue.rule }})</span>
    </div>
{% endfor %}
  </section>
{% endfor %}
</body>
</html>
""")

_HTML_ENV = jinja2.Environment(autoescape=True, trim_blocks=True, lstrip_blocks=True)
_HTML_TEMPLATE = _HTML_ENV.from_string(_DEFAULT_HTML_TEMPLATE)

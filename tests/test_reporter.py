import io
import json

import pytest

from orlint import reporter as reporter_module
from orlint.reporter import NO_ISSUES, SERIALIZATION_ERROR, Reporter, ReportFormat
from orlint.result import Issue
from orlint.severity import Severity


def make_issue(file="a.orbit", line=1, column=1, severity=Severity.WARNING, message="Something is off", rule="demo"):
    return Issue(rule=rule, message=message, file=file, line=line, column=column, severity=severity)


@pytest.fixture
def unordered_issues():
    return [
        make_issue(file="b.orbit", line=5, severity=Severity.ERROR, message="late"),
        make_issue(file="a.orbit", line=2, severity=Severity.INFO, message="second"),
        make_issue(file="a.orbit", line=1, message="first"),
    ]


def test_text_report_without_issues():
    reporter = Reporter("text")

    assert reporter.render_all_issues([]) == NO_ISSUES
    assert reporter.render_issues("Button.orbit", []) == "Button.orbit: No issues found"


def test_text_report_is_sorted_by_file_then_position(unordered_issues):
    output = Reporter("text").render_all_issues(unordered_issues)

    assert output.splitlines() == [
        "Found 3 issues in 2 files",
        "a.orbit:1:1: [warning] first (demo)",
        "a.orbit:2:1: [info] second (demo)",
        "b.orbit:5:1: [error] late (demo)",
    ]


def test_text_report_for_single_file():
    issues = [make_issue(line=4, column=2), make_issue(line=1, severity=Severity.ERROR, rule="other")]

    output = Reporter("text").render_issues("a.orbit", issues)

    assert output.splitlines() == [
        "a.orbit: 2 issues found",
        "  a.orbit:1:1: [error] Something is off (other)",
        "  a.orbit:4:2: [warning] Something is off (demo)",
    ]


def test_singular_counts():
    output = Reporter("text").render_all_issues([make_issue()])

    assert output.splitlines()[0] == "Found 1 issue in 1 file"


def test_json_report_fields(unordered_issues):
    payload = json.loads(Reporter("json").render_all_issues(unordered_issues))

    assert [item["message"] for item in payload] == ["first", "second", "late"]
    assert set(payload[0]) == {"rule", "message", "file", "line", "column", "severity"}
    assert [item["severity"] for item in payload] == ["warning", "info", "error"]


def test_json_report_without_issues():
    reporter = Reporter(ReportFormat.JSON)

    assert json.loads(reporter.render_all_issues([])) == []
    assert json.loads(reporter.render_issues("a.orbit", [])) == []


def test_json_roundtrip_preserves_issues(unordered_issues):
    payload = json.loads(Reporter("json").render_all_issues(unordered_issues))

    restored = [Issue.from_dict(item) for item in payload]

    assert sorted(restored, key=lambda i: i.message) == sorted(unordered_issues, key=lambda i: i.message)


def test_json_serialization_failure_falls_back(monkeypatch, caplog):
    def broken_dumps(*args, **kwargs):
        raise TypeError("not serializable")

    monkeypatch.setattr(reporter_module.json, "dumps", broken_dumps)

    with caplog.at_level("ERROR", logger="orlint.reporter"):
        output = Reporter("json").render_all_issues([make_issue()])

    assert output == SERIALIZATION_ERROR
    assert "Unable to serialize" in caplog.text


def test_html_report_without_issues():
    output = Reporter("html").render_all_issues([])

    assert output.startswith("<!DOCTYPE html>")
    assert '<p class="no-issues">No issues found</p>' in output
    assert '<div class="issue' not in output


def test_html_report_groups_and_counts(unordered_issues):
    output = Reporter("html").render_all_issues(unordered_issues)

    assert output.count('<div class="issue') == 3
    assert output.count('<section class="file">') == 2
    assert output.index("a.orbit") < output.index("b.orbit")
    for severity in ("error", "warning", "info"):
        assert f'<div class="issue severity-{severity}">' in output
        assert f'<span class="count severity-{severity}">' in output
    assert "Total: 3" in output
    assert "no-issues" not in output.split("<body>")[1]


def test_html_report_escapes_markup():
    issue = make_issue(message="<script>alert('x')</script>", file="<b>.orbit")

    output = Reporter("html").render_all_issues([issue])

    assert "<script>" not in output
    assert "&lt;script&gt;" in output
    assert "&lt;b&gt;.orbit" in output


def test_report_format_is_case_insensitive():
    assert Reporter("JSON").format is ReportFormat.JSON
    assert ReportFormat(" Html ") is ReportFormat.HTML
    with pytest.raises(ValueError):
        ReportFormat("xml")


def test_report_goes_to_stream():
    stream = io.StringIO()

    Reporter("text", stream=stream).report_all_issues([])

    assert stream.getvalue() == "No issues found\n"


def test_report_defaults_to_stdout(capsys):
    Reporter("text").report_issues("a.orbit", [])

    assert capsys.readouterr().out == "a.orbit: No issues found\n"


def test_report_writes_output_file(tmp_path, unordered_issues):
    target = tmp_path / "reports" / "nested" / "lint.json"

    Reporter("json", output_path=target).report_all_issues(unordered_issues)

    assert target.is_file()
    assert len(json.loads(target.read_text(encoding="utf-8"))) == 3

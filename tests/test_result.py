import json

import pytest

from orlint.result import Issue, Summary, group_by_file, sort_issues
from orlint.severity import Severity


def make_issue(file="a.orbit", line=1, column=1, severity=Severity.WARNING, rule="component-naming"):
    return Issue(rule=rule, message="message", file=file, line=line, column=column, severity=severity)


def test_issue_json_round_trip():
    issues = [
        make_issue(),
        Issue(
            rule="prop-type-required",
            message="Property 'label' is missing a type annotation",
            file="src/Card.orbit",
            line=12,
            column=5,
            severity=Severity.ERROR,
        ),
    ]

    payload = json.dumps([issue.to_dict() for issue in issues])
    restored = [Issue.from_dict(item) for item in json.loads(payload)]

    assert restored == issues
    assert json.loads(payload)[1]["severity"] == "error"


def test_issue_from_dict_requires_all_fields():
    with pytest.raises(ValueError, match="missing keys: severity"):
        Issue.from_dict({"rule": "r", "message": "m", "file": "f", "line": 1, "column": 1})


def test_with_severity_returns_copy():
    issue = make_issue(severity=Severity.WARNING)

    raised = issue.with_severity(Severity.ERROR)

    assert raised.severity is Severity.ERROR
    assert issue.severity is Severity.WARNING
    assert issue.with_severity(Severity.WARNING) is issue


def test_summary_counts_and_exit_code():
    summary = Summary.from_issues(
        [make_issue(severity=Severity.ERROR), make_issue(severity=Severity.INFO), make_issue(severity=Severity.INFO)]
    )

    assert summary.as_rows() == [("error", 1), ("warning", 0), ("info", 2)]
    assert summary.total == 3
    assert summary.exit_code() == 1
    assert Summary.from_issues([make_issue(severity=Severity.WARNING)]).exit_code() == 0


def test_sort_and_group_are_deterministic():
    issues = [
        make_issue(file="b", line=5),
        make_issue(file="a", line=2),
        make_issue(file="a", line=1, column=9),
        make_issue(file="a", line=1, column=3),
    ]

    ordered = sort_issues(issues)
    grouped = group_by_file(issues)

    assert [(i.file, i.line, i.column) for i in ordered] == [("a", 1, 3), ("a", 1, 9), ("a", 2, 1), ("b", 5, 1)]
    assert list(grouped) == ["a", "b"]
    assert [i.line for i in grouped["a"]] == [1, 1, 2]

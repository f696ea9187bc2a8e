import pytest

from orlint.severity import Severity


def test_severity_ordering_follows_rank():
    assert Severity.ERROR > Severity.WARNING > Severity.INFO
    assert Severity.INFO < Severity.ERROR
    assert Severity.WARNING >= Severity.WARNING
    assert sorted([Severity.WARNING, Severity.ERROR, Severity.INFO]) == [
        Severity.INFO,
        Severity.WARNING,
        Severity.ERROR,
    ]


def test_severity_parse_is_case_insensitive():
    assert Severity.parse("error") is Severity.ERROR
    assert Severity.parse("WARNING") is Severity.WARNING
    assert Severity.parse(" Info ") is Severity.INFO
    assert Severity("Error") is Severity.ERROR


def test_severity_parse_rejects_unknown_values():
    with pytest.raises(ValueError, match="Unknown severity 'fatal'"):
        Severity.parse("fatal")


def test_severity_default_and_string_form():
    assert Severity.default() is Severity.WARNING
    assert str(Severity.ERROR) == "error"
    assert Severity.INFO.value == "info"

"""Tests for structured errors."""

import pytest

from abi_docs.errors import (
    AbiDocsError,
    ConfigError,
    ErrorCategory,
    ErrorReport,
    InterfaceContractError,
    InterfaceLoadError,
    OutOfDateError,
    UnknownResourceError,
    UnrecognizedShapeError,
    UnresolvedTypeError,
)


class TestAbiDocsError:
    def test_default_category(self):
        assert AbiDocsError("boom").category == ErrorCategory.INTERNAL

    def test_category_override(self):
        error = InterfaceLoadError("boom", category=ErrorCategory.CONFIG)
        assert error.category == ErrorCategory.CONFIG

    def test_with_context_is_fluent(self):
        error = InterfaceLoadError("bad").with_context(path="a.wit.yaml")

        assert isinstance(error, InterfaceLoadError)
        assert error.context == {"path": "a.wit.yaml"}

    def test_cause_is_chained(self):
        cause = ValueError("inner")
        error = ConfigError("outer", cause=cause)

        assert error.__cause__ is cause

    def test_to_dict(self):
        error = ConfigError("bad value", context={"key": "variant"}, cause=ValueError("x"))

        assert error.to_dict() == {
            "error_type": "ConfigError",
            "message": "bad value",
            "category": "CONFIG",
            "context": {"key": "variant"},
            "cause": "x",
        }

    def test_to_dict_omits_empty_fields(self):
        assert set(AbiDocsError("boom").to_dict()) == {"error_type", "message", "category"}

    def test_repr(self):
        assert repr(ConfigError("bad")) == "ConfigError('bad', category=CONFIG)"


class TestContractErrors:
    @pytest.mark.parametrize(
        "cls", [UnresolvedTypeError, UnknownResourceError, UnrecognizedShapeError]
    )
    def test_contract_family(self, cls):
        error = cls("broken")

        assert isinstance(error, InterfaceContractError)
        assert error.category == ErrorCategory.CONTRACT


class TestOutOfDateError:
    def test_default_message(self):
        error = OutOfDateError("api.abi.md")

        assert error.path == "api.abi.md"
        assert str(error) == "not up to date: api.abi.md"
        assert error.context == {"path": "api.abi.md"}
        assert error.category == ErrorCategory.CHECK


class TestErrorReport:
    def test_empty_report_is_falsy(self):
        assert not ErrorReport()

    def test_collects_errors(self):
        report = ErrorReport()
        report.add(OutOfDateError("a.abi.md"))
        report.add(OutOfDateError("b.abi.md"))

        assert report
        assert [e["context"]["path"] for e in report.to_list()] == ["a.abi.md", "b.abi.md"]

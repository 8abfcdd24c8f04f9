"""
Tests for call classification.
"""

import pytest

from ilm.ast_nodes import Atom, Literal, Variable, Aliases, LocalCall, RemoteCall, keyword
from ilm.classifier import (
    LOGGER_FUNCTIONS,
    CallKind,
    active_functions,
    classify,
    is_logger_import,
)
from ilm.config import CheckParams


PARAMS = CheckParams()


def test_recognized_functions():
    assert LOGGER_FUNCTIONS == {
        "alert", "critical", "debug", "emergency", "error", "info",
        "notice", "warn", "warning", "metadata", "log",
    }


def test_active_functions_subtracts_ignored():
    params = CheckParams(ignore_functions=frozenset({"debug", "not_a_logger_function"}))
    assert active_functions(params) == LOGGER_FUNCTIONS - {"debug"}


class TestClassify:

    def test_qualified_logger_call(self):
        node = RemoteCall(Aliases(("Logger",)), "info", (Literal("x"),))
        assert classify(node, False, PARAMS) is CallKind.QUALIFIED_LOGGER_CALL

    def test_qualified_call_ignores_import_flag(self):
        node = RemoteCall(Aliases(("Logger",)), "info", (Literal("x"),))
        assert classify(node, True, PARAMS) is CallKind.QUALIFIED_LOGGER_CALL

    def test_qualified_call_to_nested_alias_is_other(self):
        node = RemoteCall(Aliases(("MyApp", "Logger")), "info", (Literal("x"),))
        assert classify(node, False, PARAMS) is CallKind.OTHER

    def test_qualified_call_on_variable_is_other(self):
        node = RemoteCall(Variable("logger"), "info", (Literal("x"),))
        assert classify(node, False, PARAMS) is CallKind.OTHER

    def test_unqualified_call_needs_import(self):
        node = LocalCall("error", (Literal("x"), keyword(a=1)))
        assert classify(node, False, PARAMS) is CallKind.OTHER
        assert classify(node, True, PARAMS) is CallKind.UNQUALIFIED_LOGGER_CALL

    def test_unqualified_unknown_function_is_other(self):
        node = LocalCall("puts", (Literal("x"),))
        assert classify(node, True, PARAMS) is CallKind.OTHER

    def test_logger_import(self):
        node = LocalCall("import", (Aliases(("Logger",)),))
        assert classify(node, False, PARAMS) is CallKind.LOGGER_IMPORT

    def test_require_is_not_an_import(self):
        node = LocalCall("require", (Aliases(("Logger",)),))
        assert classify(node, False, PARAMS) is CallKind.OTHER

    def test_ignored_function_is_other(self):
        params = CheckParams(ignore_functions=frozenset({"info"}))
        node = RemoteCall(Aliases(("Logger",)), "info", (Literal("x"),))
        assert classify(node, False, params) is CallKind.OTHER

    @pytest.mark.parametrize("node", [
        LocalCall("error", None),
        RemoteCall(Aliases(("Logger",)), "error", None),
        LocalCall("import", None),
    ])
    def test_calls_without_args_are_other(self, node):
        assert classify(node, True, PARAMS) is CallKind.OTHER

    @pytest.mark.parametrize("node", [
        Atom("error"),
        Literal("Logger"),
        Variable("error"),
        Aliases(("Logger",)),
        keyword(error=1),
    ])
    def test_non_call_nodes_are_other(self, node):
        assert classify(node, True, PARAMS) is CallKind.OTHER


class TestIsLoggerImport:

    def test_single_alias(self):
        assert is_logger_import((Aliases(("Logger",)),), "Logger")

    def test_with_options(self):
        assert not is_logger_import((Aliases(("Logger",)), keyword(only=Atom("functions"))), "Logger")

    def test_other_module(self):
        assert not is_logger_import((Aliases(("Enum",)),), "Logger")

    def test_no_args(self):
        assert not is_logger_import(None, "Logger")
        assert not is_logger_import((), "Logger")

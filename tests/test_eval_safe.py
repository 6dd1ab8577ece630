"""Tests for safe expression evaluation."""

import pytest

from paramkit.parameter import Parameter
from paramkit.record import Record
from paramkit.utils import ExpressionError, eval_safe, expression_predicate


class TestEvalSafe:
    def test_arithmetic_and_builtins(self):
        assert eval_safe("max(0, value - 26)", {"value": 45}) == 19

    def test_comparison_chain(self):
        assert eval_safe("0 < value <= 10", {"value": 10}) is True
        assert eval_safe("0 < value <= 10", {"value": 11}) is False

    def test_boolean_operators(self):
        context = {"role": "admin", "group": None}
        assert eval_safe("role == 'admin' and group is None", context) is True
        assert eval_safe("role == 'user' or group is not None", context) is False

    def test_containers_and_membership(self):
        assert eval_safe("value in ['a', 'b']", {"value": "b"}) is True
        assert eval_safe("len({1, 2, 2})", {}) == 2

    def test_conditional_expression(self):
        assert eval_safe("'big' if value > 5 else 'small'", {"value": 6}) == "big"

    @pytest.mark.parametrize(
        "expression",
        [
            "value.__class__",
            "__import__('os')",
            "open('x')",
            "(lambda: 1)()",
            "unknown + 1",
            "value[0]",
        ],
    )
    def test_rejects_unsafe_expressions(self, expression):
        with pytest.raises(ExpressionError):
            eval_safe(expression, {"value": [1]})

    def test_boolean_operators_return_deciding_operand(self):
        assert eval_safe("value or 'fallback'", {"value": ""}) == "fallback"
        assert eval_safe("value and 0", {"value": 3}) == 0

    @pytest.mark.parametrize(
        "expression",
        ["abs(value=1)", "max(*value)", "{'a': 1}"],
    )
    def test_rejects_keywords_star_args_and_dicts(self, expression):
        with pytest.raises(ExpressionError):
            eval_safe(expression, {"value": [1]})

    def test_syntax_error(self):
        with pytest.raises(ExpressionError):
            eval_safe("value <", {"value": 1})

    def test_runtime_error_wrapped(self):
        with pytest.raises(ExpressionError):
            eval_safe("value / 0", {"value": 1})


class TestExpressionPredicate:
    def test_sees_value_parameter_and_record(self):
        predicate = expression_predicate("value < limit and parameter == 'size'")
        record = Record({"limit": 10})
        assert predicate(record, Parameter(name="size"), 5) is True
        assert predicate(record, Parameter(name="size"), 50) is False

    def test_sees_plain_object_attributes(self):
        class Host:
            def __init__(self):
                self.limit = 3
                self._hidden = 1

        predicate = expression_predicate("value < limit")
        assert predicate(Host(), "size", 2) is True
        with pytest.raises(ExpressionError):
            expression_predicate("_hidden == 1")(Host(), "size", 0)

    def test_without_instance(self):
        assert expression_predicate("value == 1")(None, "size", 1) is True

    def test_invalid_expression_rejected_at_build_time(self):
        with pytest.raises(ExpressionError):
            expression_predicate("value <")

    def test_record_with_non_string_keys(self):
        predicate = expression_predicate("value < 100")
        assert predicate(Record({"size": 50, 2020: "x"}), "size", 50) is True

    def test_missing_record_entry_is_none(self):
        predicate = expression_predicate("value == 'admin' and group is None")
        assert predicate(Record({}), "owner", "admin") is True
        assert predicate(Record({"group": "wheel"}), "owner", "admin") is False

    def test_host_attributes_read_only_when_named(self):
        class Host:
            limit = 3

            @property
            def broken(self):
                raise RuntimeError("not touched")

        assert expression_predicate("value < limit")(Host(), "size", 2) is True
        with pytest.raises(ExpressionError, match="not touched"):
            expression_predicate("broken")(Host(), "size", 2)

    def test_host_methods_not_exposed(self):
        class Host:
            def limit(self):
                return 3

        with pytest.raises(ExpressionError):
            expression_predicate("value < limit")(Host(), "size", 2)

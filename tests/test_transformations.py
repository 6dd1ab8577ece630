"""Tests for transformation functors."""

import pytest

from paramkit.dsl import (
    as_boolean,
    as_chain,
    as_dict,
    as_float,
    as_integer,
    as_list,
    as_string,
)
from paramkit.errors import ConfigurationError, TransformationFailure
from paramkit.parameter import Parameter
from paramkit.transformations import AsChain, Transformation


@pytest.fixture
def size():
    return Parameter(name="size")


class Doubling(Transformation):
    def _transform(self, parameter, value, instance):
        return value * instance.factor


class Host:
    factor = 2


class TestTransformationBase:
    def test_base_is_identity(self, size):
        value = object()
        assert Transformation().transform(size, value, None) is value

    def test_subclass_uses_instance(self, size):
        assert Doubling().transform(size, 21, Host()) == 42

    def test_handler_calling_convention(self, size):
        assert Doubling()(Host(), size, 4) == 8

    def test_failure_carries_parameter_only(self, size):
        with pytest.raises(TransformationFailure) as exc_info:
            Doubling().transform(size, 1, object())
        failure = exc_info.value
        assert failure.parameter == size
        assert not hasattr(failure, "instance")
        assert not hasattr(failure, "value")
        assert isinstance(failure.cause, AttributeError)
        assert failure.__cause__ is failure.cause

    @pytest.mark.parametrize(
        "error", [ValueError("v"), KeyError("k"), RuntimeError("r")]
    )
    def test_any_internal_error_is_standardized(self, size, error):
        class Exploding(Transformation):
            def _transform(self, parameter, value, instance):
                raise error

        with pytest.raises(TransformationFailure) as exc_info:
            Exploding().transform(size, 1, None)
        assert type(exc_info.value) is TransformationFailure
        assert exc_info.value.cause is error


class TestScalarConversions:
    @pytest.mark.parametrize(
        "transformation",
        [as_integer(), as_float(), as_string(), as_boolean(), as_list(), as_dict()],
    )
    def test_none_passes_through(self, size, transformation):
        assert transformation.transform(size, None, None) is None

    def test_integer(self, size):
        assert as_integer().transform(size, "12", None) == 12
        assert as_integer().transform(size, 3.9, None) == 3

    @pytest.mark.parametrize("value", ["abc", True, [1]])
    def test_integer_rejects(self, size, value):
        with pytest.raises(TransformationFailure):
            as_integer().transform(size, value, None)

    def test_float(self, size):
        assert as_float().transform(size, "1.5", None) == 1.5

    def test_string(self, size):
        assert as_string().transform(size, 10, None) == "10"

    @pytest.mark.parametrize(
        "value,expected",
        [
            (True, True),
            (False, False),
            (1, True),
            (0, False),
            ("yes", True),
            ("OFF", False),
            (" true ", True),
            ("0", False),
        ],
    )
    def test_boolean(self, size, value, expected):
        assert as_boolean().transform(size, value, None) is expected

    @pytest.mark.parametrize("value", ["maybe", 2, 1.0, []])
    def test_boolean_rejects(self, size, value):
        with pytest.raises(TransformationFailure) as exc_info:
            as_boolean().transform(size, value, None)
        assert "boolean" in str(exc_info.value.root_cause)


class TestContainerConversions:
    def test_list_wraps_scalar(self, size):
        assert as_list().transform(size, 5, None) == [5]

    def test_list_converts_tuple(self, size):
        assert as_list().transform(size, (1, 2), None) == [1, 2]

    def test_list_elements(self, size):
        assert as_list(as_integer()).transform(size, ["1", "2"], None) == [1, 2]

    def test_nested_failure_wrapped_once(self, size):
        with pytest.raises(TransformationFailure) as exc_info:
            as_list(as_integer()).transform(size, ["1", "x"], None)
        failure = exc_info.value
        assert failure.parameter == size
        assert isinstance(failure.cause, TransformationFailure)
        assert isinstance(failure.root_cause, ValueError)

    def test_dict_from_mapping(self, size):
        result = as_dict(as_string(), as_integer()).transform(size, {1: "2"}, None)
        assert result == {"1": 2}

    def test_dict_from_pairs(self, size):
        assert as_dict().transform(size, [("a", 1), ("b", 2)], None) == {"a": 1, "b": 2}

    def test_dict_rejects_scalar(self, size):
        with pytest.raises(TransformationFailure):
            as_dict().transform(size, 5, None)


class TestChain:
    def test_applies_in_order(self, size):
        chain = as_chain(as_float(), as_integer(), as_string())
        assert chain.transform(size, "2.7", None) == "2"

    def test_plain_callables(self, size):
        chain = as_chain(lambda i, p, v: v + 1, lambda i, p, v: v * 10)
        assert chain.transform(size, 1, None) == 20

    def test_failure_in_step(self, size):
        with pytest.raises(TransformationFailure) as exc_info:
            as_chain(as_string(), as_integer()).transform(size, "x", None)
        assert exc_info.value.parameter == size

    def test_non_callable_step_rejected(self):
        with pytest.raises(ConfigurationError):
            AsChain(("integer",))

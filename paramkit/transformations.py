"""Transformation functors.

A transformation converts a candidate value into the value actually stored
for a parameter. ``transform(parameter, value, instance)`` runs the
variant's conversion and translates any failure into TransformationFailure,
which carries the parameter only.

All concrete transformations pass None through unchanged.
"""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from .config import get_config
from .errors import ConfigurationError, TransformationFailure
from .parameter import as_parameter, parameter_name


logger = logging.getLogger(__name__)


class Transformation:
    """Base class for all transformations.

    The base conversion is the identity; subclasses override _transform.
    """

    def transform(self, parameter: Any, value: Any, instance: Any = None) -> Any:
        """Transform value for parameter of instance.

        Raises:
            TransformationFailure: If the conversion fails for any reason.
        """
        parameter = as_parameter(parameter)
        try:
            return self._transform(parameter, value, instance)
        except Exception as exc:
            if get_config().log_failures:
                logger.debug(
                    "%s failed for parameter %s: %s",
                    type(self).__name__,
                    parameter_name(parameter),
                    exc,
                )
            raise TransformationFailure(parameter, cause=exc) from exc

    def __call__(self, instance: Any, parameter: Any, value: Any) -> Any:
        return self.transform(parameter, value, instance)

    def _transform(self, parameter: Any, value: Any, instance: Any) -> Any:
        return value


def _apply(
    transformation: Callable | None, instance: Any, parameter: Any, value: Any
) -> Any:
    if transformation is None:
        return value
    return transformation(instance, parameter, value)


@dataclass(frozen=True)
class AsInteger(Transformation):
    """Convert to int."""

    def _transform(self, parameter, value, instance):
        if value is None:
            return None
        if isinstance(value, bool):
            raise TypeError(f"{value!r} is a boolean, not an integer")
        return int(value)


@dataclass(frozen=True)
class AsFloat(Transformation):
    """Convert to float."""

    def _transform(self, parameter, value, instance):
        if value is None:
            return None
        return float(value)


@dataclass(frozen=True)
class AsString(Transformation):
    """Convert to str."""

    def _transform(self, parameter, value, instance):
        if value is None:
            return None
        return str(value)


_TRUE_TOKENS = {"true", "yes", "on", "1"}
_FALSE_TOKENS = {"false", "no", "off", "0"}


@dataclass(frozen=True)
class AsBoolean(Transformation):
    """Convert to bool.

    Accepts bools, the integers 0 and 1, and the strings
    true/false/yes/no/on/off/1/0 in any case.
    """

    def _transform(self, parameter, value, instance):
        if value is None or isinstance(value, bool):
            return value
        if isinstance(value, int) and value in (0, 1):
            return bool(value)
        if isinstance(value, str):
            token = value.strip().lower()
            if token in _TRUE_TOKENS:
                return True
            if token in _FALSE_TOKENS:
                return False
        raise ValueError(f"{value!r} can't be interpreted as a boolean")


@dataclass(frozen=True)
class AsList(Transformation):
    """Convert to list, optionally transforming every element.

    Lists, tuples and sets are converted; any other value becomes a
    one-element list.
    """

    element: Callable | None = None

    def _transform(self, parameter, value, instance):
        if value is None:
            return None
        if isinstance(value, (list, tuple, set, frozenset)):
            items = list(value)
        else:
            items = [value]
        return [_apply(self.element, instance, parameter, item) for item in items]


@dataclass(frozen=True)
class AsDict(Transformation):
    """Convert to dict, optionally transforming keys and values.

    Accepts a mapping or an iterable of key/value pairs.
    """

    key: Callable | None = None
    value: Callable | None = None

    def _transform(self, parameter, value, instance):
        if value is None:
            return None
        pairs = value.items() if isinstance(value, Mapping) else value
        result = {}
        for k, v in pairs:
            result[_apply(self.key, instance, parameter, k)] = _apply(
                self.value, instance, parameter, v
            )
        return result


@dataclass(frozen=True)
class AsChain(Transformation):
    """Apply transformations in order, feeding each output into the next."""

    transformations: tuple[Callable, ...]

    def __post_init__(self):
        steps = tuple(self.transformations)
        for step in steps:
            if not callable(step):
                raise ConfigurationError(f"chain step must be callable, got {step!r}")
        object.__setattr__(self, "transformations", steps)

    def _transform(self, parameter, value, instance):
        for step in self.transformations:
            value = step(instance, parameter, value)
        return value

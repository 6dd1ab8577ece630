"""Constraint functors.

A constraint checks a candidate value for a parameter of a host instance
and raises if the value is not acceptable. Every constraint exposes one
operation, ``check(parameter, value, instance)``, which runs the variant's
own logic and translates any failure into ConstraintViolation.

Constraints are also callable with the handler calling convention
``constraint(instance, parameter, value)`` so they can be used wherever a
user handler is expected (AllOf members, DependsOnValue handlers).

User-supplied predicates and handlers always receive the instance
explicitly: ``(instance, parameter, value) -> result``.

Example:
    from paramkit.dsl import all_of, not_nil, satisfies

    size = all_of(not_nil(), satisfies("moderate", lambda i, p, v: v < 100))
    size.check("size", 50, host)
    size.check("size", 200, host)  # raises ConstraintViolation
"""

import inspect
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Any

from .config import get_config
from .errors import ConfigurationError, ConstraintViolation
from .parameter import as_parameter, parameter_name


logger = logging.getLogger(__name__)


Handler = Callable[[Any, Any, Any], Any]


class Constraint(ABC):
    """Base class for all constraints."""

    def check(self, parameter: Any, value: Any, instance: Any = None) -> None:
        """Check value for parameter of instance.

        Raises:
            ConstraintViolation: If the value is rejected for any reason.
        """
        parameter = as_parameter(parameter)
        try:
            self._check(parameter, value, instance)
        except Exception as exc:
            if get_config().log_failures:
                logger.debug(
                    "%s rejected %s value for parameter %s: %s",
                    type(self).__name__,
                    type(value).__name__,
                    parameter_name(parameter),
                    exc,
                )
            raise ConstraintViolation(parameter, instance, value, cause=exc) from exc

    def __call__(self, instance: Any, parameter: Any, value: Any) -> None:
        self.check(parameter, value, instance)

    @abstractmethod
    def _check(self, parameter: Any, value: Any, instance: Any) -> None:
        """Variant-specific check; raise any exception to reject the value."""


def _require_callable(obj: Any, what: str) -> None:
    if not callable(obj):
        raise ConfigurationError(f"{what} must be callable, got {obj!r}")


def _flatten(items: Iterable[Any]):
    for item in items:
        if isinstance(item, (list, tuple, set, frozenset)):
            yield from _flatten(item)
        else:
            yield item


def _resolve(instance: Any, name: str) -> Any:
    """Read a named parameter from instance, calling accessor methods."""
    attr = getattr(instance, name)
    if inspect.ismethod(attr):
        return attr()
    return attr


# =============================================================================
# Variants
# =============================================================================


@dataclass(frozen=True)
class NotNil(Constraint):
    """Value must be present.

    Stateless; NotNil() always returns the shared NOT_NIL instance.
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def _check(self, parameter, value, instance):
        if value is None:
            raise ValueError("required but was not found")


NOT_NIL = NotNil()


@dataclass(frozen=True)
class Enum(Constraint):
    """Value must be one of the allowed values.

    Nested lists, tuples and sets in ``values`` are flattened. Membership is
    decided by equality. An absent value passes.
    """

    values: tuple[Any, ...]

    def __post_init__(self):
        unique: list[Any] = []
        for item in _flatten([self.values]):
            if item not in unique:
                unique.append(item)
        object.__setattr__(self, "values", tuple(unique))

    def __contains__(self, value: Any) -> bool:
        return value in self.values

    def _check(self, parameter, value, instance):
        if value is None or value in self.values:
            return
        raise ValueError(
            f"Value {value!r} is not in the set of allowed values {list(self.values)!r}"
        )


@dataclass(frozen=True)
class DependsOnValue(Constraint):
    """Switch-like check selected by the value itself.

    ``selector`` maps trigger values to handlers. A value that is not a key
    passes; otherwise its handler is called as
    ``handler(instance, parameter, value)`` and is expected to raise if its
    own condition is violated.
    """

    selector: Mapping[Any, Handler]

    def __post_init__(self):
        for key, handler in self.selector.items():
            _require_callable(handler, f"handler for {key!r}")
        object.__setattr__(self, "selector", MappingProxyType(dict(self.selector)))

    def _check(self, parameter, value, instance):
        try:
            handler = self.selector[value]
        except (KeyError, TypeError):
            return
        handler(instance, parameter, value)


def _is_present(instance: Any, parameter: Any, value: Any) -> bool:
    return value is not None


# Sentinel for when() arguments, since None is a valid equality target
_UNSET = object()


def _equals(expected: Any) -> Handler:
    def condition(instance: Any, parameter: Any, value: Any) -> bool:
        return value == expected

    return condition


@dataclass(frozen=True)
class Requires(Constraint):
    """Other parameters must be present when the condition holds.

    The default condition is "value is not None". Use ``when()`` to get a
    copy with a different condition:

        requires("group").when("admin")
        requires("group").when(equals=dict)
        requires("group").when(predicate=lambda instance, parameter, value: value)
    """

    dependencies: tuple[str, ...]
    condition: Handler | None = None

    def __post_init__(self):
        object.__setattr__(self, "dependencies", tuple(self.dependencies))
        if self.condition is not None:
            _require_callable(self.condition, "Requires condition")

    def when(
        self,
        test: Any = _UNSET,
        *,
        equals: Any = _UNSET,
        predicate: Handler | None = None,
    ) -> "Requires":
        """Return a copy triggered by a condition.

        Exactly one form must be given:

        - ``equals=x`` fires when the value equals ``x``, even if ``x`` is
          callable (a class, say)
        - ``predicate=f`` fires when ``f(instance, parameter, value)`` is
          truthy
        - a positional ``test`` is a predicate when callable and an equality
          literal otherwise, so callable literals need ``equals=``

        Can only be applied once.
        """
        given = [
            form
            for form, arg in (("test", test), ("equals", equals))
            if arg is not _UNSET
        ]
        if predicate is not None:
            given.append("predicate")
        if len(given) != 1:
            raise ConfigurationError(
                f"when() takes exactly one of test, equals or predicate, got {given}"
            )
        if self.condition is not None:
            raise ConfigurationError(
                f"condition for requires{self.dependencies!r} is already set"
            )

        if predicate is not None:
            _require_callable(predicate, "when predicate")
            condition = predicate
        elif equals is not _UNSET:
            condition = _equals(equals)
        else:
            condition = test if callable(test) else _equals(test)
        return replace(self, condition=condition)

    def _check(self, parameter, value, instance):
        condition = self.condition or _is_present
        if not condition(instance, parameter, value):
            return

        for name in self.dependencies:
            if _resolve(instance, name) is None:
                raise ValueError(
                    f"{name} is required when {parameter_name(parameter)} value "
                    f"is set to {value!r}"
                )


@dataclass(frozen=True)
class SatisfiesCondition(Constraint):
    """Value must satisfy a described condition.

    An absent value passes without evaluating the condition.
    """

    description: str
    condition: Handler

    def __post_init__(self):
        _require_callable(self.condition, "SatisfiesCondition condition")

    def _check(self, parameter, value, instance):
        if value is None or self.condition(instance, parameter, value):
            return
        raise ValueError(
            f"{value!r} doesn't satisfy the condition {self.description} "
            f"for parameter {parameter_name(parameter)}"
        )


@dataclass(frozen=True)
class AllOf(Constraint):
    """Every member must accept the value.

    Members are constraints or plain handlers, invoked in order. Evaluation
    stops at the first failure.
    """

    constraints: tuple[Constraint | Handler, ...]

    def __post_init__(self):
        members = tuple(self.constraints)
        for member in members:
            _require_callable(member, "AllOf member")
        object.__setattr__(self, "constraints", members)

    def _check(self, parameter, value, instance):
        for member in self.constraints:
            member(instance, parameter, value)

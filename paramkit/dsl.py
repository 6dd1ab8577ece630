"""Factory functions for declaring constraints and transformations.

These are the vocabulary used at parameter declaration sites:

    from paramkit.dsl import enum, requires, all_of, not_nil

    policy = {
        "kind": enum("small", "large"),
        "owner": requires("group").when("admin"),
        "size": all_of(not_nil(), satisfies("moderate", lambda i, p, v: v < 100)),
    }

Host classes can also inherit Declarations and use the same factories as
class-level names.
"""

from collections.abc import Callable, Mapping
from typing import Any

from .constraints import (
    NOT_NIL,
    AllOf,
    Constraint,
    DependsOnValue,
    Enum,
    NotNil,
    Requires,
    SatisfiesCondition,
)
from .transformations import (
    AsBoolean,
    AsChain,
    AsDict,
    AsFloat,
    AsInteger,
    AsList,
    AsString,
)


# =============================================================================
# Constraints
# =============================================================================


def not_nil() -> NotNil:
    """Parameter shouldn't be None."""
    return NOT_NIL


def enum(*items: Any) -> Enum:
    """Parameter value should be one of items (nested lists are flattened)."""
    return Enum(items)


def all_of(*constraints: Constraint | Callable) -> AllOf:
    """Parameter value should satisfy all constraints, checked in order."""
    return AllOf(constraints)


def requires(*dependencies: str) -> Requires:
    """Named parameters must be present when the value is set."""
    return Requires(dependencies)


def depends_on_value(selector: Mapping[Any, Callable]) -> DependsOnValue:
    """Run the handler selected by the value."""
    return DependsOnValue(selector)


def satisfies(description: str, condition: Callable) -> SatisfiesCondition:
    """Parameter value should satisfy the described condition."""
    return SatisfiesCondition(description, condition)


# =============================================================================
# Transformations
# =============================================================================


def as_integer() -> AsInteger:
    """Convert the value to int."""
    return AsInteger()


def as_float() -> AsFloat:
    """Convert the value to float."""
    return AsFloat()


def as_string() -> AsString:
    """Convert the value to str."""
    return AsString()


def as_boolean() -> AsBoolean:
    """Convert the value to bool from common true/false spellings."""
    return AsBoolean()


def as_list(element: Callable | None = None) -> AsList:
    """Convert the value to a list, optionally transforming each element."""
    return AsList(element)


def as_dict(key: Callable | None = None, value: Callable | None = None) -> AsDict:
    """Convert the value to a dict, optionally transforming keys and values."""
    return AsDict(key, value)


def as_chain(*transformations: Callable) -> AsChain:
    """Apply transformations in order."""
    return AsChain(transformations)


FACTORIES: dict[str, Callable] = {
    "not_nil": not_nil,
    "enum": enum,
    "all_of": all_of,
    "requires": requires,
    "depends_on_value": depends_on_value,
    "satisfies": satisfies,
    "as_integer": as_integer,
    "as_float": as_float,
    "as_string": as_string,
    "as_boolean": as_boolean,
    "as_list": as_list,
    "as_dict": as_dict,
    "as_chain": as_chain,
}


class Declarations:
    """Mixin exposing every factory as a class-level name.

    Example:
        class Piece(Declarations):
            size = Declarations.all_of(
                Declarations.not_nil(),
                Declarations.satisfies("moderate", lambda i, p, v: v < 100),
            )
    """

    not_nil = staticmethod(not_nil)
    enum = staticmethod(enum)
    all_of = staticmethod(all_of)
    requires = staticmethod(requires)
    depends_on_value = staticmethod(depends_on_value)
    satisfies = staticmethod(satisfies)
    as_integer = staticmethod(as_integer)
    as_float = staticmethod(as_float)
    as_string = staticmethod(as_string)
    as_boolean = staticmethod(as_boolean)
    as_list = staticmethod(as_list)
    as_dict = staticmethod(as_dict)
    as_chain = staticmethod(as_chain)

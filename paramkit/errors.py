"""Error taxonomy for paramkit.

Functors never let their internal exceptions escape. Every failure raised
while checking or transforming a value is translated at the invocation
boundary into one of two shapes:

- ConstraintViolation: carries parameter, instance and value
- TransformationFailure: carries the parameter only

The original exception is kept as ``cause`` (and chained via ``__cause__``).
"""

from typing import Any

from .config import get_config
from .parameter import parameter_name as _name_of


class ParametrizedError(Exception):
    """Base class for all paramkit errors."""

    pass


class ConfigurationError(ParametrizedError, ValueError):
    """Raised when a functor is configured incorrectly."""

    pass


class PolicyError(ParametrizedError):
    """Raised when a policy document is malformed."""

    pass


def _root_cause(error: BaseException | None) -> BaseException | None:
    """Follow nested standardized errors down to the innermost cause."""
    current = error
    while isinstance(current, (ConstraintViolation, TransformationFailure)):
        if current.cause is None:
            return current
        current = current.cause
    return current


class ConstraintViolation(ParametrizedError):
    """Raised when a value fails a constraint.

    Attributes:
        parameter: Parameter the value was checked for
        instance: Host object owning the parameter
        value: The rejected value
        cause: The exception raised by the constraint's own logic
    """

    def __init__(
        self,
        parameter: Any,
        instance: Any,
        value: Any,
        cause: BaseException | None = None,
    ):
        self.parameter = parameter
        self.instance = instance
        self.value = value
        self.cause = cause
        super().__init__(self._build_message())

    @property
    def parameter_name(self) -> str:
        return _name_of(self.parameter)

    @property
    def root_cause(self) -> BaseException | None:
        return _root_cause(self)

    def _build_message(self) -> str:
        message = (
            f"Value {self.value!r} is invalid for parameter {self.parameter_name}"
        )
        root = self.root_cause
        if root is not None and root is not self and get_config().include_cause:
            message += f": {root}"
        return message


class TransformationFailure(ParametrizedError):
    """Raised when a value can't be transformed.

    Only the parameter is retained; instance and value are not part of
    the error.
    """

    def __init__(self, parameter: Any, cause: BaseException | None = None):
        self.parameter = parameter
        self.cause = cause
        super().__init__(self._build_message())

    @property
    def parameter_name(self) -> str:
        return _name_of(self.parameter)

    @property
    def root_cause(self) -> BaseException | None:
        return _root_cause(self)

    def _build_message(self) -> str:
        message = f"Failed to transform value for parameter {self.parameter_name}"
        root = self.root_cause
        if root is not None and root is not self and get_config().include_cause:
            message += f": {root}"
        return message

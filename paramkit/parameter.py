"""Parameter identity passed to every functor invocation."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Parameter(BaseModel):
    """Identity of a declared attribute.

    Functors only read ``name``; it is used in error messages and is the
    key for dependency lookups on the host instance.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, description="Attribute name on the host")
    description: str | None = None

    def __str__(self) -> str:
        return self.name


def as_parameter(parameter: Any) -> Any:
    """Coerce a bare string into a Parameter; pass anything else through."""
    if isinstance(parameter, str):
        return Parameter(name=parameter)
    return parameter


def parameter_name(parameter: Any) -> str:
    """Name of a Parameter, or of any object exposing ``name``."""
    return str(getattr(parameter, "name", parameter))

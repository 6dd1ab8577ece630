"""paramkit: composable parameter validation and transformation.

Constraints reject values, transformations convert them. Both are frozen
functor objects built with the factories in ``paramkit.dsl`` and invoked
with the parameter identity, the candidate value and the owning instance.
"""

__version__ = "0.1.0"

from .config import ParamkitConfig, configure, get_config, reset_config
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
from .dsl import (
    Declarations,
    all_of,
    as_boolean,
    as_chain,
    as_dict,
    as_float,
    as_integer,
    as_list,
    as_string,
    depends_on_value,
    enum,
    not_nil,
    requires,
    satisfies,
)
from .errors import (
    ConfigurationError,
    ConstraintViolation,
    ParametrizedError,
    PolicyError,
    TransformationFailure,
)
from .parameter import Parameter
from .record import Record, record_get, record_values, record_with
from .transformations import (
    AsBoolean,
    AsChain,
    AsDict,
    AsFloat,
    AsInteger,
    AsList,
    AsString,
    Transformation,
)

__all__ = [
    "__version__",
    # Config
    "ParamkitConfig",
    "configure",
    "get_config",
    "reset_config",
    # Constraints
    "Constraint",
    "NotNil",
    "NOT_NIL",
    "Enum",
    "DependsOnValue",
    "Requires",
    "SatisfiesCondition",
    "AllOf",
    # Transformations
    "Transformation",
    "AsInteger",
    "AsFloat",
    "AsString",
    "AsBoolean",
    "AsList",
    "AsDict",
    "AsChain",
    # Factories
    "Declarations",
    "not_nil",
    "enum",
    "all_of",
    "requires",
    "depends_on_value",
    "satisfies",
    "as_integer",
    "as_float",
    "as_string",
    "as_boolean",
    "as_list",
    "as_dict",
    "as_chain",
    # Errors
    "ParametrizedError",
    "ConstraintViolation",
    "TransformationFailure",
    "ConfigurationError",
    "PolicyError",
    # Identity and hosts
    "Parameter",
    "Record",
    "record_get",
    "record_with",
    "record_values",
]

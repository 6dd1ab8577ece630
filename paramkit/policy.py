"""Declarative policy documents.

A policy is a YAML document declaring, per parameter, an optional chain of
transformations and an optional constraint tree. Policies are validated
with pydantic and compiled into functors once, at load time.

Example:
    parameters:
      size:
        transform: integer
        constraint:
          all_of:
            - not_nil
            - satisfies: {description: moderate, expression: "value < 100"}
      owner:
        constraint:
          requires: [group]
          if: admin

Evaluation runs every transformation first, then checks every constraint
against the transformed values, so dependency lookups see converted
values.
"""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, PrivateAttr, ValidationError, model_validator

from .constraints import Constraint
from .dsl import (
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
    PolicyError,
    TransformationFailure,
)
from .parameter import Parameter
from .record import Record, record_get, record_values, record_with
from .transformations import Transformation
from .utils.eval_safe import ExpressionError, expression_predicate


logger = logging.getLogger(__name__)


TRANSFORMS: dict[str, Callable[[], Transformation]] = {
    "integer": as_integer,
    "float": as_float,
    "string": as_string,
    "boolean": as_boolean,
    "list": as_list,
    "dict": as_dict,
}

CONSTRAINT_KEYS = (
    "not_nil",
    "enum",
    "all_of",
    "requires",
    "satisfies",
    "depends_on_value",
)


# =============================================================================
# Node compilation
# =============================================================================


def compile_transform(node: str | list[str] | None) -> Transformation | None:
    """Compile a transform name or list of names into a transformation."""
    if node is None:
        return None
    names = [node] if isinstance(node, str) else list(node)
    steps = []
    for name in names:
        factory = TRANSFORMS.get(name)
        if factory is None:
            raise PolicyError(
                f"Unknown transform {name!r}; expected one of {sorted(TRANSFORMS)}"
            )
        steps.append(factory())
    if not steps:
        return None
    if len(steps) == 1:
        return steps[0]
    return as_chain(*steps)


def _compile_requires(node: Mapping[str, Any]) -> Constraint:
    deps = node["requires"]
    names = [deps] if isinstance(deps, str) else list(deps)
    constraint = requires(*names)
    if "if" in node and "if_expression" in node:
        raise PolicyError("requires accepts either 'if' or 'if_expression', not both")
    if "if" in node:
        constraint = constraint.when(equals=node["if"])
    elif "if_expression" in node:
        constraint = constraint.when(
            predicate=expression_predicate(node["if_expression"])
        )
    return constraint


def _compile_satisfies(node: Any) -> Constraint:
    if isinstance(node, str):
        return satisfies(node, expression_predicate(node))
    if not isinstance(node, Mapping) or "expression" not in node:
        raise PolicyError("satisfies needs an expression")
    expression = node["expression"]
    description = node.get("description", expression)
    return satisfies(description, expression_predicate(expression))


def compile_constraint(node: Any) -> Constraint | None:
    """Compile a constraint node into a constraint.

    Raises:
        PolicyError: If the node is malformed.
    """
    if node is None:
        return None
    if node == "not_nil":
        return not_nil()
    if isinstance(node, list):
        return all_of(*(compile_constraint(child) for child in node))
    if not isinstance(node, Mapping):
        raise PolicyError(f"Unsupported constraint node: {node!r}")

    keys = [key for key in CONSTRAINT_KEYS if key in node]
    if len(keys) != 1:
        raise PolicyError(
            f"Constraint node must have exactly one of {list(CONSTRAINT_KEYS)}, "
            f"got {sorted(node)}"
        )
    kind = keys[0]

    try:
        if kind == "not_nil":
            return not_nil()
        if kind == "enum":
            return enum(node["enum"])
        if kind == "all_of":
            return all_of(*(compile_constraint(child) for child in node["all_of"]))
        if kind == "requires":
            return _compile_requires(node)
        if kind == "satisfies":
            return _compile_satisfies(node["satisfies"])
        selector = node["depends_on_value"]
        if not isinstance(selector, Mapping):
            raise PolicyError("depends_on_value needs a mapping")
        return depends_on_value(
            {key: compile_constraint(child) for key, child in selector.items()}
        )
    except (ExpressionError, ConfigurationError, TypeError) as e:
        raise PolicyError(f"Invalid {kind} constraint: {e}") from e


# =============================================================================
# Models
# =============================================================================


class ParameterPolicy(BaseModel):
    """Declaration of a single parameter."""

    description: str | None = None
    transform: str | list[str] | None = None
    constraint: Any = None


@dataclass(frozen=True)
class CompiledParameter:
    parameter: Parameter
    transformation: Transformation | None
    constraint: Constraint | None


class PolicyIssue(BaseModel):
    """A parameter that failed evaluation."""

    parameter: str
    kind: Literal["constraint", "transformation"]
    message: str


class PolicyReport(BaseModel):
    """Result of evaluating values against a policy."""

    values: dict[Any, Any] = Field(default_factory=dict)
    issues: list[PolicyIssue] = Field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.issues


class Policy(BaseModel):
    """A set of parameter declarations compiled into functors."""

    parameters: dict[str, ParameterPolicy] = Field(default_factory=dict)

    _compiled: list[CompiledParameter] = PrivateAttr(default_factory=list)

    @model_validator(mode="after")
    def compile_functors(self) -> "Policy":
        compiled = []
        for name, decl in self.parameters.items():
            try:
                compiled.append(
                    CompiledParameter(
                        parameter=Parameter(name=name, description=decl.description),
                        transformation=compile_transform(decl.transform),
                        constraint=compile_constraint(decl.constraint),
                    )
                )
            except PolicyError as e:
                # ValueError so pydantic reports it as a validation error
                raise ValueError(f"parameters.{name}: {e}") from e
        self._compiled = compiled
        return self

    @property
    def compiled(self) -> list[CompiledParameter]:
        return list(self._compiled)

    @classmethod
    def from_dict(cls, data: Any) -> "Policy":
        """Build a policy from parsed YAML/JSON data.

        Raises:
            PolicyError: If the document is malformed.
        """
        if not isinstance(data, Mapping):
            raise PolicyError("Policy document must be a mapping")
        try:
            return cls.model_validate(dict(data))
        except ValidationError as e:
            raise PolicyError(str(e)) from e

    def evaluate(self, values: Mapping[str, Any]) -> PolicyReport:
        """Transform then check values, collecting one issue per failing parameter."""
        record = Record(values)
        issues: list[PolicyIssue] = []
        failed: set[str] = set()

        for entry in self._compiled:
            if entry.transformation is None:
                continue
            name = entry.parameter.name
            try:
                converted = entry.transformation.transform(
                    entry.parameter, record_get(record, name), record
                )
            except TransformationFailure as e:
                issues.append(
                    PolicyIssue(parameter=name, kind="transformation", message=str(e))
                )
                failed.add(name)
                continue
            record = record_with(record, name, converted)

        for entry in self._compiled:
            name = entry.parameter.name
            if entry.constraint is None or name in failed:
                continue
            try:
                entry.constraint.check(
                    entry.parameter, record_get(record, name), record
                )
            except ConstraintViolation as e:
                issues.append(
                    PolicyIssue(parameter=name, kind="constraint", message=str(e))
                )

        logger.info(
            "Evaluated %d parameters: %d issue(s)", len(self._compiled), len(issues)
        )
        return PolicyReport(values=record_values(record), issues=issues)


# =============================================================================
# YAML I/O
# =============================================================================


def _read_yaml(path: Path) -> Any:
    try:
        with open(path) as f:
            return yaml.safe_load(f)
    except OSError as e:
        raise PolicyError(f"Can't read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise PolicyError(f"Invalid YAML in {path}: {e}") from e


def load_policy(path: Path | str) -> Policy:
    """Load a policy from a YAML file.

    Raises:
        PolicyError: If the file can't be read or is malformed.
    """
    return Policy.from_dict(_read_yaml(Path(path)))


def load_values(path: Path | str) -> dict[str, Any]:
    """Load a mapping of parameter values from a YAML or JSON file.

    Raises:
        PolicyError: If the file can't be read or isn't a mapping.
    """
    data = _read_yaml(Path(path))
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise PolicyError(f"Values in {path} must be a mapping")
    return dict(data)

"""Pure utility functions for paramkit.

These have no dependencies on paramkit functors and can be imported from
anywhere without circular import risk.

Modules:
- eval_safe: Safe expression evaluation for declarative predicates
"""

from .eval_safe import (
    eval_safe,
    parse_expression,
    expression_predicate,
    ExpressionError,
    ExpressionPredicate,
    SAFE_BUILTINS,
)

__all__ = [
    "eval_safe",
    "parse_expression",
    "expression_predicate",
    "ExpressionError",
    "ExpressionPredicate",
    "SAFE_BUILTINS",
]

"""Safe expression evaluation for declarative predicates.

Provides a restricted AST evaluator that only allows safe operations,
preventing attribute access, imports, and other dangerous operations.
Policy documents use it to express conditions such as ``value < 100`` or
``value == 'admin' and group is not None``.
"""

import ast
import inspect
import operator
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

# Safe builtins allowed in expression evaluation
SAFE_BUILTINS = {
    "True": True,
    "False": False,
    "None": None,
    "abs": abs,
    "min": min,
    "max": max,
    "round": round,
    "int": int,
    "float": float,
    "str": str,
    "len": len,
    "sum": sum,
    "all": all,
    "any": any,
    "bool": bool,
}


class ExpressionError(Exception):
    """Raised when an expression can't be parsed or evaluated."""

    pass


_SAFE_BIN_OPS: dict[type[ast.operator], Any] = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.FloorDiv: operator.floordiv,
    ast.Mod: operator.mod,
    ast.Pow: operator.pow,
}
_SAFE_UNARY_OPS: dict[type[ast.unaryop], Any] = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
    ast.Not: operator.not_,
}
_SAFE_CMP_OPS: dict[type[ast.cmpop], Any] = {
    ast.Eq: operator.eq,
    ast.NotEq: operator.ne,
    ast.Lt: operator.lt,
    ast.LtE: operator.le,
    ast.Gt: operator.gt,
    ast.GtE: operator.ge,
    ast.In: lambda a, b: a in b,
    ast.NotIn: lambda a, b: a not in b,
    ast.Is: operator.is_,
    ast.IsNot: operator.is_not,
}


class _Scope:
    """Name resolution for one evaluation.

    Lookup order is the explicit names, then public non-method attributes
    of the host, then ``SAFE_BUILTINS``. Host attributes are read only when
    an expression names them.
    """

    def __init__(self, names: Mapping[str, Any], host: Any = None):
        self.names = names
        self.host = host

    def lookup(self, name: str) -> Any:
        if name.startswith("_"):
            raise ExpressionError(f"Private name '{name}' is not allowed")
        if name in self.names:
            return self.names[name]
        if self.host is not None:
            try:
                attr = getattr(self.host, name)
            except AttributeError:
                pass
            else:
                if not inspect.ismethod(attr):
                    return attr
        if name in SAFE_BUILTINS:
            return SAFE_BUILTINS[name]
        raise ExpressionError(f"Unknown name '{name}' in expression")


def _operator(table: Mapping[type, Any], op: ast.AST, kind: str) -> Any:
    try:
        return table[type(op)]
    except KeyError:
        raise ExpressionError(
            f"{kind} operator not allowed: {type(op).__name__}"
        ) from None


class _Evaluator(ast.NodeVisitor):
    """Walks a parsed expression, resolving names through a scope.

    Any node type without a ``visit_*`` method is rejected.
    """

    def __init__(self, scope: _Scope):
        self.scope = scope

    def generic_visit(self, node: ast.AST) -> Any:
        raise ExpressionError(
            f"Unsupported expression element: {type(node).__name__}"
        )

    def visit_Expression(self, node: ast.Expression) -> Any:
        return self.visit(node.body)

    def visit_Constant(self, node: ast.Constant) -> Any:
        return node.value

    def visit_Name(self, node: ast.Name) -> Any:
        return self.scope.lookup(node.id)

    def visit_List(self, node: ast.List) -> list:
        return [self.visit(element) for element in node.elts]

    def visit_Tuple(self, node: ast.Tuple) -> tuple:
        return tuple(self.visit(element) for element in node.elts)

    def visit_Set(self, node: ast.Set) -> set:
        return {self.visit(element) for element in node.elts}

    def visit_UnaryOp(self, node: ast.UnaryOp) -> Any:
        apply = _operator(_SAFE_UNARY_OPS, node.op, "Unary")
        return apply(self.visit(node.operand))

    def visit_BinOp(self, node: ast.BinOp) -> Any:
        apply = _operator(_SAFE_BIN_OPS, node.op, "Binary")
        return apply(self.visit(node.left), self.visit(node.right))

    def visit_BoolOp(self, node: ast.BoolOp) -> Any:
        # Short-circuits and yields the deciding operand, like Python
        stop_when = isinstance(node.op, ast.Or)
        result = None
        for operand in node.values:
            result = self.visit(operand)
            if bool(result) is stop_when:
                break
        return result

    def visit_Compare(self, node: ast.Compare) -> bool:
        operands = [node.left, *node.comparators]
        left = self.visit(operands[0])
        for op, right_node in zip(node.ops, operands[1:]):
            compare = _operator(_SAFE_CMP_OPS, op, "Comparison")
            right = self.visit(right_node)
            if not compare(left, right):
                return False
            left = right
        return True

    def visit_IfExp(self, node: ast.IfExp) -> Any:
        branch = node.body if self.visit(node.test) else node.orelse
        return self.visit(branch)

    def visit_Call(self, node: ast.Call) -> Any:
        if not isinstance(node.func, ast.Name):
            raise ExpressionError("Only direct function calls are allowed")
        if node.keywords:
            raise ExpressionError("Keyword arguments are not allowed")
        if any(isinstance(arg, ast.Starred) for arg in node.args):
            raise ExpressionError("Star-args are not allowed")
        func = SAFE_BUILTINS.get(node.func.id)
        if not callable(func):
            raise ExpressionError(f"Function '{node.func.id}' is not allowed")
        return func(*(self.visit(arg) for arg in node.args))


def parse_expression(expression: str) -> ast.Expression:
    """Parse an expression string.

    Raises:
        ExpressionError: If the expression is not valid Python syntax.
    """
    try:
        return ast.parse(expression, mode="eval")
    except SyntaxError as e:
        raise ExpressionError(f"Invalid expression '{expression}': {e.msg}") from e


def eval_safe(
    expression: str | ast.Expression,
    context: Mapping[str, Any],
    host: Any = None,
) -> Any:
    """
    Safely evaluate a Python expression with restricted builtins.

    Args:
        expression: Expression string (e.g., "value < 100") or parsed tree
        context: Variable names to values
        host: Optional object whose public attributes are also visible

    Returns:
        Result of evaluating the expression

    Raises:
        ExpressionError: If evaluation fails

    Example:
        >>> eval_safe("max(0, value - 26)", {"value": 45})
        19
        >>> eval_safe("role == 'chief'", {"role": "resident"})
        False
    """
    tree = parse_expression(expression) if isinstance(expression, str) else expression
    try:
        return _Evaluator(_Scope(context, host)).visit(tree)
    except ExpressionError:
        raise
    except Exception as e:
        raise ExpressionError(f"Failed to evaluate expression: {e}") from e


@dataclass(frozen=True)
class ExpressionPredicate:
    """Predicate ``(instance, parameter, value)`` backed by an expression.

    Names available to the expression: ``value``, ``parameter`` (the
    parameter name) and the public attributes of the instance.
    """

    expression: str
    _tree: ast.Expression = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "_tree", parse_expression(self.expression))

    def __call__(self, instance: Any, parameter: Any, value: Any) -> Any:
        names = {"value": value, "parameter": getattr(parameter, "name", parameter)}
        return eval_safe(self._tree, names, host=instance)


def expression_predicate(expression: str) -> ExpressionPredicate:
    """Build a predicate from an expression string.

    Raises:
        ExpressionError: If the expression doesn't parse.
    """
    return ExpressionPredicate(expression)

"""
Template processing module.

Expands ``{{ ... }}`` placeholders in paste formats. Each placeholder holds a
Python expression that is evaluated against the paste variables
(``url``, ``text``, ``title``, ...) by a small AST interpreter.
"""

# pylint: disable=too-many-return-statements

import ast
import logging
import operator
import re
from typing import Any, Callable, Dict, Mapping, Optional

logger = logging.getLogger(__name__)

PLACEHOLDER_PATTERN = re.compile(r"{{(.*?)}}")

# Builtins visible behind the variables. Variables shadow these.
DEFAULT_BUILTINS: Dict[str, Any] = {
    "abs": abs,
    "bool": bool,
    "dict": dict,
    "float": float,
    "int": int,
    "len": len,
    "list": list,
    "max": max,
    "min": min,
    "round": round,
    "sorted": sorted,
    "str": str,
}

_BIN_OPS: Dict[type, Callable[[Any, Any], Any]] = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.FloorDiv: operator.floordiv,
    ast.Mod: operator.mod,
    ast.Pow: operator.pow,
    ast.BitAnd: operator.and_,
    ast.BitOr: operator.or_,
    ast.BitXor: operator.xor,
    ast.LShift: operator.lshift,
    ast.RShift: operator.rshift,
}

_UNARY_OPS: Dict[type, Callable[[Any], Any]] = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
    ast.Not: operator.not_,
    ast.Invert: operator.invert,
}

_COMPARE_OPS: Dict[type, Callable[[Any, Any], bool]] = {
    ast.Eq: operator.eq,
    ast.NotEq: operator.ne,
    ast.Lt: operator.lt,
    ast.LtE: operator.le,
    ast.Gt: operator.gt,
    ast.GtE: operator.ge,
    ast.Is: operator.is_,
    ast.IsNot: operator.is_not,
    ast.In: lambda a, b: a in b,
    ast.NotIn: lambda a, b: a not in b,
}


class ExpressionError(Exception):
    """Raised when a placeholder expression cannot be evaluated."""

    def __init__(self, expression: str, message: str):
        super().__init__(message)
        self.expression = expression


class _Interpreter:
    """Walks an expression AST, resolving names from a scope mapping."""

    def __init__(self, expression: str, scope: Mapping[str, Any]):
        self.expression = expression
        self.scope = scope

    def error(self, message: str) -> ExpressionError:
        return ExpressionError(
            self.expression, f"{message} in expression '{self.expression}'"
        )

    def visit(self, node: ast.AST) -> Any:
        method = getattr(self, "visit_" + type(node).__name__, None)
        if method is None:
            raise self.error(f"unsupported syntax '{type(node).__name__}'")
        return method(node)

    def visit_Expression(self, node: ast.Expression) -> Any:
        return self.visit(node.body)

    def visit_Constant(self, node: ast.Constant) -> Any:
        return node.value

    def visit_Name(self, node: ast.Name) -> Any:
        if node.id in self.scope:
            return self.scope[node.id]
        raise self.error(f"name '{node.id}' is not defined")

    def visit_BinOp(self, node: ast.BinOp) -> Any:
        op = _BIN_OPS.get(type(node.op))
        if op is None:
            raise self.error(f"unsupported operator '{type(node.op).__name__}'")
        return op(self.visit(node.left), self.visit(node.right))

    def visit_UnaryOp(self, node: ast.UnaryOp) -> Any:
        return _UNARY_OPS[type(node.op)](self.visit(node.operand))

    def visit_BoolOp(self, node: ast.BoolOp) -> Any:
        # Short-circuits like the language does and returns the deciding operand.
        value = None
        for operand in node.values:
            value = self.visit(operand)
            if isinstance(node.op, ast.And) and not value:
                return value
            if isinstance(node.op, ast.Or) and value:
                return value
        return value

    def visit_Compare(self, node: ast.Compare) -> bool:
        left = self.visit(node.left)
        for op, comparator in zip(node.ops, node.comparators):
            right = self.visit(comparator)
            if not _COMPARE_OPS[type(op)](left, right):
                return False
            left = right
        return True

    def visit_IfExp(self, node: ast.IfExp) -> Any:
        if self.visit(node.test):
            return self.visit(node.body)
        return self.visit(node.orelse)

    def visit_Attribute(self, node: ast.Attribute) -> Any:
        if node.attr.startswith("__"):
            raise self.error(f"access to attribute '{node.attr}' is not allowed")
        return getattr(self.visit(node.value), node.attr)

    def visit_Subscript(self, node: ast.Subscript) -> Any:
        return self.visit(node.value)[self.visit(node.slice)]

    def visit_Slice(self, node: ast.Slice) -> slice:
        lower = self.visit(node.lower) if node.lower else None
        upper = self.visit(node.upper) if node.upper else None
        step = self.visit(node.step) if node.step else None
        return slice(lower, upper, step)

    def visit_Call(self, node: ast.Call) -> Any:
        func = self.visit(node.func)
        args = []
        for arg in node.args:
            if isinstance(arg, ast.Starred):
                args.extend(self.visit(arg.value))
            else:
                args.append(self.visit(arg))
        kwargs = {}
        for keyword in node.keywords:
            if keyword.arg is None:
                kwargs.update(self.visit(keyword.value))
            else:
                kwargs[keyword.arg] = self.visit(keyword.value)
        return func(*args, **kwargs)

    def visit_List(self, node: ast.List) -> list:
        return [self.visit(elt) for elt in node.elts]

    def visit_Tuple(self, node: ast.Tuple) -> tuple:
        return tuple(self.visit(elt) for elt in node.elts)

    def visit_Set(self, node: ast.Set) -> set:
        return {self.visit(elt) for elt in node.elts}

    def visit_Dict(self, node: ast.Dict) -> dict:
        result = {}
        for key, value in zip(node.keys, node.values):
            if key is None:
                result.update(self.visit(value))
            else:
                result[self.visit(key)] = self.visit(value)
        return result

    def visit_JoinedStr(self, node: ast.JoinedStr) -> str:
        return "".join(str(self.visit(value)) for value in node.values)

    def visit_FormattedValue(self, node: ast.FormattedValue) -> str:
        value = self.visit(node.value)
        if node.conversion == ord("r"):
            value = repr(value)
        elif node.conversion == ord("s"):
            value = str(value)
        elif node.conversion == ord("a"):
            value = ascii(value)
        spec = self.visit(node.format_spec) if node.format_spec else ""
        return format(value, spec)


def evaluate(
    expr: str,
    env: Mapping[str, Any],
    builtins: Optional[Mapping[str, Any]] = None,
) -> Any:
    """
    Evaluate a single expression with every key of ``env`` bound as a name.

    Raises:
        ExpressionError: if the expression does not parse, fails while
            running, or evaluates to None.
    """
    scope = dict(DEFAULT_BUILTINS if builtins is None else builtins)
    scope.update(env)

    try:
        tree = ast.parse(expr.strip(), mode="eval")
    except SyntaxError as e:
        raise ExpressionError(
            expr, f"invalid expression '{expr}': {e.msg}"
        ) from e

    try:
        result = _Interpreter(expr, scope).visit(tree)
    except ExpressionError:
        raise
    except Exception as e:  # pylint: disable=broad-exception-caught
        raise ExpressionError(
            expr, f"expression '{expr}' raised {type(e).__name__}: {e}"
        ) from e

    if result is None:
        raise ExpressionError(expr, f"expression '{expr}' produced no usable value")
    return result


def render(template: str, env: Mapping[str, Any]) -> str:
    """Replace every placeholder in ``template`` with its evaluated text."""
    return PLACEHOLDER_PATTERN.sub(lambda match: _placeholder_text(match.group(1), env), template)


def _placeholder_text(expr: str, env: Mapping[str, Any]) -> str:
    value = evaluate(expr, env)
    try:
        return str(value)
    except Exception as e:  # pylint: disable=broad-exception-caught
        raise ExpressionError(
            expr, f"value of expression '{expr}' cannot be shown as text: "
            f"{type(e).__name__}: {e}"
        ) from e


class TemplateProcessor:
    """Holds the variables of one paste and renders formats against them."""

    def __init__(self, variables: Dict[str, Any]):
        self.variables = variables

    def set_variable(self, name: str, value: Any):
        self.variables[name] = value

    def eval_part(self, expr: str) -> Any:
        return evaluate(expr, self.variables)

    def eval_template(self, template: str) -> str:
        logger.debug("Rendering template with variables: %s", list(self.variables))
        return render(template, self.variables)

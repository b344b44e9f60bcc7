from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from typing import Callable

import numpy as np

from graphel.errors import CompilationError, ExpressionSyntaxError
from graphel.expr.functions import FUNCTIONS
from graphel.expr.nodes import BinaryOp, Call, Constant, Node, Number, UnaryOp, Variable
from graphel.expr.parser import parse_expression


Kernel = Callable[[np.ndarray], np.ndarray]

_BINARY_OPS: dict[str, Callable[[np.ndarray, np.ndarray], np.ndarray]] = {
    "+": np.add,
    "-": np.subtract,
    "*": np.multiply,
    "/": np.divide,
    "^": np.power,
}


@dataclass(frozen=True)
class CompiledFunction:
    """A parsed expression closed over numpy ufuncs.

    Calling it with a float evaluates one point; :meth:`evaluate` runs the
    whole closure once over an array. Domain errors, overflow and division
    by zero come back as ``nan``/``inf`` rather than raising.
    """

    text: str
    variable: str
    tree: Node
    kernel: Kernel = field(repr=False, compare=False)

    def __call__(self, x: float) -> float:
        with np.errstate(all="ignore"):
            return float(self.kernel(np.float64(x)))

    def evaluate(self, xs: np.ndarray) -> np.ndarray:
        arr = np.asarray(xs, dtype=np.float64)
        with np.errstate(all="ignore"):
            out = np.asarray(self.kernel(arr), dtype=np.float64)
        if out.shape != arr.shape:
            # Constant expressions do not depend on the input's shape.
            out = np.broadcast_to(out, arr.shape).copy()
        return out


@lru_cache(maxsize=256)
def compile_expression(text: str, variable: str = "x") -> CompiledFunction | CompilationError:
    try:
        tree = parse_expression(text, variable=variable)
        kernel = _compile(tree)
    except ExpressionSyntaxError as exc:
        return CompilationError(text=text, message=exc.message, position=exc.position)
    except RecursionError:
        return CompilationError(text=text, message="expression too deeply nested")
    return CompiledFunction(text=text, variable=variable, tree=tree, kernel=kernel)


def _compile(node: Node) -> Kernel:
    if not _depends_on_variable(node):
        with np.errstate(all="ignore"):
            value = float(_build(node)(np.float64(0.0)))
        return lambda x: value
    return _build(node)


def _build(node: Node) -> Kernel:
    if isinstance(node, Variable):
        return lambda x: x
    if isinstance(node, Number):
        value = node.value
        return lambda x: value
    if isinstance(node, Constant):
        value = node.value
        return lambda x: value
    if isinstance(node, UnaryOp):
        operand = _compile(node.operand)
        if node.op == "-":
            return lambda x: np.negative(operand(x))
        return operand
    if isinstance(node, BinaryOp):
        op = _BINARY_OPS[node.op]
        left = _compile(node.left)
        right = _compile(node.right)
        return lambda x: op(left(x), right(x))
    if isinstance(node, Call):
        impl = FUNCTIONS[node.name].impl
        args = [_compile(arg) for arg in node.args]
        if len(args) == 1:
            (arg,) = args
            return lambda x: impl(arg(x))
        return lambda x: impl(*(a(x) for a in args))
    raise TypeError(f"unsupported expression node: {node!r}")


def _depends_on_variable(node: Node) -> bool:
    if isinstance(node, Variable):
        return True
    if isinstance(node, UnaryOp):
        return _depends_on_variable(node.operand)
    if isinstance(node, BinaryOp):
        return _depends_on_variable(node.left) or _depends_on_variable(node.right)
    if isinstance(node, Call):
        return any(_depends_on_variable(arg) for arg in node.args)
    return False

from .compiler import CompiledFunction, compile_expression
from .functions import CONSTANTS, FUNCTIONS
from .nodes import BinaryOp, Call, Constant, Node, Number, UnaryOp, Variable
from .parser import parse_expression
from .tokens import Token, tokenize

__all__ = [
    "BinaryOp",
    "CONSTANTS",
    "Call",
    "CompiledFunction",
    "Constant",
    "FUNCTIONS",
    "Node",
    "Number",
    "Token",
    "UnaryOp",
    "Variable",
    "compile_expression",
    "parse_expression",
    "tokenize",
]

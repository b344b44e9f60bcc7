from __future__ import annotations

from graphel.errors import ExpressionSyntaxError
from graphel.expr.functions import CONSTANTS, FUNCTIONS
from graphel.expr.nodes import BinaryOp, Call, Constant, Node, Number, UnaryOp, Variable
from graphel.expr.tokens import Token, tokenize


# Bounds recursion in the parser, the compiled closures and their evaluation.
MAX_NESTING = 64
MAX_TREE_DEPTH = 256


def parse_expression(text: str, variable: str = "x") -> Node:
    """Parse ``text`` into an expression tree over ``variable``.

    Precedence, loosest first: ``+ -``, ``* /`` and implicit multiplication,
    unary sign, ``^`` (right associative, so ``-x^2`` is ``-(x^2)``).
    Raises :class:`ExpressionSyntaxError` on malformed input.
    """
    if not text or not text.strip():
        raise ExpressionSyntaxError("empty expression", 0)
    tree = _Parser(tokenize(text), variable).parse()
    if _tree_depth(tree) > MAX_TREE_DEPTH:
        raise ExpressionSyntaxError("expression too deeply nested", 0)
    return tree


class _Parser:
    def __init__(self, tokens: list[Token], variable: str) -> None:
        self._tokens = tokens
        self._index = 0
        self._variable = variable
        self._depth = 0

    def parse(self) -> Node:
        node = self._additive()
        tok = self._peek()
        if tok.kind != "end":
            raise ExpressionSyntaxError(f"unexpected {tok.text!r}", tok.position)
        return node

    def _peek(self) -> Token:
        return self._tokens[self._index]

    def _advance(self) -> Token:
        tok = self._tokens[self._index]
        if tok.kind != "end":
            self._index += 1
        return tok

    def _expect(self, kind: str, what: str) -> Token:
        tok = self._peek()
        if tok.kind != kind:
            found = tok.text if tok.kind != "end" else "end of input"
            raise ExpressionSyntaxError(f"expected {what}, found {found!r}", tok.position)
        return self._advance()

    def _additive(self) -> Node:
        node = self._multiplicative()
        while self._peek().kind == "op" and self._peek().text in "+-":
            op = self._advance().text
            node = BinaryOp(op, node, self._multiplicative())
        return node

    def _multiplicative(self) -> Node:
        node = self._unary()
        while True:
            tok = self._peek()
            if tok.kind == "op" and tok.text in "*/":
                self._advance()
                node = BinaryOp(tok.text, node, self._unary())
            elif tok.kind in ("ident", "lparen"):
                node = BinaryOp("*", node, self._power())
            else:
                return node

    def _unary(self) -> Node:
        # Every nested construct (parens, call arguments, signs, exponents) re-enters here.
        tok = self._peek()
        if self._depth >= MAX_NESTING:
            raise ExpressionSyntaxError("expression too deeply nested", tok.position)
        self._depth += 1
        try:
            if tok.kind == "op" and tok.text in "+-":
                self._advance()
                return UnaryOp(tok.text, self._unary())
            return self._power()
        finally:
            self._depth -= 1

    def _power(self) -> Node:
        base = self._primary()
        tok = self._peek()
        if tok.kind == "op" and tok.text == "^":
            self._advance()
            return BinaryOp("^", base, self._unary())
        return base

    def _primary(self) -> Node:
        tok = self._advance()
        if tok.kind == "number":
            return Number(float(tok.text))
        if tok.kind == "lparen":
            node = self._additive()
            self._expect("rparen", "')'")
            return node
        if tok.kind == "ident":
            return self._identifier(tok)
        if tok.kind == "end":
            raise ExpressionSyntaxError("unexpected end of input", tok.position)
        raise ExpressionSyntaxError(f"unexpected {tok.text!r}", tok.position)

    def _identifier(self, tok: Token) -> Node:
        name = tok.text
        if name == self._variable:
            return Variable(name)
        if name in FUNCTIONS:
            return self._call(tok)
        if name in CONSTANTS:
            return Constant(name, CONSTANTS[name])
        raise ExpressionSyntaxError(f"unknown name {name!r}", tok.position)

    def _call(self, tok: Token) -> Node:
        fn = FUNCTIONS[tok.text]
        self._expect("lparen", f"'(' after {tok.text}")
        args: list[Node] = [self._additive()]
        while self._peek().kind == "comma":
            self._advance()
            args.append(self._additive())
        self._expect("rparen", "')'")
        if len(args) != fn.arity:
            raise ExpressionSyntaxError(
                f"{tok.text} takes {fn.arity} argument(s), got {len(args)}",
                tok.position,
            )
        return Call(tok.text, tuple(args))


def _tree_depth(root: Node) -> int:
    deepest = 0
    stack: list[tuple[Node, int]] = [(root, 1)]
    while stack:
        node, depth = stack.pop()
        deepest = max(deepest, depth)
        if isinstance(node, UnaryOp):
            stack.append((node.operand, depth + 1))
        elif isinstance(node, BinaryOp):
            stack.append((node.left, depth + 1))
            stack.append((node.right, depth + 1))
        elif isinstance(node, Call):
            stack.extend((arg, depth + 1) for arg in node.args)
    return deepest

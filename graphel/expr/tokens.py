from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from graphel.errors import ExpressionSyntaxError


TokenKind = Literal["number", "ident", "op", "lparen", "rparen", "comma", "end"]

_SINGLE_CHAR_OPS = {"+", "-", "*", "/", "^"}


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    position: int
    value: float | None = None


def tokenize(text: str) -> list[Token]:
    tokens: list[Token] = []
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch.isspace():
            i += 1
            continue
        if _is_digit(ch) or (ch == "." and i + 1 < n and _is_digit(text[i + 1])):
            end = _scan_number(text, i)
            literal = text[i:end]
            tokens.append(Token("number", literal, i, value=float(literal)))
            i = end
            continue
        if ch.isalpha() or ch == "_":
            end = i + 1
            while end < n and (text[end].isalnum() or text[end] == "_"):
                end += 1
            tokens.append(Token("ident", text[i:end], i))
            i = end
            continue
        if ch == "*" and i + 1 < n and text[i + 1] == "*":
            tokens.append(Token("op", "^", i))
            i += 2
            continue
        if ch in _SINGLE_CHAR_OPS:
            tokens.append(Token("op", ch, i))
            i += 1
            continue
        if ch == "(":
            tokens.append(Token("lparen", ch, i))
        elif ch == ")":
            tokens.append(Token("rparen", ch, i))
        elif ch == ",":
            tokens.append(Token("comma", ch, i))
        else:
            raise ExpressionSyntaxError(f"unexpected character {ch!r}", i)
        i += 1
    tokens.append(Token("end", "", n))
    return tokens


def _scan_number(text: str, start: int) -> int:
    n = len(text)
    i = start
    while i < n and _is_digit(text[i]):
        i += 1
    if i < n and text[i] == ".":
        i += 1
        while i < n and _is_digit(text[i]):
            i += 1
    if i < n and text[i] in "eE":
        j = i + 1
        if j < n and text[j] in "+-":
            j += 1
        # Only an exponent when digits follow; "2e" is 2 times the constant e.
        if j < n and _is_digit(text[j]):
            while j < n and _is_digit(text[j]):
                j += 1
            i = j
    return i


def _is_digit(ch: str) -> bool:
    # str.isdigit() also accepts superscripts and other scripts' digits.
    return "0" <= ch <= "9"

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Union

from ._exceptions import FormulaError

Number = Union[int, float]

_TOKEN_RE = re.compile(
    r"\s*(?:(?P<number>(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)|(?P<op>[-+*/()]))"
)
_TRAILING_WS_RE = re.compile(r"\s*")


@dataclass(frozen=True, slots=True)
class Token:
    kind: str  # "number" | "op"
    text: str
    pos: int


def tokenize(text: str) -> list[Token]:
    """Split an arithmetic expression into number and operator tokens."""
    tokens: list[Token] = []
    pos = 0
    end = len(text)
    while True:
        pos = _TRAILING_WS_RE.match(text, pos).end()
        if pos >= end:
            return tokens
        m = _TOKEN_RE.match(text, pos)
        if m is None:
            raise FormulaError(f"Unexpected character {text[pos]!r} at position {pos}.")
        kind = "number" if m.group("number") is not None else "op"
        tokens.append(Token(kind, m.group(kind), m.start(kind)))
        pos = m.end()


class _Parser:
    """
    Recursive-descent evaluator over the grammar::

        expr    := term (("+" | "-") term)*
        term    := unary (("*" | "/") unary)*
        unary   := ("+" | "-") unary | primary
        primary := NUMBER | "(" expr ")"
    """

    def __init__(self, tokens: list[Token]) -> None:
        self._tokens = tokens
        self._i = 0

    def _peek(self) -> Token | None:
        return self._tokens[self._i] if self._i < len(self._tokens) else None

    def _next(self) -> Token:
        tok = self._peek()
        if tok is None:
            raise FormulaError("Unexpected end of expression.")
        self._i += 1
        return tok

    def parse(self) -> Number:
        if not self._tokens:
            raise FormulaError("Empty expression.")
        value = self._expr()
        tok = self._peek()
        if tok is not None:
            raise FormulaError(f"Unexpected {tok.text!r} at position {tok.pos}.")
        return value

    def _expr(self) -> Number:
        value = self._term()
        while (tok := self._peek()) is not None and tok.text in ("+", "-"):
            self._i += 1
            rhs = self._term()
            value = value + rhs if tok.text == "+" else value - rhs
        return value

    def _term(self) -> Number:
        value = self._unary()
        while (tok := self._peek()) is not None and tok.text in ("*", "/"):
            self._i += 1
            rhs = self._unary()
            if tok.text == "*":
                value = value * rhs
            elif rhs == 0:
                raise FormulaError(f"Division by zero at position {tok.pos}.")
            else:
                value = value / rhs
        return value

    def _unary(self) -> Number:
        tok = self._peek()
        if tok is not None and tok.text in ("+", "-"):
            self._i += 1
            value = self._unary()
            return -value if tok.text == "-" else value
        return self._primary()

    def _primary(self) -> Number:
        tok = self._next()
        if tok.kind == "number":
            if any(c in tok.text for c in ".eE"):
                return float(tok.text)
            return int(tok.text)
        if tok.text == "(":
            value = self._expr()
            close = self._next()
            if close.text != ")":
                raise FormulaError(f"Expected ')' at position {close.pos}.")
            return value
        raise FormulaError(f"Unexpected {tok.text!r} at position {tok.pos}.")


def evaluate_expression(text: str) -> Number:
    """
    Evaluate `text` limited to numbers, ``+ - * /``, unary signs and parentheses.

    Raises FormulaError on syntax errors, division by zero and non-finite results.
    """
    value = _Parser(tokenize(text)).parse()
    if isinstance(value, float) and not math.isfinite(value):
        raise FormulaError(f"Non-finite result {value!r}.")
    return value

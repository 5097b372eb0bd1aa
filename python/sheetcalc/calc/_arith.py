"""Arithmetic expression parser for generic (non-function) formulas.

A small recursive descent parser over double-precision numbers::

    expr    := term (('+' | '-') term)*
    term    := unary (('*' | '/') unary)*
    unary   := ('+' | '-') unary | primary
    primary := NUMBER | CELL_REF | '(' expr ')'

Cell references are resolved through a callback at parse time, so the
expression is evaluated in a single pass without building a tree.
"""

from __future__ import annotations

import math
import re
from typing import Callable, NamedTuple

from sheetcalc.calc._errors import ExpressionSyntaxError
from sheetcalc.calc._parser import CellRef, parse_cell_reference

_TOKEN_RE = re.compile(
    r"""
    (?P<number>(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)
    |(?P<ref>[A-Z]+[0-9]+)
    |(?P<op>[-+*/()])
    |(?P<space>\s+)
    """,
    re.VERBOSE,
)


class Token(NamedTuple):
    kind: str  # "number", "ref", "op" or "end"
    text: str
    pos: int


def tokenize(expression: str) -> list[Token]:
    """Split *expression* into tokens, ending with an ``end`` token."""
    tokens: list[Token] = []
    pos = 0
    length = len(expression)
    while pos < length:
        m = _TOKEN_RE.match(expression, pos)
        if not m:
            raise ExpressionSyntaxError(
                f"Unexpected character {expression[pos]!r} at {pos}", pos,
            )
        kind = m.lastgroup
        if kind != "space":
            tokens.append(Token(kind, m.group(), pos))
        pos = m.end()
    tokens.append(Token("end", "", length))
    return tokens


def divide(left: float, right: float) -> float:
    """IEEE division: ``x/0`` is a signed infinity, ``0/0`` is NaN."""
    if right == 0:
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


def _binary_op(left: float, op: str, right: float) -> float:
    if op == "+":
        return left + right
    if op == "-":
        return left - right
    if op == "*":
        return left * right
    return divide(left, right)


class ArithmeticParser:
    """Evaluates one expression. Not reusable across expressions."""

    def __init__(self, expression: str, resolve: Callable[[CellRef], float]) -> None:
        self._tokens = tokenize(expression)
        self._index = 0
        self._resolve = resolve

    @property
    def _current(self) -> Token:
        return self._tokens[self._index]

    def _advance(self) -> Token:
        tok = self._tokens[self._index]
        self._index += 1
        return tok

    def _expect(self, text: str) -> None:
        tok = self._current
        if tok.kind != "op" or tok.text != text:
            raise ExpressionSyntaxError(
                f"Expected {text!r} at {tok.pos}, found {tok.text or 'end of input'!r}",
                tok.pos,
            )
        self._advance()

    def parse(self) -> float:
        value = self._expr()
        tok = self._current
        if tok.kind != "end":
            raise ExpressionSyntaxError(f"Unexpected {tok.text!r} at {tok.pos}", tok.pos)
        return value

    def _expr(self) -> float:
        value = self._term()
        while self._current.kind == "op" and self._current.text in ("+", "-"):
            op = self._advance().text
            value = _binary_op(value, op, self._term())
        return value

    def _term(self) -> float:
        value = self._unary()
        while self._current.kind == "op" and self._current.text in ("*", "/"):
            op = self._advance().text
            value = _binary_op(value, op, self._unary())
        return value

    def _unary(self) -> float:
        tok = self._current
        if tok.kind == "op" and tok.text == "-":
            self._advance()
            return -self._unary()
        if tok.kind == "op" and tok.text == "+":
            self._advance()
            return self._unary()
        return self._primary()

    def _primary(self) -> float:
        tok = self._advance()
        if tok.kind == "number":
            return float(tok.text)
        if tok.kind == "ref":
            return self._resolve(parse_cell_reference(tok.text))
        if tok.kind == "op" and tok.text == "(":
            value = self._expr()
            self._expect(")")
            return value
        raise ExpressionSyntaxError(
            f"Unexpected {tok.text or 'end of input'!r} at {tok.pos}", tok.pos,
        )


def evaluate_arithmetic(expression: str, resolve: Callable[[CellRef], float]) -> float:
    """Evaluate *expression*, resolving each cell reference through *resolve*."""
    return ArithmeticParser(expression, resolve).parse()

"""Inline arithmetic evaluator.

Classifies a query as an arithmetic expression and formats its value.
Input must pass a character whitelist, then goes through a tokenizer and
a recursive-descent parser. Nothing is ever handed to eval().

Grammar (lowest to highest precedence):
    expression := term (("+" | "-") term)*
    term       := power (("*" | "/" | "%") power)*
    power      := unary ("^" unary)*          # right-associative
    unary      := ("-" | "+") unary | primary
    primary    := NUMBER | "(" expression ")"
"""

import math
import re
from dataclasses import dataclass
from typing import Optional

from cmdpalette.core.exceptions import ExpressionError

ALLOWED_PATTERN = re.compile(r"^[\d\s+\-*/().%^]+$", re.ASCII)
NUMBER_PATTERN = re.compile(r"\d+\.?\d*|\.\d+", re.ASCII)
OPERATORS = frozenset("+-*/%^()")

MAX_FRACTION_DIGITS = 10
MAX_NESTING = 100


def _finite(value: float) -> float:
    if not math.isfinite(value):
        raise ExpressionError("Non-finite value")
    return value


@dataclass(frozen=True)
class Token:
    kind: str  # "num" or "op"
    text: str
    value: float = 0.0


def tokenize(expr: str) -> list[Token]:
    """Split an expression into number and operator tokens.

    Raises:
        ExpressionError: On a character outside the grammar, or a literal
            too large to represent
    """
    tokens: list[Token] = []
    pos = 0
    while pos < len(expr):
        ch = expr[pos]
        if ch.isspace():
            pos += 1
            continue
        if ch in OPERATORS:
            tokens.append(Token("op", ch))
            pos += 1
            continue
        m = NUMBER_PATTERN.match(expr, pos)
        if m is None:
            raise ExpressionError(f"Unexpected character {ch!r} at {pos}")
        # Literals too large for a float come back as inf
        tokens.append(Token("num", m.group(), _finite(float(m.group()))))
        pos = m.end()
    return tokens


class _Parser:
    """Recursive-descent evaluator over a token list."""

    def __init__(self, tokens: list[Token]) -> None:
        self._tokens = tokens
        self._pos = 0
        self._depth = 0

    def _peek(self) -> Optional[Token]:
        if self._pos < len(self._tokens):
            return self._tokens[self._pos]
        return None

    def _accept(self, *ops: str) -> Optional[str]:
        token = self._peek()
        if token is not None and token.kind == "op" and token.text in ops:
            self._pos += 1
            return token.text
        return None

    def parse(self) -> float:
        if not self._tokens:
            raise ExpressionError("Empty expression")
        value = self._expression()
        if self._peek() is not None:
            raise ExpressionError(f"Unexpected token {self._peek().text!r}")
        return _finite(value)

    def _expression(self) -> float:
        value = self._term()
        while True:
            op = self._accept("+", "-")
            if op is None:
                return value
            rhs = self._term()
            value = _finite(value + rhs if op == "+" else value - rhs)

    def _term(self) -> float:
        value = self._power()
        while True:
            op = self._accept("*", "/", "%")
            if op is None:
                return value
            rhs = self._power()
            if op == "*":
                value = _finite(value * rhs)
            elif rhs == 0:
                raise ExpressionError("Division by zero")
            elif op == "/":
                value = _finite(value / rhs)
            else:
                # Remainder takes the sign of the dividend
                value = _finite(math.fmod(value, rhs))

    def _power(self) -> float:
        operands = [self._unary()]
        while self._accept("^") is not None:
            operands.append(self._unary())
        # Fold from the right: 2^3^2 is 2^(3^2)
        value = operands.pop()
        while operands:
            base = operands.pop()
            try:
                value = _finite(math.pow(base, value))
            except (OverflowError, ValueError) as e:
                raise ExpressionError(f"Cannot raise {base} to {value}") from e
        return value

    def _unary(self) -> float:
        self._depth += 1
        if self._depth > MAX_NESTING:
            raise ExpressionError("Expression nested too deeply")
        try:
            op = self._accept("-", "+")
            if op == "-":
                return -self._unary()
            if op == "+":
                return self._unary()
            return self._primary()
        finally:
            self._depth -= 1

    def _primary(self) -> float:
        token = self._peek()
        if token is None:
            raise ExpressionError("Unexpected end of expression")
        if token.kind == "num":
            self._pos += 1
            return token.value
        if self._accept("(") is not None:
            value = self._expression()
            if self._accept(")") is None:
                raise ExpressionError("Missing closing parenthesis")
            return value
        raise ExpressionError(f"Unexpected token {token.text!r}")


def format_number(value: float) -> str:
    """Thousands-separated; integers without a decimal point.

    Raises:
        ExpressionError: If value is infinite or NaN
    """
    _finite(value)
    if value == 0:
        return "0"
    if value.is_integer():
        return f"{int(value):,}"
    text = f"{value:,.{MAX_FRACTION_DIGITS}f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def evaluate(expr: str) -> float:
    """Evaluate an arithmetic expression.

    Raises:
        ExpressionError: If the expression is malformed or not finite
    """
    text = expr.strip()
    if not ALLOWED_PATTERN.match(text):
        raise ExpressionError("Not an arithmetic expression")
    return _Parser(tokenize(text)).parse()


def evaluate_math_expression(query: str) -> Optional[str]:
    """Formatted value of query when it is an arithmetic expression.

    Args:
        query: Raw query text

    Returns:
        The formatted value, or None for anything that is not a finite
        arithmetic expression
    """
    try:
        return format_number(evaluate(query))
    except ExpressionError:
        return None

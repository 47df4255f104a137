"""Tests for the inline arithmetic evaluator."""

import math

import pytest

from cmdpalette.core.exceptions import ExpressionError
from cmdpalette.engine.calculator import (
    evaluate,
    evaluate_math_expression,
    format_number,
    tokenize,
)


class TestEvaluateMathExpression:
    @pytest.mark.parametrize(
        "expr,expected",
        [
            ("2+2", "4"),
            ("2^10", "1,024"),
            ("2 * (3 + 4)", "14"),
            ("  3 * 3  ", "9"),
            ("10/4", "2.5"),
            ("1/3", "0.3333333333"),
            ("0.1+0.2", "0.3"),
            ("1000000", "1,000,000"),
            ("1234.56 + 0", "1,234.56"),
            ("-1234.5", "-1,234.5"),
            ("7 % 3", "1"),
            ("-7 % 3", "-1"),
            ("2^3^2", "512"),
            ("-2^2", "4"),
            ("2^-1", "0.5"),
            ("-(-3)", "3"),
            ("+5", "5"),
            ("((((1))))", "1"),
            (".5*4", "2"),
            ("0/5", "0"),
            ("-0", "0"),
        ],
    )
    def test_values(self, expr: str, expected: str) -> None:
        assert evaluate_math_expression(expr) == expected

    @pytest.mark.parametrize(
        "expr",
        [
            "10/0",
            "5 % 0",
            "abc",
            "1e5",
            "",
            "   ",
            "(2+3",
            "2+",
            "1 2",
            "1.2.3",
            "2**3",
            "()",
            "10^400",
            "(-8)^(1/3)",
            "0^-1",
            "2+2; import os",
            "9" * 400,
            "-" + "9" * 400,
            "(" + "9" * 400 + ")",
        ],
    )
    def test_no_result(self, expr: str) -> None:
        assert evaluate_math_expression(expr) is None

    def test_deep_nesting_is_no_result(self) -> None:
        expr = "(" * 500 + "1" + ")" * 500
        assert evaluate_math_expression(expr) is None

    def test_long_power_chain_does_not_recurse(self) -> None:
        assert evaluate_math_expression("^".join(["1"] * 2000)) == "1"


class TestEvaluate:
    def test_rejects_outside_whitelist_before_parsing(self) -> None:
        with pytest.raises(ExpressionError, match="Not an arithmetic expression"):
            evaluate("__import__('os')")

    def test_returns_float(self) -> None:
        assert evaluate("3*4") == 12.0


class TestTokenize:
    def test_oversized_literal_rejected(self) -> None:
        with pytest.raises(ExpressionError):
            tokenize("9" * 400)

    def test_tokens(self) -> None:
        tokens = tokenize("12.5 + (3)")
        assert [t.text for t in tokens] == ["12.5", "+", "(", "3", ")"]
        assert tokens[0].value == 12.5


class TestFormatNumber:
    def test_integer_has_no_decimal_point(self) -> None:
        assert format_number(1024.0) == "1,024"

    def test_fraction_digits_capped(self) -> None:
        assert format_number(2 / 3) == "0.6666666667"

    def test_negative_zero(self) -> None:
        assert format_number(-0.0) == "0"

    @pytest.mark.parametrize("value", [math.inf, -math.inf, math.nan])
    def test_non_finite_rejected(self, value: float) -> None:
        with pytest.raises(ExpressionError):
            format_number(value)

"""Tests for the pure helpers: calculate, factorial, parse_number, format_number."""

import math

import pytest

from calculator import CalculatorEngine, calculate, factorial, parse_number, unclosed_parens


class TestCalculate:
    @pytest.mark.parametrize("op, expected", [
        ("+", 8.0),
        ("-", 4.0),
        ("×", 12.0),
        ("÷", 3.0),
        ("^", 36.0),
        ("mod", 0.0),
        ("%", 0.12),
    ])
    def test_operators(self, op, expected):
        assert calculate(6.0, 2.0, op) == pytest.approx(expected)

    @pytest.mark.parametrize("x", [0.0, 1.0, -7.5, 1e300, -1e-300])
    def test_divide_by_zero_is_zero(self, x):
        result = calculate(x, 0.0, "÷")
        assert result == 0
        assert not math.isinf(result)

    def test_unknown_operator_returns_second_operand(self):
        assert calculate(3.0, 9.0, "?") == 9.0
        assert calculate(3.0, 9.0, "=") == 9.0

    def test_mod_follows_divisor_sign(self):
        assert calculate(-7.0, 3.0, "mod") == 2.0
        assert calculate(7.0, -3.0, "mod") == -2.0

    def test_mod_by_zero_is_nan(self):
        assert math.isnan(calculate(5.0, 0.0, "mod"))

    def test_power_overflow(self):
        assert calculate(10.0, 400.0, "^") == math.inf
        assert calculate(-10.0, 401.0, "^") == -math.inf

    def test_power_domain(self):
        assert math.isnan(calculate(-8.0, 1 / 3, "^"))
        assert calculate(0.0, -1.0, "^") == math.inf
        assert math.isnan(calculate(1.0, math.inf, "^"))

    def test_power_nan_exponent(self):
        assert math.isnan(calculate(1.0, math.nan, "^"))
        assert calculate(math.nan, 0.0, "^") == 1.0

    def test_mod_by_infinity_keeps_dividend(self):
        assert calculate(-5.0, math.inf, "mod") == -5.0
        assert calculate(5.0, -math.inf, "mod") == 5.0
        assert math.isnan(calculate(math.inf, 3.0, "mod"))

    def test_percent(self):
        assert calculate(200.0, 15.0, "%") == 30.0


class TestFactorial:
    @pytest.mark.parametrize("n", [-1.0, 2.5, -0.5, math.nan, math.inf, -math.inf])
    def test_invalid_is_nan(self, n):
        assert math.isnan(factorial(n))

    def test_base_cases(self):
        assert factorial(0.0) == 1
        assert factorial(1.0) == 1

    def test_small(self):
        assert factorial(5.0) == 120

    def test_matches_exact_product(self):
        assert factorial(20.0) == float(math.factorial(20))

    def test_overflow_is_inf(self):
        assert math.isfinite(factorial(170.0))
        assert factorial(171.0) == math.inf
        assert factorial(100000.0) == math.inf


class TestParseNumber:
    @pytest.mark.parametrize("text, expected", [
        ("0", 0.0),
        ("5.", 5.0),
        ("0.25", 0.25),
        ("-3", -3.0),
        ("1e+20", 1e20),
        ("12(3)", 12.0),
        ("inf", math.inf),
        ("-inf", -math.inf),
    ])
    def test_numeric_prefix(self, text, expected):
        assert parse_number(text) == expected

    @pytest.mark.parametrize("text", ["", "(", "(5", "abc", "."])
    def test_no_prefix_is_nan(self, text):
        assert math.isnan(parse_number(text))


class TestFormatNumber:
    @pytest.fixture
    def engine(self):
        return CalculatorEngine()

    @pytest.mark.parametrize("value, text", [
        (5.0, "5"),
        (-3.0, "-3"),
        (-0.0, "0"),
        (2.5, "2.5"),
        (0.1 + 0.2, "0.30000000000000004"),
        (1e16, "1e+16"),
        (math.nan, "nan"),
        (math.inf, "inf"),
        (-math.inf, "-inf"),
    ])
    def test_format(self, engine, value, text):
        assert engine.format_number(value) == text


def test_unclosed_parens():
    assert unclosed_parens("((1)") == 1
    assert unclosed_parens("())(") == 1
    assert unclosed_parens("12") == 0

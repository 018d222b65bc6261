import math

import pytest
import sympy

from qirk.ir.dtypes import (
    Calculator,
    as_resolver,
    is_symbolic,
    serialize_symbolic,
    substitute_symbolic,
    to_symbolic,
)
from qirk.ir.utilities import SubstitutionError


@pytest.mark.parametrize(
    "value, expected",
    [
        (1, 1.0),
        (0.25, 0.25),
        ("pi/4", math.pi / 4),
        ("2*3", 6.0),
        (sympy.pi, math.pi),
        (sympy.Rational(1, 2), 0.5),
    ],
    ids=["int", "float", "pi-string", "arithmetic-string", "sympy-pi", "rational"],
)
def test_constant_values_collapse_to_float(value, expected):
    converted = to_symbolic(value)
    assert isinstance(converted, float)
    assert converted == pytest.approx(expected)


@pytest.mark.parametrize("text", ["theta", "2*theta + phi", "PI", "lambda", "gamma"])
def test_strings_with_free_symbols_stay_symbolic(text):
    converted = to_symbolic(text)
    assert is_symbolic(converted)
    assert isinstance(converted, sympy.Expr)


def test_keyword_and_function_names_become_plain_symbols():
    assert to_symbolic("lambda") == sympy.Symbol("lambda")
    assert to_symbolic("gamma") == sympy.Symbol("gamma")


@pytest.mark.parametrize("value", [True, None, [1.0], 1j, "sqrt(-1)"])
def test_invalid_values_rejected(value):
    with pytest.raises(TypeError):
        to_symbolic(value)


def test_serialize_symbolic():
    assert serialize_symbolic(1.5) == 1.5
    assert serialize_symbolic(to_symbolic("2*theta")) == "2*theta"
    assert to_symbolic(serialize_symbolic(to_symbolic("theta/2 + phi"))) == to_symbolic("theta/2 + phi")


def test_calculator_evaluate():
    calc = Calculator({"theta": 0.5})
    assert calc.evaluate("2*theta") == 1.0
    calc.set_variable("phi", 2)
    assert calc.evaluate("theta + phi") == 2.5
    assert calc.evaluate(3) == 3.0


def test_calculator_unknown_symbol():
    calc = Calculator()
    with pytest.raises(SubstitutionError) as excinfo:
        calc.evaluate("theta")
    assert excinfo.value.symbol == "theta"


def test_substitute_reports_first_missing_symbol_in_name_order():
    expression = to_symbolic("zeta + alpha")
    with pytest.raises(SubstitutionError) as excinfo:
        substitute_symbolic(expression, Calculator())
    assert excinfo.value.symbol == "alpha"


def test_substitute_wraps_foreign_resolver_failures():
    class FailingResolver:
        def resolve(self, name):
            raise LookupError(name)

    with pytest.raises(SubstitutionError) as excinfo:
        substitute_symbolic(to_symbolic("theta"), FailingResolver())
    assert excinfo.value.symbol == "theta"
    assert isinstance(excinfo.value.__cause__, LookupError)


def test_substitute_non_real_result():
    with pytest.raises(SubstitutionError):
        substitute_symbolic(to_symbolic("sqrt(x)"), Calculator({"x": -1.0}))


def test_substitute_concrete_value_passes_through():
    assert substitute_symbolic(0.75, Calculator()) == 0.75


def test_as_resolver():
    resolver = as_resolver({"theta": 1.0})
    assert isinstance(resolver, Calculator)
    assert resolver.resolve("theta") == 1.0
    calc = Calculator()
    assert as_resolver(calc) is calc
    with pytest.raises(TypeError):
        as_resolver(42)


@pytest.mark.parametrize(
    "text, names",
    [
        ("2*gamma", {"gamma"}),
        ("gamma + beta", {"gamma", "beta"}),
        ("E", {"E"}),
        ("2*S", {"S"}),
        ("I + N*O - Q", {"I", "N", "O", "Q"}),
        ("lambda/2", {"lambda"}),
        ("sqrt(2)*sin(theta) + pi", {"theta"}),
    ],
)
def test_identifiers_are_free_symbols(text, names):
    converted = to_symbolic(text)
    assert is_symbolic(converted)
    assert {s.name for s in converted.free_symbols} == names


def test_expressions_over_sympy_names_substitute():
    calc = Calculator({"gamma": 0.5, "beta": 0.25, "S": 2.0, "E": 1.0})
    assert calc.evaluate("2*gamma") == 1.0
    assert calc.evaluate("gamma + beta") == 0.75
    assert calc.evaluate("2*S") == 4.0
    assert calc.evaluate("E") == 1.0


def test_math_names_keep_their_meaning():
    assert to_symbolic("cos(pi)") == -1.0
    assert to_symbolic("exp(0) + abs(-2)") == 3.0
    assert to_symbolic("1.5e1") == 15.0


@pytest.mark.parametrize(
    "text",
    [
        "__import__('os').getcwd() or theta",
        "theta.__class__",
        "(1).real",
        "theta.subs",
        "'theta'",
        "theta; x",
        "2*",
    ],
)
def test_non_arithmetic_strings_rejected(text):
    with pytest.raises(ValueError):
        to_symbolic(text)

import math

import pytest
import sympy as sp

from core.expression import (
    FormulaError,
    FormulaSyntaxError,
    Token,
    UnknownIdentifierError,
    compile_formula,
    normalize_expression,
    tokenize,
)
from core.grapher import check_formula, evaluate_function


@pytest.mark.parametrize("text, expected", [
    ("x^2", "x**2"),
    ("2x", "2*x"),
    ("1.5x", "1.5*x"),
    ("(x+1)x", "(x+1)*x"),
    ("x(x+1)", "x*(x+1)"),
    ("(x+1)(x-1)", "(x+1)*(x-1)"),
    ("(x+1)2", "(x+1)*2"),
    ("3sin(x)", "3*math.sin(x)"),
    ("sin(x)x", "math.sin(x)*x"),
    ("Math.sin(x)", "math.sin(x)"),
    ("abs(x)", "math.fabs(x)"),
    ("2PI", "2*math.pi"),
    ("2x^2 + sin(x)", "2*x**2+math.sin(x)"),
    ("pow(x, 2)", "math.pow(x,2)"),
])
def test_normalize_expression(text, expected):
    assert normalize_expression(text) == expected


def test_normalize_is_idempotent():
    once = normalize_expression("2x^2 - 3abs(x) + e^x")
    assert normalize_expression(once) == once


@pytest.mark.parametrize("text", ["x + (", "2 # x", "sin", ")(", "", "sine(x)"])
def test_normalize_passes_malformed_text_through(text):
    assert isinstance(normalize_expression(text), str)


def test_normalized_text_is_python_arithmetic():
    text = "2x^2+sin(x)-3abs(x)/(x+1)"
    for x in (-0.5, 1.5, 4.0):
        expected = eval(normalize_expression(text), {"math": math, "x": x})
        assert evaluate_function(text, x) == pytest.approx(expected)


def test_tokenize_keeps_unknown_characters():
    assert tokenize("x $ 1") == [Token("NAME", "x"), Token("ERROR", "$"), Token("NUMBER", "1")]


def test_digit_then_letter_is_always_a_product():
    assert tokenize("2e") == [Token("NUMBER", "2"), Token("CONST", "e")]
    assert tokenize("1.5e3") == [Token("NUMBER", "1.5"), Token("NAME", "e3")]
    assert normalize_expression("2e3") == "2*e3"
    assert normalize_expression("2e-1") == "2*math.e-1"
    assert evaluate_function("2e-1", 0) == pytest.approx(2 * math.e - 1)
    assert evaluate_function("2e-1", 0) == evaluate_function("2e - 1", 0)


def test_exponent_notation_is_not_a_number():
    with pytest.raises(UnknownIdentifierError) as exc:
        compile_formula("2e3")
    assert exc.value.name == "e3"


@pytest.mark.parametrize("text, x, expected", [
    ("x^2", 3, 9),
    ("x^2", -3, 9),
    ("-x^2", 3, -9),
    ("2^3^2", 0, 512),
    ("2^-1", 0, 0.5),
    ("2x^2", 3, 18),
    ("x(x+1)", 2, 6),
    ("(x+1)(x-1)", 3, 8),
    ("10/2/5", 0, 1),
    ("8-3-2", 0, 3),
    ("pow(2, x)", 3, 8),
    ("Math.sqrt(x)", 9, 3),
    ("abs(x)", -2.5, 2.5),
    ("log(E)", 0, 1),
    ("2PI", 0, 2 * math.pi),
    ("e^x", 1, math.e),
    ("0", 5, 0),
])
def test_evaluate_values(text, x, expected):
    assert evaluate_function(text, x) == pytest.approx(expected)


def test_two_x_matches_explicit_product():
    for x in (-2.0, 0.0, 0.7, 3.0):
        assert evaluate_function("2x", x) == evaluate_function("2*x", x)


def test_bare_function_name_followed_by_variable():
    assert evaluate_function("sin(x)x", 2.0) == pytest.approx(math.sin(2.0) * 2.0)


@pytest.mark.parametrize("ours, reference", [
    ("2x^2 - 3x + 1", "2*x**2 - 3*x + 1"),
    ("sin(x)x", "sin(x)*x"),
    ("sqrt(abs(x)) + exp(-x^2)", "sqrt(Abs(x)) + exp(-x**2)"),
    ("(x+1)(x-2)/3", "(x+1)*(x-2)/3"),
    ("log(x^2+1)", "log(x**2+1)"),
    ("pow(x,3) - PI", "x**3 - pi"),
    ("cos(2x)tan(x/4)", "cos(2*x)*tan(x/4)"),
])
def test_matches_sympy(ours, reference):
    x = sp.Symbol("x")
    f = sp.lambdify(x, sp.sympify(reference, locals={"Abs": sp.Abs}), modules="math")
    for value in (-2.5, -1.0, 0.3, 1.0, 4.0):
        assert evaluate_function(ours, value) == pytest.approx(f(value))


@pytest.mark.parametrize("text, x", [
    ("1/x", 0),
    ("sqrt(x)", -1),
    ("log(x)", -1),
    ("log(x)", 0),
    ("exp(x)", 1000),
    ("x^0.5", -4),
    ("10^x", 400),
    ("x*10^308*10", 1),
])
def test_undefined_points(text, x):
    assert evaluate_function(text, x) is None


@pytest.mark.parametrize("text", ["sine(x)", "y+1", "x2", "x+", "(x+1", "", "2 3", None])
def test_malformed_formula_is_undefined_not_an_error(text):
    assert evaluate_function(text, 1.0) is None


@pytest.mark.parametrize("text, name", [
    ("sine(x)", "sine"),
    ("y+1", "y"),
    ("x2", "x2"),
    ("Math.foo(x)", "Math.foo"),
])
def test_unknown_identifiers(text, name):
    with pytest.raises(UnknownIdentifierError) as exc:
        compile_formula(text)
    assert exc.value.name == name


@pytest.mark.parametrize("text, message", [
    ("x+", "end of formula"),
    ("(x+1", "Expected ')'"),
    ("", "empty"),
    ("   ", "empty"),
    ("2 3", "number 3"),
    ("x # 2", "character '#'"),
    ("pow(x)", "pow() takes 2 arguments, got 1"),
    ("sin(x, 2)", "sin() takes 1 argument, got 2"),
    ("sin x", "'(' after sin"),
])
def test_syntax_errors(text, message):
    with pytest.raises(FormulaSyntaxError) as exc:
        compile_formula(text)
    assert message in str(exc.value)


def test_deep_nesting_is_rejected():
    with pytest.raises(FormulaSyntaxError):
        compile_formula("(" * 500 + "x" + ")" * 500)
    with pytest.raises(FormulaSyntaxError):
        compile_formula("-" * 500 + "x")


def test_formula_error_is_value_error():
    assert issubclass(FormulaError, ValueError)


def test_compiled_formula():
    formula = compile_formula("2x^2")
    assert formula.text == "2x^2"
    assert formula.normalized == "2*x**2"
    assert formula(3) == 18
    assert formula.evaluate(float("nan")) is None
    assert compile_formula("2x^2") is formula


def test_custom_variable_name():
    formula = compile_formula("3t+1", "t")
    assert formula.evaluate(2) == 7
    with pytest.raises(UnknownIdentifierError):
        compile_formula("3x+1", "t")


def test_long_flat_chains_evaluate():
    n = 1500
    assert evaluate_function("+".join(["x"] * n), 1.0) == n
    assert evaluate_function("-".join(["x"] * n), 1.0) == 2 - n
    assert evaluate_function("*".join(["x"] * n), 1.0) == 1
    assert check_formula("+".join(["x"] * n)) is None


def test_chain_folds_left_to_right():
    assert evaluate_function("20/2/5-1-1", 0) == 0
    assert evaluate_function("2*3^2-4/2", 0) == 16

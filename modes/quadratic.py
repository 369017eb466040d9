# modes/quadratic.py
import re
import sympy as sp

from core import config
from utils.formatting import format_number

name = "Quadratic"
tags = ["quadratic", "parabola", "coefficients"]
priority = 10

_NUM = r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?"
_COEFF_RE = re.compile(r"\b([abc])\s*=\s*(" + _NUM + ")")
_NUMBER_RE = re.compile(_NUM)

def can_handle(text: str) -> bool:
    t = text.strip().lower()
    if not t:
        return False
    if t.split()[0] in ("quadratic", "quad"):
        return True
    return bool(_COEFF_RE.search(t)) and "x" not in t

def parse_coefficients(text: str) -> dict:
    """Read "a=1 b=-2 c=3" or "quadratic 1 -2 3"; missing ones keep their defaults."""
    coeffs = dict(config.DEFAULT_COEFFICIENTS)
    t = text.strip().lower()
    named = _COEFF_RE.findall(t)
    if named:
        for key, value in named:
            coeffs[key] = float(value)
        return coeffs
    parts = t.split(None, 1)
    rest = parts[1] if len(parts) > 1 else ""
    for key, value in zip("abc", _NUMBER_RE.findall(rest)):
        coeffs[key] = float(value)
    return coeffs

def build_quadratic_formula(a: float, b: float, c: float) -> str:
    term_a = f"{format_number(a)}x^2" if a != 0 else ""
    term_b = f"{'+' if b > 0 and term_a else ''}{format_number(b)}x" if b != 0 else ""
    term_c = f"{'+' if c > 0 and (term_a or term_b) else ''}{format_number(c)}" if c != 0 else ""
    formula = f"{term_a}{term_b}{term_c}" or "0"
    return formula.replace("+-", "-")

def describe_quadratic(a: float, b: float, c: float) -> str:
    fb = ("+" if b >= 0 else "") + format_number(b)
    fc = ("+" if c >= 0 else "") + format_number(c)
    return f"f(x) = {format_number(a)}x² {fb}x {fc}"

def _exact(value) -> sp.Rational:
    return sp.Rational(format_number(value))

def explain_quadratic(a: float, b: float, c: float) -> dict:
    """Shape of the parabola: direction, intercept, vertex and real roots."""
    x = sp.Symbol(config.VARIABLE)
    A, B, C = _exact(a), _exact(b), _exact(c)
    formula = build_quadratic_formula(a, b, c)
    steps = [f"Function: f(x) = {formula}"]

    if A == 0:
        steps.append("a = 0: no x² term, so the graph is a straight line, not a parabola")
        steps.append(f"b = {B}: slope of the line")
        steps.append(f"c = {C}: the line crosses the y-axis at (0, {C})")
        if B == 0:
            roots = []
            answer = "Every x is a root" if C == 0 else "No roots"
        else:
            roots = [-C / B]
            steps.append(f"Solve {B}x + {C} = 0: x = {roots[0]}")
            answer = f"x = {roots[0]}"
        meta = {"key_idea": "linear function", "roots": roots, "y_intercept": C}
        return {"answer": answer, "steps": steps, "meta": meta}

    direction = "opens upward" if A > 0 else "opens downward"
    if abs(A) > 1:
        stretch = "narrower than x²"
    elif abs(A) < 1:
        stretch = "wider than x²"
    else:
        stretch = "the same width as x²"
    disc = B**2 - 4 * A * C
    vertex = (-B / (2 * A), C - B**2 / (4 * A))
    expr = A * x**2 + B * x + C
    roots = sorted((r for r in sp.solve(sp.Eq(expr, 0), x) if r.is_real), key=float)

    steps.append(f"a = {A}: the parabola {direction} and is {stretch}")
    steps.append(f"b = {B}: slope of the graph where it meets the y-axis")
    steps.append(f"c = {C}: the graph crosses the y-axis at (0, {C})")
    steps.append(f"Discriminant: b² - 4ac = {disc}")
    steps.append(f"Vertex: x = -b/(2a) = {vertex[0]}, f(x) = {vertex[1]}")
    if disc > 0:
        steps.append(f"Discriminant > 0: two real roots {roots}")
    elif disc == 0:
        steps.append(f"Discriminant = 0: one repeated root {roots}")
    else:
        steps.append("Discriminant < 0: no real roots, the graph never touches the x-axis")

    meta = {
        "key_idea": "quadratic formula",
        "direction": direction,
        "vertex": vertex,
        "discriminant": disc,
        "roots": roots,
        "y_intercept": C,
    }
    answer = f"x = {roots}" if roots else "No real roots"
    return {"answer": answer, "steps": steps, "meta": meta}

def to_formula(text: str) -> str:
    return build_quadratic_formula(**parse_coefficients(text))

def describe(text: str) -> str:
    return describe_quadratic(**parse_coefficients(text))

def explain(text: str) -> dict:
    return explain_quadratic(**parse_coefficients(text))

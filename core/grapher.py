# core/grapher.py
from typing import Dict, List, Optional

from core import config
from core.expression import FormulaError, compile_formula

# marks a sample where the formula has no finite value
UNDEFINED = None


def evaluate_function(expression: str, x: float) -> Optional[float]:
    """
    Value of `expression` at `x`, or UNDEFINED.
    Never raises: malformed formulas are undefined everywhere.
    """
    try:
        formula = compile_formula(expression, config.VARIABLE)
    except Exception:
        return UNDEFINED
    return formula.evaluate(x)


def check_formula(expression: str) -> Optional[str]:
    """Error message for a malformed formula, None when it compiles."""
    try:
        compile_formula(expression, config.VARIABLE)
    except FormulaError as e:
        return str(e)
    return None


def generate_graph_data(
    expression: str,
    x_min: float,
    x_max: float,
    points: int = config.DEFAULT_POINTS,
) -> List[Dict]:
    """
    Sample `expression` at points + 1 evenly spaced x values from x_min.
    Undefined samples are kept (y is None) so a chart can leave gaps.
    """
    if points < 1:
        raise ValueError("points must be at least 1")
    try:
        formula = compile_formula(expression, config.VARIABLE)
    except FormulaError:
        formula = None

    data = []
    step = (x_max - x_min) / points
    for i in range(points + 1):
        x = x_min + i * step
        # + 0.0 clears negative zero left by rounding
        clean_x = round(x, config.DISPLAY_DECIMALS) + 0.0
        y = formula.evaluate(x) if formula is not None else UNDEFINED
        data.append({"x": clean_x, "y": y})
    return data


def count_undefined(series: List[Dict]) -> int:
    return sum(1 for p in series if p["y"] is UNDEFINED)

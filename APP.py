# APP.py

import sys
from typing import Dict, List, Optional, Tuple

import pandas as pd

from core import config
from core.expression import normalize_expression
from core.grapher import check_formula, count_undefined, generate_graph_data
from core.logger import log_plot
from core.plugins import find_mode_for, load_modes
from utils.formatting import format_number, format_series, table_stride

MODES = load_modes()

# ---------------------------
# Plotting
# ---------------------------
def plot_formula(text: str, x_range: Tuple[float, float], points: int = config.PLOT_POINTS,
                 modes: Optional[List] = None) -> Optional[Dict]:
    """
    Route the input to a formula mode, then sample it over x_range.
    Returns None when no mode accepts the input.
    """
    modes = MODES if modes is None else modes
    mode = find_mode_for(text, modes)
    if mode is None:
        return None

    formula = mode.to_formula(text)
    x_min, x_max = x_range
    result = {
        "mode": mode.name,
        "formula": formula,
        "normalized": normalize_expression(formula),
        "description": mode.describe(text) if hasattr(mode, "describe") else f"f(x) = {formula}",
        "explanation": mode.explain(text) if hasattr(mode, "explain") else None,
        "x_min": x_min,
        "x_max": x_max,
        "points": points,
        "series": [],
        "error": check_formula(formula),
    }
    if result["error"] is None:
        result["series"] = generate_graph_data(formula, x_min, x_max, points)

    log_plot(result)
    return result

def render_result(result: Optional[Dict]) -> List[str]:
    if result is None:
        return ["Type a formula, e.g. x^2-4, or quadratic 1 -2 -3."]
    lines = [f"Mode: {result['mode']}", result["description"]]
    if result["error"]:
        lines.append(f"Invalid formula syntax: {result['error']}")
        return lines

    series = result["series"]
    lines.append(f"Evaluated as: {result['normalized']}")
    lines.extend(format_series(series, table_stride(len(series))))
    lines.append(
        f"{len(series)} points on [{format_number(result['x_min'])}, {format_number(result['x_max'])}], "
        f"{count_undefined(series)} undefined"
    )
    explanation = result.get("explanation")
    if explanation:
        lines.append("Answer: " + explanation.get("answer", ""))
        lines.append("Steps:")
        for s in explanation.get("steps", []):
            lines.append(f"- {s}")
    return lines

def export_series(series: List[Dict], path: str) -> int:
    """Write x,y columns to CSV; undefined samples become empty cells."""
    df = pd.DataFrame(series, columns=["x", "y"])
    df.to_csv(path, index=False)
    return len(df)

# ---------------------------
# CLI
# ---------------------------
def run_cli():
    print("X-Grapher — CLI mode")
    print("Examples: x^2-4   2x+sin(x)   quadratic 1 -2 -3   a=0.5 c=-2")
    print("Commands: 'range MIN MAX', 'export FILE.csv', 'exit'")
    x_range = (config.DEFAULT_X_MIN, config.DEFAULT_X_MAX)
    last = None
    while True:
        try:
            q = input("\nf(x) = ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nGoodbye!")
            return
        if not q:
            continue
        if q.lower() in ("exit", "quit"):
            print("Goodbye!")
            return

        words = q.split()
        command = words[0].lower()
        if command == "range":
            try:
                x_range = (float(words[1]), float(words[2]))
            except (IndexError, ValueError):
                print("Usage: range MIN MAX")
                continue
            print(f"Range set to [{format_number(x_range[0])}, {format_number(x_range[1])}]")
            continue
        if command == "export":
            if len(words) < 2:
                print("Usage: export FILE.csv")
            elif last is None or not last["series"]:
                print("Nothing to export yet.")
            else:
                try:
                    n = export_series(last["series"], words[1])
                    print(f"Saved {n} points to {words[1]}")
                except OSError as e:
                    print(f"Export failed: {e}")
            continue

        last = plot_formula(q, x_range)
        for line in render_result(last):
            print(line)

def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        run_cli()
        return 0
    result = plot_formula(" ".join(argv), (config.DEFAULT_X_MIN, config.DEFAULT_X_MAX))
    for line in render_result(result):
        print(line)
    return 1 if result is None or result["error"] else 0

# ---------------------------
# Entry point
# ---------------------------
if __name__ == "__main__":
    sys.exit(main())

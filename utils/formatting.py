# utils/formatting.py
import math
from decimal import Decimal
from typing import Dict, List

from core import config


def format_number(value) -> str:
    """Shortest display form: 1.0 -> "1", 0.5 -> "0.5", -0.0 -> "0"."""
    value = float(value)
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    text = repr(value)
    if "e" in text and math.isfinite(value):
        # formulas have no exponent notation: 1e-07 -> 0.0000001
        text = format(Decimal(text), "f")
    return text


def format_series(series: List[Dict], stride: int = 1) -> List[str]:
    """Table rows for every `stride`-th sample; the last sample is always shown."""
    stride = max(1, int(stride))
    rows = [f"{'x':>10}  {'f(x)':>14}"]
    picked = series[::stride]
    if series and picked[-1] is not series[-1]:
        picked.append(series[-1])
    for p in picked:
        y = "undefined" if p["y"] is None else f"{p['y']:.6g}"
        rows.append(f"{p['x']:>10.2f}  {y:>14}")
    return rows


def table_stride(count: int, max_stride: int = None) -> int:
    """About ten rows for long series, every row for short ones."""
    if max_stride is None:
        max_stride = config.TABLE_STRIDE
    return max(1, min(max_stride, count // 10))

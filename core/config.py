# core/config.py
import os

# Grapher settings; env vars override the plotting defaults
VARIABLE = "x"
DEFAULT_POINTS = 100
PLOT_POINTS = int(os.environ.get("X_GRAPHER_POINTS", "200"))
DISPLAY_DECIMALS = 2

DEFAULT_X_MIN = float(os.environ.get("X_GRAPHER_X_MIN", "-10"))
DEFAULT_X_MAX = float(os.environ.get("X_GRAPHER_X_MAX", "10"))

# quadratic mode starts at f(x) = x^2
DEFAULT_COEFFICIENTS = {"a": 1.0, "b": 0.0, "c": 0.0}

# longest gap between printed rows in the CLI table; short series print every row
TABLE_STRIDE = 20

LOGFILE = os.environ.get("X_GRAPHER_LOG") or os.path.join(os.getcwd(), "x_grapher_log.jsonl")

# core/logger.py
import json, datetime

from core import config

def _entry(result: dict) -> dict:
    series = result.get("series") or []
    return {
        "ts": datetime.datetime.now().isoformat(),
        "mode": result.get("mode"),
        "formula": result.get("formula"),
        "normalized": result.get("normalized"),
        "domain": [result.get("x_min"), result.get("x_max")],
        "points": result.get("points"),
        "undefined": sum(1 for p in series if p["y"] is None),
        "error": result.get("error"),
    }

def log_plot(result: dict):
    """Append one JSON line per plotted formula; a failed write never stops plotting."""
    try:
        with open(config.LOGFILE, "a", encoding="utf-8") as f:
            f.write(json.dumps(_entry(result), default=str) + "\n")
    except OSError:
        pass

# modes/custom.py
import re

name = "Custom f(x)"
tags = ["custom", "formula", "function"]
priority = 100

_PREFIX_RE = re.compile(r"^\s*(?:f\s*\(\s*x\s*\)|y)\s*=\s*", re.IGNORECASE)

def can_handle(text: str) -> bool:
    return bool(text and text.strip())

def to_formula(text: str) -> str:
    # allow "f(x) = x^2" and "y = x^2"
    return _PREFIX_RE.sub("", text, count=1).strip()

def describe(text: str) -> str:
    return f"f(x) = {to_formula(text)}"

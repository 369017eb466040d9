# core/plugins.py
import importlib, pkgutil

REQUIRED = ("name", "can_handle", "to_formula")

def is_mode(module) -> bool:
    return all(hasattr(module, attr) for attr in REQUIRED)

def load_modes(package="modes"):
    """Formula modes found in `package`, most specific (lowest priority) first."""
    try:
        pkg = importlib.import_module(package)
    except Exception:
        return []
    modes = []
    for _, modname, ispkg in pkgutil.iter_modules(pkg.__path__):
        if ispkg:
            continue
        try:
            module = importlib.import_module(f"{package}.{modname}")
        except Exception:
            continue
        if is_mode(module):
            modes.append(module)
    return sorted(modes, key=lambda m: (getattr(m, "priority", 100), m.name))

def find_mode_for(text, modes):
    """First mode that accepts `text`; blank input matches nothing."""
    if not text or not text.strip():
        return None
    return next((m for m in modes if m.can_handle(text)), None)

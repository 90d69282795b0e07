from __future__ import annotations
import os, sys

# 0 = silent, 1 = normal, 2 = verbose
def log_level() -> int:
    try:
        return int(os.environ.get("GARDENFORGE_LOG", "1"))
    except ValueError:
        return 1


def log(tag: str, msg: str, level: int = 1):
    """Print one tagged diagnostic line, e.g. ``[BAL] 12 stages scored``."""
    if log_level() < level:
        return
    print(f"[{tag}] {msg}", file=sys.stderr, flush=True)

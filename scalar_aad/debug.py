# scalar_aad/debug.py
"""Namespaced logging for the engine.

Quiet by default. Call `enable(True)` (or set SCALAR_AAD_DEBUG=1) to get
timestamped output from every module under the "scalar_aad" logger.

- dbg(name): child logger "scalar_aad.<name>"
- enable(flag): turn output on/off
- is_enabled(): check the global flag
"""
from __future__ import annotations

import logging
import os
import threading

ROOT = "scalar_aad"

_ENABLED = bool(int(os.getenv("SCALAR_AAD_DEBUG", "0") or "0"))
_LOCK = threading.Lock()


def enable(flag: bool = True, *, level: int = logging.DEBUG) -> None:
    """Enable or disable log output for the whole package."""
    global _ENABLED
    with _LOCK:
        _ENABLED = bool(flag)
        lg = logging.getLogger(ROOT)
        if _ENABLED:
            if not any(isinstance(h, logging.StreamHandler) for h in lg.handlers):
                h = logging.StreamHandler()
                fmt = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
                h.setFormatter(logging.Formatter(fmt=fmt, datefmt="%H:%M:%S"))
                lg.addHandler(h)
            lg.setLevel(level)
        else:
            lg.setLevel(logging.WARNING)


def is_enabled() -> bool:
    return _ENABLED


def dbg(name: str) -> logging.Logger:
    """Return a child logger under the package namespace."""
    if _ENABLED and not logging.getLogger(ROOT).handlers:
        enable(True)
    return logging.getLogger(f"{ROOT}.{name}")


__all__ = ["enable", "is_enabled", "dbg"]

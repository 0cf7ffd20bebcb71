# scalar_aad/ops/transcendental.py
from .arithmetic import _unary


def exp(x):
    return _unary(x, "exp")


def log(x):
    """Natural log; -inf at 0 and nan below, no exception."""
    return _unary(x, "log")

# scalar_aad/ops/special.py
from .arithmetic import _unary, add, div, neg
from .transcendental import exp


def relu(x):
    """max(x, 0); gradient passes through only where x > 0."""
    return _unary(x, "relu")


def sigmoid(x):
    """
    Logistic activation 1 / (1 + exp(-x)), composed from primitives so the
    backward pass needs no dedicated rule.
    """
    return div(1.0, add(1.0, exp(neg(x))))

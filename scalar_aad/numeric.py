# scalar_aad/numeric.py
"""
Helpers for code written once over "value-like" numbers.

A network can run on `Node`s (differentiable, for training) or on plain
floats (fast, for inference) if it only uses +, *, /, construction from a
float, `exp` and `as_float`. These helpers dispatch on the argument type.
"""
from __future__ import annotations

import math
from typing import Iterable, List, Union

from .core.node import Node
from .ops.transcendental import exp as _node_exp

Number = Union[Node, float]


def is_differentiable(x) -> bool:
    return isinstance(x, Node)


def lift(x: float, like: Number) -> Number:
    """Constant of the same flavour as `like`: a Node on its graph, or a float."""
    if isinstance(like, Node):
        return like.graph.const(x)
    return float(x)


def exp(x: Number) -> Number:
    if isinstance(x, Node):
        return _node_exp(x)
    try:
        return math.exp(x)
    except OverflowError:
        return math.inf


def as_float(x: Number) -> float:
    return x.value if isinstance(x, Node) else float(x)


def freeze(params: Iterable[Number]) -> List[float]:
    """Plain-float snapshot of parameters for a non-differentiable path."""
    return [as_float(p) for p in params]

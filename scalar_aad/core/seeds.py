# scalar_aad/core/seeds.py

#-----------------------------------------------------------------------------
# We "plant" a seed (dy/dy = 1) at the scalar output and let gradients grow
# backwards through the graph.
#-----------------------------------------------------------------------------
from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List

from .engine import backward
from .graph import use_graph
from .node import Node


def value(x: Any) -> Any:
    """Return the numeric value of a Node; pass through plain numbers unchanged."""
    return x.value if isinstance(x, Node) else x


def _output(y: Any, graph) -> Node:
    # A function that ignores its inputs still yields a (constant) output
    return y if isinstance(y, Node) else graph.const(y)


# ----------------------------- single-input grad ----------------------------- #
def grad(f: Callable[[Node], Node], x0: float) -> float:
    """
    Derivative of a scalar function y=f(x) at x0.
    Runs one reverse pass within a fresh, isolated graph.
    """
    with use_graph() as g:
        x = g.param("x", x0)
        backward(_output(f(x), g))
        return x.grad


# ----------------------------- multi-input grads ----------------------------- #
def grads(f: Callable[[Dict[str, Node]], Node],
          inputs: Dict[str, float]) -> Dict[str, float]:
    """
    Gradient of y=f(vars) w.r.t. ALL inputs (dict form), from ONE reverse pass.

    Parameters
    ----------
    f       : function taking a dict {name: Node} and returning a Node
    inputs  : dict {name: number}

    Returns
    -------
    dict {name: float}  # same key order as `inputs`
    """
    with use_graph() as g:
        xs = {k: g.param(k, v) for k, v in inputs.items()}
        backward(_output(f(xs), g))
        return {k: xs[k].grad for k in inputs.keys()}


def grads_list(f: Callable[[List[Node]], Node], x0_list: Iterable[float]) -> List[float]:
    """
    Same as grads(), but the inputs are a list and so is the result.

    Example
    -------
    f = lambda xs: xs[0]*xs[0] + 3*xs[1]
    grads_list(f, [2.0, 4.0]) -> [4.0, 3.0]
    """
    with use_graph() as g:
        xs = [g.param(f"x{i}", v) for i, v in enumerate(x0_list)]
        backward(_output(f(xs), g))
        return [x.grad for x in xs]

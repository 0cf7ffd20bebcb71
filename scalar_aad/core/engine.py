# scalar_aad/core/engine.py
from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Union

import numpy as np

from ..debug import dbg
from .graph import Graph, current_graph
from .node import BinaryOp, Leaf, Node, UnaryOp

log = dbg("engine")


# ---------------- forward rules ---------------- #
def evaluate(op: str, x: float, y: Optional[float] = None,
             exponent: Optional[float] = None,
             base: Optional[float] = None) -> float:
    """
    Forward rule of a primitive on plain floats.

    Non-finite results (overflow, negative base to a fractional power, log of
    a non-positive number) are returned as inf/nan, never raised.
    """
    with np.errstate(all="ignore"):
        x = np.float64(x)
        if op == "add":
            out = x + y
        elif op == "mul":
            out = x * y
        elif op == "pow":
            out = np.power(x, exponent)
        elif op == "rpow":
            out = np.power(np.float64(base), x)
        elif op == "exp":
            out = np.exp(x)
        elif op == "log":
            out = np.log(x)
        elif op == "relu":
            out = np.maximum(x, 0.0)
        else:
            raise ValueError(f"unknown primitive {op!r}")
    return float(out)


def topological_order(root: Node) -> List[Node]:
    """
    All nodes reachable from `root`, each one after every node that consumes it.

    Iterative depth-first search with a visited set keyed by identity; the
    reversed post-order starts at `root` and ends at the leaves.
    """
    visited = set()
    post: List[Node] = []
    stack = [(root, False)]
    while stack:
        node, expanded = stack.pop()
        if expanded:
            post.append(node)
            continue
        if id(node) in visited:
            continue
        visited.add(id(node))
        stack.append((node, True))
        for child in node.operands:
            if id(child) not in visited:
                stack.append((child, False))
    post.reverse()
    return post


# ---------------- backward rules ---------------- #
def _local_backward(node: Node, g: np.float64, adj: Dict[int, np.float64]) -> None:
    """Add this node's contribution g * (∂node/∂operand) into its operands' adjoints."""
    kind = node.kind
    if isinstance(kind, Leaf):
        return

    if isinstance(kind, BinaryOp):
        a, b = kind.left, kind.right
        if kind.op == "add":
            da, db = g, g
        elif kind.op == "mul":
            da, db = b.value * g, a.value * g
        else:
            raise ValueError(f"unknown binary primitive {kind.op!r}")
        # a and b may be the same node (x + x); both contributions land on it
        adj[id(a)] = adj.get(id(a), 0.0) + da
        adj[id(b)] = adj.get(id(b), 0.0) + db
        return

    a = kind.operand
    av = np.float64(a.value)
    if kind.op == "pow":
        p = kind.exponent
        da = p * np.power(av, p - 1.0) * g
    elif kind.op == "rpow":
        # d/dx c**x = c**x * log(c); where c**x == 0 the slope is 0, not 0 * log(0)
        if node.value == 0.0:
            da = np.float64(0.0)
        else:
            da = node.value * np.log(np.float64(kind.base)) * g
    elif kind.op == "exp":
        # d/dx exp(x) = exp(x): reuse the cached forward value
        da = node.value * g
    elif kind.op == "log":
        da = g / av
    elif kind.op == "relu":
        da = g if av > 0 else np.float64(0.0)
    else:
        raise ValueError(f"unknown unary primitive {kind.op!r}")
    adj[id(a)] = adj.get(id(a), 0.0) + da


def backward(root: Node, seed: float = 1.0) -> None:
    """
    Run a single reverse pass from `root`.

    Notes:
        - The pass seeds d(root)/d(root) = `seed` and propagates adjoints in
          reverse topological order, each node's rule running exactly once.
        - The pass's adjoints are then *added* into `.grad`. Calling backward
          again without `zero_grad` therefore adds the same amounts a second
          time.
        - inf/nan are propagated as-is.
    """
    order = topological_order(root)
    adj: Dict[int, np.float64] = {id(root): np.float64(seed)}
    with np.errstate(all="ignore"):
        for node in order:
            _local_backward(node, np.float64(adj.get(id(node), 0.0)), adj)
        for node in order:
            node.grad = float(np.float64(node.grad) + adj.get(id(node), 0.0))
    log.debug("backward from node %d: %d nodes swept", root.index, len(order))


def zero_grad(target: Union[None, Node, Graph, Iterable[Node]] = None) -> None:
    """
    Reset gradients to zero.

    target : None      -> every live node of the current graph
             Node      -> that node
             Graph     -> every live node of that graph
             iterable  -> each node in it (e.g. a parameter list)
    """
    if target is None:
        current_graph().zero_grad()
    elif isinstance(target, Node):
        target.zero_grad()
    elif isinstance(target, Graph):
        target.zero_grad()
    else:
        for n in target:
            n.zero_grad()


def recompute(root: Node) -> float:
    """
    Evaluate `root` again from the current leaf values.

    Cached `.value` fields are left untouched: this answers "what would the
    graph produce now" after leaves were overwritten, without dirty propagation.
    """
    vals: Dict[int, float] = {}
    for node in reversed(topological_order(root)):
        kind = node.kind
        if isinstance(kind, Leaf):
            v = node.value
        elif isinstance(kind, UnaryOp):
            v = evaluate(kind.op, vals[id(kind.operand)], exponent=kind.exponent,
                         base=kind.base)
        else:
            v = evaluate(kind.op, vals[id(kind.left)], vals[id(kind.right)])
        vals[id(node)] = v
    return vals[id(root)]

# scalar_aad/core/graph.py
from __future__ import annotations

import threading
import weakref
from contextlib import contextmanager
from typing import TYPE_CHECKING, List, Optional

from ..debug import dbg
from ..errors import ForeignNodeError

if TYPE_CHECKING:
    from .node import Node

log = dbg("graph")


class Graph:
    """
    Arena that records nodes in construction order.

    The arena only holds weak references: a node disappears from it once
    nothing else refers to it. Indices are never reused, so `node.index`
    stays a stable handle for the node's lifetime.
    """

    def __init__(self, name: Optional[str] = None):
        self.name = name
        self._nodes: "weakref.WeakValueDictionary[int, Node]" = weakref.WeakValueDictionary()
        self._next = 0

    def __repr__(self):
        return f"Graph(name={self.name!r}, nodes={len(self)})"

    def __len__(self):
        return len(self._nodes)

    def __contains__(self, node) -> bool:
        return getattr(node, "graph", None) is self and self._nodes.get(node.index) is node

    def record(self, node: "Node") -> int:
        """Register `node` and return its index."""
        idx = self._next
        self._next += 1
        self._nodes[idx] = node
        return idx

    def reset(self):
        """Forget every recorded node. Older nodes fail `check` and cannot be combined."""
        log.debug("reset graph %r (%d live nodes)", self.name, len(self._nodes))
        self._nodes.clear()

    # ------------------------------------------------------------------ #
    # constructors
    # ------------------------------------------------------------------ #
    def param(self, name: str, value) -> "Node":
        """Named, mutable leaf."""
        from .node import Node
        return Node(value, name, graph=self)

    def const(self, value, *, mutable: bool = False) -> "Node":
        """Unnamed leaf; immutable unless asked otherwise."""
        from .node import Node
        return Node(value, mutable=mutable, graph=self)

    # ------------------------------------------------------------------ #
    # queries
    # ------------------------------------------------------------------ #
    def check(self, node: "Node") -> "Node":
        """Return `node` if it belongs to this graph, else raise ForeignNodeError."""
        if node not in self:
            raise ForeignNodeError(f"{node!r} does not belong to {self!r}")
        return node

    def nodes(self) -> List["Node"]:
        """Live nodes in construction order."""
        return [n for _, n in sorted(self._nodes.items(), key=lambda kv: kv[0])]

    def leaves(self) -> List["Node"]:
        return [n for n in self.nodes() if n.is_leaf]

    def set(self, node: "Node", value) -> None:
        self.check(node).set_value(value)

    def expr(self, node: "Node") -> str:
        return self.check(node).expr()

    def recompute(self, node: "Node") -> float:
        from .engine import recompute
        return recompute(self.check(node))

    def zero_grad(self, *, leaves_only: bool = False):
        """Zero gradients of every live node (or only of the leaves)."""
        for n in (self.leaves() if leaves_only else self.nodes()):
            n.grad = 0.0


# One default graph per thread, swapped by use_graph()
_state = threading.local()


def current_graph() -> Graph:
    g = getattr(_state, "graph", None)
    if g is None:
        g = _state.graph = Graph(name="default")
    return g


@contextmanager
def use_graph(graph: Optional[Graph] = None):
    """
    Context manager to temporarily build on another graph (fresh by default):
        with use_graph() as g:
            ... build computation ...
            backward(y)
    """
    prev = current_graph()
    try:
        _state.graph = graph if graph is not None else Graph()
        yield _state.graph
    finally:
        _state.graph = prev

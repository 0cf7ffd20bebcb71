# scalar_aad/core/__init__.py

"""
Core public API of the engine.

Exports:
    Node          : The differentiable scalar recorded on a graph.
    Graph         : Arena recording nodes in construction order.
    current_graph : The per-thread default graph.
    use_graph     : Context manager to temporarily switch the current graph.
    backward      : Run one reverse pass and accumulate gradients.
    zero_grad     : Reset gradients (node, list, graph, or current graph).
    recompute     : Re-evaluate an output from current leaf values.
    grad, grads   : Convenience: derivatives of a plain Python function.
    value         : Convenience: extract the primal value from a Node.
"""

from .node import Node, Leaf, UnaryOp, BinaryOp
from .graph import Graph, current_graph, use_graph
from .engine import backward, zero_grad, recompute, topological_order
from .seeds import grad, grads, grads_list, value

__all__ = [
    "Node", "Leaf", "UnaryOp", "BinaryOp",
    "Graph", "current_graph", "use_graph",
    "backward", "zero_grad", "recompute", "topological_order",
    "grad", "grads", "grads_list", "value",
]

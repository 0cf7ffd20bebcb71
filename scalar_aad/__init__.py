# scalar_aad/__init__.py
# Scalar reverse-mode automatic differentiation

from .core.node import Node
from .core.graph import Graph, current_graph, use_graph
from .core.engine import backward, zero_grad, recompute, topological_order
from .core.seeds import grad, grads, grads_list, value
from .ops import add, sub, mul, div, neg, pow, exp, log, relu, sigmoid
from .optim import SGD, sgd_step
from .config import OptimConfig
from .errors import AutogradError, LeafMutationError, ForeignNodeError
from . import debug


def param(name: str, value) -> Node:
    """Named, mutable leaf on the current graph."""
    return Node(value, name)


def const(value) -> Node:
    """Immutable unnamed leaf on the current graph."""
    return current_graph().const(value)


__all__ = [
    # Core
    'Node',
    'Graph',
    'current_graph',
    'use_graph',
    'param',
    'const',
    # Engine
    'backward',
    'zero_grad',
    'recompute',
    'topological_order',
    'grad',
    'grads',
    'grads_list',
    'value',
    # Ops
    'add', 'sub', 'mul', 'div', 'neg', 'pow',
    'exp', 'log', 'relu', 'sigmoid',
    # Optimisation
    'SGD',
    'sgd_step',
    'OptimConfig',
    # Errors
    'AutogradError',
    'LeafMutationError',
    'ForeignNodeError',
    'debug',
]

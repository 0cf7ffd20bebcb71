# scalar_aad/core/node.py
from __future__ import annotations

import math
from dataclasses import dataclass
from numbers import Real
from typing import Optional, Tuple

import numpy as np

from . import graph as graph_mod
from ..errors import LeafMutationError


@dataclass(frozen=True, eq=False)
class Leaf:
    """A parameter or constant with no operands."""
    name: Optional[str] = None
    mutable: bool = True


@dataclass(frozen=True, eq=False)
class UnaryOp:
    """
    Result of a one-operand primitive.

    Attributes
    ----------
    op : str
        "exp", "log", "relu", "pow" or "rpow".
    operand : Node
    exponent : Optional[float]
        Constant exponent, only set for "pow".
    base : Optional[float]
        Constant base, only set for "rpow" (base ** operand).
    """
    op: str
    operand: "Node"
    exponent: Optional[float] = None
    base: Optional[float] = None


@dataclass(frozen=True, eq=False)
class BinaryOp:
    """Result of a two-operand primitive ("add" or "mul")."""
    op: str
    left: "Node"
    right: "Node"


def as_float(val) -> float:
    """Coerce a real scalar to float; anything else is a TypeError."""
    if isinstance(val, Node):
        raise TypeError("expected a plain number, got a Node")
    if isinstance(val, (bool, np.bool_)):
        raise TypeError(f"booleans are not accepted as node values, got {val!r}")
    if not isinstance(val, (Real, np.floating, np.integer)):
        raise TypeError(
            f"Node only accepts real scalars (int, float, numpy scalar), "
            f"but got {type(val)}"
        )
    return float(val)


def format_literal(v: float) -> str:
    # 2.0 -> "2", 0.5 -> "0.5", nan -> "nan"
    if math.isfinite(v) and v.is_integer():
        return str(int(v))
    return repr(v)


class Node:
    """
    One scalar on the computation graph.

    Attributes
    ----------
    value : float
        Forward result, evaluated once at construction. Only mutable leaves
        may have it overwritten (see `set_value`); dependents are not refreshed.
    grad : float
        Accumulated gradient of the last backward root(s) w.r.t. this node.
    kind : Leaf | UnaryOp | BinaryOp
        How the node was produced.
    graph : Graph
        Arena that recorded the node.
    index : int
        Position of the node in its graph's construction order.

    Nodes compare and hash by identity, so the same value computed twice gives
    two distinct nodes.
    """

    __slots__ = ("value", "grad", "kind", "graph", "index", "__weakref__")

    # make numpy scalars defer to our reflected operators
    __array_ufunc__ = None

    def __init__(self, value, name: Optional[str] = None, *, mutable: bool = True,
                 graph=None, kind=None):
        self.value = as_float(value)
        self.grad = 0.0
        self.kind = kind if kind is not None else Leaf(name=name, mutable=mutable)
        self.graph = graph if graph is not None else graph_mod.current_graph()
        self.index = self.graph.record(self)

    # ------------------------------------------------------------------ #
    # structure
    # ------------------------------------------------------------------ #
    @property
    def is_leaf(self) -> bool:
        return isinstance(self.kind, Leaf)

    @property
    def name(self) -> Optional[str]:
        return self.kind.name if self.is_leaf else None

    @property
    def op(self) -> str:
        """Debug tag: "leaf" for leaves, otherwise the primitive name."""
        return "leaf" if self.is_leaf else self.kind.op

    @property
    def operands(self) -> Tuple["Node", ...]:
        kind = self.kind
        if isinstance(kind, UnaryOp):
            return (kind.operand,)
        if isinstance(kind, BinaryOp):
            return (kind.left, kind.right)
        return ()

    # ------------------------------------------------------------------ #
    # mutation
    # ------------------------------------------------------------------ #
    def set_value(self, value) -> None:
        """Overwrite a mutable leaf's value (optimizer updates)."""
        if not self.is_leaf:
            raise LeafMutationError(
                f"cannot set the value of a '{self.op}' node; only leaves hold settable values"
            )
        if not self.kind.mutable:
            raise LeafMutationError(f"constant {format_literal(self.value)} is immutable")
        self.value = as_float(value)

    def zero_grad(self) -> None:
        self.grad = 0.0

    # ------------------------------------------------------------------ #
    # engine entry points
    # ------------------------------------------------------------------ #
    def backward(self) -> None:
        """Run one reverse sweep with this node as the output."""
        from .engine import backward
        backward(self)

    def recompute(self) -> float:
        """Re-evaluate from current leaf values without touching cached values."""
        from .engine import recompute
        return recompute(self)

    def expr(self) -> str:
        """
        Human-readable expression, e.g. "((a * b) + c)".

        Built bottom-up over the topological order, so deep graphs do not
        recurse.
        """
        from .engine import topological_order
        rendered = {}
        for node in reversed(topological_order(self)):
            kind = node.kind
            if isinstance(kind, Leaf):
                text = kind.name if kind.name is not None else format_literal(node.value)
            elif isinstance(kind, UnaryOp):
                inner = rendered[id(kind.operand)]
                if kind.op == "pow":
                    text = f"({inner} ^ {format_literal(kind.exponent)})"
                elif kind.op == "rpow":
                    text = f"({format_literal(kind.base)} ^ {inner})"
                else:
                    text = f"{kind.op}({inner})"
            else:
                symbol = "+" if kind.op == "add" else "*"
                text = f"({rendered[id(kind.left)]} {symbol} {rendered[id(kind.right)]})"
            rendered[id(node)] = text
        return rendered[id(self)]

    def __str__(self):
        return self.expr()

    def __repr__(self):
        return f"Node({self.value!r}, grad={self.grad!r}, op={self.op!r}, name={self.name!r})"

    def __float__(self):
        return self.value

    # ------------------------------------------------------------------ #
    # named unary methods
    # ------------------------------------------------------------------ #
    def exp(self):
        from ..ops.transcendental import exp
        return exp(self)

    def log(self):
        from ..ops.transcendental import log
        return log(self)

    def pow(self, exponent):
        from ..ops.arithmetic import pow
        return pow(self, exponent)

    def relu(self):
        from ..ops.special import relu
        return relu(self)

    def sigmoid(self):
        from ..ops.special import sigmoid
        return sigmoid(self)

    # Operator overloading for arithmetic operations
    def __add__(self, other):
        from ..ops.arithmetic import add
        return add(self, other)

    def __radd__(self, other):
        from ..ops.arithmetic import add
        return add(other, self)

    def __sub__(self, other):
        from ..ops.arithmetic import sub
        return sub(self, other)

    def __rsub__(self, other):
        from ..ops.arithmetic import sub
        return sub(other, self)

    def __mul__(self, other):
        from ..ops.arithmetic import mul
        return mul(self, other)

    def __rmul__(self, other):
        from ..ops.arithmetic import mul
        return mul(other, self)

    def __truediv__(self, other):
        from ..ops.arithmetic import div
        return div(self, other)

    def __rtruediv__(self, other):
        from ..ops.arithmetic import div
        return div(other, self)

    def __neg__(self):
        from ..ops.arithmetic import neg
        return neg(self)

    def __pow__(self, other):
        from ..ops.arithmetic import pow
        return pow(self, other)

    def __rpow__(self, other):
        from ..ops.arithmetic import rpow
        return rpow(other, self)

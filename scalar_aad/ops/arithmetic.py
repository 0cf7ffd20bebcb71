# scalar_aad/ops/arithmetic.py
from ..core.engine import evaluate
from ..core.graph import current_graph
from ..core.node import BinaryOp, Node, UnaryOp, as_float
from ..errors import ForeignNodeError


def _graph_of(*xs):
    """Graph shared by the Node operands; the current graph if there are none."""
    nodes = [x for x in xs if isinstance(x, Node)]
    graphs = {id(x.graph): x.graph for x in nodes}
    if len(graphs) > 1:
        raise ForeignNodeError("operands belong to different graphs")
    if not graphs:
        return current_graph()
    g = next(iter(graphs.values()))
    # nodes recorded before a reset are no longer part of g
    for x in nodes:
        g.check(x)
    return g


def _as_node(x, graph):
    """Ensure x is a Node; otherwise wrap it as an immutable constant on `graph`."""
    return x if isinstance(x, Node) else graph.const(x)


def _binary(x, y, tag):
    """
    Generic binary primitive:
      - computes out.value from the operands' cached values
      - records (tag, x, y) so the backward pass can find both operands
    """
    g = _graph_of(x, y)
    x = _as_node(x, g)
    y = _as_node(y, g)
    return Node(evaluate(tag, x.value, y.value), kind=BinaryOp(tag, x, y), graph=g)


def _unary(x, tag, exponent=None, base=None):
    g = _graph_of(x)
    x = _as_node(x, g)
    return Node(evaluate(tag, x.value, exponent=exponent, base=base),
                kind=UnaryOp(tag, x, exponent, base), graph=g)


def add(x, y): return _binary(x, y, "add")
def mul(x, y): return _binary(x, y, "mul")

def neg(x):  return mul(x, -1.0)
def sub(x, y): return add(x, neg(y))


def pow(x, p):
    """
    Power by a constant real exponent:
      out.value = x.value ** p
      ∂out/∂x   = p * x^(p-1)

    A negative base with a fractional exponent gives nan, a zero base with a
    negative exponent gives inf; both are stored as ordinary values.
    """
    if isinstance(p, Node):
        raise TypeError("pow() only supports a constant exponent, got a Node")
    return _unary(x, "pow", exponent=as_float(p))


def div(x, y):
    """x / y recorded as x * y^-1."""
    return mul(x, pow(y, -1.0))


def rpow(c, x):
    """
    Power with a constant base:
      out.value = c ** x.value
      ∂out/∂x   = c ** x * log(c)

    Any real base is accepted. A negative base gives a finite value at
    integral exponents (nan otherwise), but its gradient is nan.
    """
    if isinstance(c, Node):
        raise TypeError("rpow() only supports a constant base, got a Node")
    return _unary(x, "rpow", base=as_float(c))

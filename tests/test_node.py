import numpy as np
import pytest

from scalar_aad import LeafMutationError, Node, const, param
from scalar_aad.core.node import BinaryOp, Leaf, UnaryOp


def test_constant_leaf(graph):
    x = Node(1.5)
    assert x.value == 1.5
    assert x.grad == 0.0
    assert x.is_leaf
    assert x.name is None
    assert x.op == "leaf"
    assert x.operands == ()
    assert isinstance(x.kind, Leaf)
    assert x.graph is graph


def test_param_records_name(graph):
    w = param("w", 0.25)
    assert w.name == "w"
    assert str(w) == "w"


def test_numpy_and_int_inputs(graph):
    assert Node(np.float64(2.5)).value == 2.5
    assert Node(np.int32(3)).value == 3.0
    assert isinstance(Node(7).value, float)


@pytest.mark.parametrize("bad", ["1.0", None, [1.0], (1.0,)])
def test_rejects_non_numeric(graph, bad):
    with pytest.raises(TypeError):
        Node(bad)


@pytest.mark.parametrize("flag", [True, False, np.bool_(True)])
def test_rejects_booleans(graph, flag):
    with pytest.raises(TypeError):
        Node(flag)
    with pytest.raises(TypeError):
        param("x", 2.0).pow(flag)


def test_identity_not_value_equality(graph):
    a = Node(1.0)
    b = Node(1.0)
    assert a is not b
    assert a != b
    assert len({a, b}) == 2


def test_operator_kinds(graph):
    a = param("a", 2.0)
    s = a + 1.0
    e = a.exp()
    p = a.pow(3.0)
    assert isinstance(s.kind, BinaryOp) and s.kind.op == "add"
    assert s.kind.left is a
    assert isinstance(e.kind, UnaryOp) and e.kind.operand is a
    assert p.kind.exponent == 3.0
    assert p.operands == (a,)


def test_operators_do_not_touch_operands(graph):
    a = param("a", 2.0)
    b = param("b", 4.0)
    _ = (a * b + a) / b
    assert (a.value, b.value) == (2.0, 4.0)


def test_set_value_on_leaf(graph):
    w = param("w", 1.0)
    w.set_value(2.0)
    assert w.value == 2.0
    x = Node(0.0)
    x.set_value(-1)
    assert x.value == -1.0


def test_set_value_on_operator_node_fails(graph):
    a = param("a", 1.0)
    with pytest.raises(LeafMutationError):
        (a + a).set_value(3.0)


def test_set_value_on_constant_fails(graph):
    c = const(3.0)
    with pytest.raises(LeafMutationError):
        c.set_value(1.0)
    lifted = (param("a", 1.0) * 2.0).kind.right
    with pytest.raises(TypeError):
        lifted.set_value(1.0)


def test_expr_rendering(graph):
    a = param("a", 2.0)
    b = param("b", -3.0)
    c = param("c", 10.0)
    f = param("f", -2.0)
    loss = (a * b + c) * f
    assert loss.expr() == "(((a * b) + c) * f)"
    assert str(a - 1.0) == "(a + (1 * -1))"
    assert str(1.0 / a) == "(1 * (a ^ -1))"
    assert str(a.exp()) == "exp(a)"
    assert str(a.relu()) == "relu(a)"
    assert str(Node(0.5) + a.pow(0.5)) == "(0.5 + (a ^ 0.5))"


def test_expr_non_finite_literal(graph):
    assert str(Node(float("inf"))) == "inf"
    assert str(Node(float("nan"))) == "nan"


def test_repr_and_float(graph):
    w = param("w", 1.5)
    assert repr(w) == "Node(1.5, grad=0.0, op='leaf', name='w')"
    assert float(w) == 1.5

import gc
import threading

import pytest

from scalar_aad import ForeignNodeError, Graph, LeafMutationError, Node, current_graph, use_graph


def test_nodes_recorded_in_construction_order(graph):
    a = graph.param("a", 1.0)
    b = graph.param("b", 2.0)
    c = a * b
    assert graph.nodes() == [a, b, c]
    assert [n.index for n in graph.nodes()] == [0, 1, 2]
    assert graph.leaves() == [a, b]
    assert len(graph) == 3


def test_use_graph_restores_previous():
    before = current_graph()
    with use_graph() as g:
        assert current_graph() is g
        x = Node(1.0)
        assert x.graph is g
        with use_graph(Graph(name="inner")) as inner:
            assert current_graph() is inner
        assert current_graph() is g
    assert current_graph() is before


def test_result_lives_on_operand_graph():
    g = Graph()
    a = g.param("a", 1.0)
    with use_graph():
        b = a + 2.0
    assert b.graph is g
    assert b.kind.right.graph is g


def test_unreachable_nodes_are_dropped(graph):
    x = graph.param("x", 1.0)
    y = x * 2.0
    assert len(graph) == 3
    del y
    gc.collect()
    assert graph.nodes() == [x]


def test_indices_are_not_reused(graph):
    graph.param("tmp", 0.0)
    gc.collect()
    keep = graph.param("keep", 1.0)
    assert keep.index == 1


def test_mixing_graphs_fails():
    g1, g2 = Graph(), Graph()
    a = g1.param("a", 1.0)
    b = g2.param("b", 2.0)
    with pytest.raises(ForeignNodeError):
        a + b
    with pytest.raises(ValueError):
        a * b


def test_check_membership():
    g1, g2 = Graph(), Graph()
    a = g1.param("a", 1.0)
    assert g1.check(a) is a
    assert a in g1
    assert a not in g2
    with pytest.raises(ForeignNodeError):
        g2.check(a)
    with pytest.raises(ForeignNodeError):
        g2.set(a, 3.0)
    with pytest.raises(ForeignNodeError):
        g2.expr(a)
    with pytest.raises(ForeignNodeError):
        g2.recompute(a)


def test_graph_set_and_expr(graph):
    w = graph.param("w", 1.0)
    y = w * 3.0
    graph.set(w, 4.0)
    assert w.value == 4.0
    assert graph.expr(y) == "(w * 3)"
    with pytest.raises(LeafMutationError):
        graph.set(y, 1.0)


def test_const_mutability(graph):
    assert graph.const(1.0).kind.mutable is False
    m = graph.const(1.0, mutable=True)
    m.set_value(2.0)
    assert m.value == 2.0


def test_zero_grad_leaves_only(graph):
    a = graph.param("a", 2.0)
    y = a * a
    y.backward()
    graph.zero_grad(leaves_only=True)
    assert a.grad == 0.0
    assert y.grad == 1.0


def test_reset_forgets_nodes(graph):
    a = graph.param("a", 1.0)
    graph.reset()
    assert len(graph) == 0
    assert a not in graph
    with pytest.raises(ForeignNodeError):
        graph.check(a)
    with pytest.raises(ForeignNodeError):
        a + 1.0
    b = graph.param("b", 1.0) + 1.0
    assert b.value == 2.0
    assert b.index > a.index


def test_default_graph_is_per_thread():
    main = current_graph()
    seen = {}

    def worker():
        seen["graph"] = current_graph()
        seen["node"] = Node(1.0)

    t = threading.Thread(target=worker)
    t.start()
    t.join()
    assert seen["graph"] is not main
    assert seen["node"].graph is seen["graph"]

import logging
import math

import numpy as np
import pytest

from scalar_aad import SGD, LeafMutationError, Node, OptimConfig, param, sgd_step


def test_sgd_step_moves_against_gradient(graph):
    w = param("w", 1.0)
    w.grad = 2.0
    assert sgd_step([w], 0.1) == 0
    assert w.value == pytest.approx(0.8)


@pytest.mark.parametrize("bad_grad", [float("nan"), float("inf"), -float("inf")])
def test_non_finite_update_resets_to_random(graph, caplog, bad_grad):
    w = param("w", 0.5)
    w.grad = bad_grad
    with caplog.at_level(logging.WARNING, logger="scalar_aad"):
        n = sgd_step([w], 0.1, rng=np.random.default_rng(0))
    assert n == 1
    assert math.isfinite(w.value)
    assert -1.0 <= w.value <= 1.0
    assert "non-finite update for w" in caplog.text


def test_overflowing_update_resets(graph):
    w = param("w", 1e308)
    w.grad = -1e308
    assert sgd_step([w], 10.0, rng=np.random.default_rng(1), low=2.0, high=3.0) == 1
    assert 2.0 <= w.value <= 3.0


def test_reset_is_reproducible_with_seed(graph):
    a = param("a", 0.0)
    b = param("b", 0.0)
    a.grad = b.grad = float("nan")
    sgd_step([a], 0.1, rng=np.random.default_rng(42))
    sgd_step([b], 0.1, rng=np.random.default_rng(42))
    assert a.value == b.value


def test_non_leaf_parameter_rejected_before_any_update(graph):
    w = param("w", 1.0)
    w.grad = 1.0
    y = w * 2.0
    with pytest.raises(LeafMutationError):
        sgd_step([w, y], 0.1)
    assert w.value == 1.0


def test_constant_parameter_rejected(graph):
    c = graph.const(1.0)
    with pytest.raises(LeafMutationError):
        sgd_step([c], 0.1)


def test_sgd_minimises_quadratic(graph):
    w = param("w", 0.0)
    opt = SGD([w], OptimConfig(learning_rate=0.1, seed=0))
    for _ in range(200):
        loss = (w - 3.0).pow(2.0)
        opt.zero_grad()
        loss.backward()
        opt.step()
    assert w.value == pytest.approx(3.0, abs=1e-6)
    assert opt.resets == 0


def test_sgd_zero_grad_only_touches_params(graph):
    w = Node(2.0)
    y = w * w
    y.backward()
    opt = SGD([w])
    opt.zero_grad()
    assert w.grad == 0.0
    assert y.grad == 1.0


def test_sgd_counts_resets(graph):
    w = param("w", 1.0)
    opt = SGD([w], OptimConfig(seed=3))
    w.grad = float("nan")
    assert opt.step() == 1
    w.grad = float("inf")
    opt.step()
    assert opt.resets == 2

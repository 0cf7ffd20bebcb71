# scalar_aad/optim.py
"""
Gradient-descent updates for leaf parameters.

A step writes `value - learning_rate * grad` back into each leaf. If that
number is not finite (nan or ±inf) the parameter is re-drawn uniformly from
[reset_low, reset_high] instead, so one diverged step does not poison every
later iteration.
"""
from __future__ import annotations

from typing import Iterable, List, Optional

import numpy as np

from .config import OptimConfig
from .core.engine import zero_grad
from .core.node import Node
from .debug import dbg
from .errors import LeafMutationError

log = dbg("optim")


def sgd_step(params: Iterable[Node], learning_rate: float, *,
             rng: Optional[np.random.Generator] = None,
             low: float = -1.0, high: float = 1.0) -> int:
    """
    One plain gradient-descent update.

    Args:
        params: Mutable leaf nodes to update in place
        learning_rate: Step size
        rng: Generator for re-initialising diverged parameters
        low, high: Re-initialisation range

    Returns:
        Number of parameters that were reset to a random value

    Raises:
        LeafMutationError: if a parameter is an operator node or a constant
    """
    params = list(params)
    for p in params:
        if not (p.is_leaf and p.kind.mutable):
            raise LeafMutationError(f"{p!r} is not a mutable leaf parameter")

    rng = rng if rng is not None else np.random.default_rng()
    n_reset = 0
    with np.errstate(all="ignore"):
        for p in params:
            new = float(np.float64(p.value) - np.float64(learning_rate) * p.grad)
            if not np.isfinite(new):
                fresh = float(rng.uniform(low, high))
                log.warning("non-finite update for %s (grad=%r); reset to %.4f",
                            p.name or f"node {p.index}", p.grad, fresh)
                new = fresh
                n_reset += 1
            p.set_value(new)
    return n_reset


class SGD:
    """
    Stateful wrapper around `sgd_step`.

        opt = SGD(params, OptimConfig(learning_rate=0.1, seed=0))
        for _ in range(steps):
            loss = build_loss(params)
            opt.zero_grad()
            loss.backward()
            opt.step()
    """

    def __init__(self, params: Iterable[Node], config: Optional[OptimConfig] = None):
        self.params: List[Node] = list(params)
        self.config = config if config is not None else OptimConfig()
        self._rng = self.config.rng()
        self.resets = 0

    def zero_grad(self):
        zero_grad(self.params)

    def step(self) -> int:
        n = sgd_step(self.params, self.config.learning_rate, rng=self._rng,
                     low=self.config.reset_low, high=self.config.reset_high)
        self.resets += n
        return n

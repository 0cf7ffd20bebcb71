"""
Optimizer configuration

Shared defaults for gradient-descent updates and the divergence-recovery
range used when a parameter update stops being finite.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

import numpy as np


@dataclass
class OptimConfig:
    """
    Attributes:
        learning_rate: Step size for `value - learning_rate * grad`
        reset_low: Lower bound of the re-initialisation range
        reset_high: Upper bound of the re-initialisation range
        seed: Seed for the re-initialisation generator (None = OS entropy)
    """
    learning_rate: float = 0.05
    reset_low: float = -1.0
    reset_high: float = 1.0
    seed: Optional[int] = None

    def __post_init__(self):
        if not self.learning_rate > 0:
            raise ValueError(f"learning_rate must be positive, got {self.learning_rate}")
        if not self.reset_low < self.reset_high:
            raise ValueError(
                f"reset range must satisfy low < high, got [{self.reset_low}, {self.reset_high}]"
            )

    @classmethod
    def from_env(cls) -> "OptimConfig":
        """
        Build a config from SCALAR_AAD_LR and SCALAR_AAD_SEED, falling back to
        the defaults for anything unset.
        """
        kwargs = {}
        lr = os.getenv("SCALAR_AAD_LR")
        if lr:
            kwargs["learning_rate"] = float(lr)
        seed = os.getenv("SCALAR_AAD_SEED")
        if seed:
            kwargs["seed"] = int(seed)
        return cls(**kwargs)

    def rng(self) -> np.random.Generator:
        return np.random.default_rng(self.seed)

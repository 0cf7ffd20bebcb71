# scalar_aad/errors.py
"""
Exceptions raised by the engine.

Only caller contract violations are errors. Non-finite values and gradients
are ordinary data and are never raised.
"""


class AutogradError(Exception):
    """Base class for engine errors."""


class LeafMutationError(AutogradError, TypeError):
    """Raised when overwriting the value of an operator node or a constant."""


class ForeignNodeError(AutogradError, ValueError):
    """Raised when a node is used with a graph it does not belong to."""


__all__ = ["AutogradError", "LeafMutationError", "ForeignNodeError"]

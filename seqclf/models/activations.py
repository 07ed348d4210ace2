"""Elementwise activation functions.

Derivatives are expressed in terms of the already-activated output, which is
what the backward pass keeps around for every timestep.
"""

from __future__ import annotations

import numpy as np

LOGISTIC = "logistic"
TANH = "tanh"

ACTIVATIONS = (LOGISTIC, TANH)


def check_activation(kind: str) -> str:
    if kind not in ACTIVATIONS:
        raise ValueError(f"Unknown activation '{kind}', expected one of {ACTIVATIONS}")
    return kind


def evaluate_activation(kind: str, x: np.ndarray) -> np.ndarray:
    """Apply the activation elementwise."""
    if kind == LOGISTIC:
        # Same values as 1/(1+exp(-x)) without overflow for large |x|.
        return 0.5 * (1.0 + np.tanh(0.5 * x))
    if kind == TANH:
        return np.tanh(x)
    raise ValueError(f"Unknown activation '{kind}', expected one of {ACTIVATIONS}")


def derivate_activation(kind: str, out: np.ndarray) -> np.ndarray:
    """Derivative of the activation, given its output ``out``."""
    if kind == LOGISTIC:
        return out * (1.0 - out)
    if kind == TANH:
        return 1.0 - out * out
    raise ValueError(f"Unknown activation '{kind}', expected one of {ACTIVATIONS}")

"""
Recurrent cells.

A cell owns the recurrence parameters and knows how to take one step forward
and one step backward. The classifier drives the time loop, so a cell never
sees more than a single timestep at a time:

  step(x_t, h_prev)                                   -> (h_t, step_cache)
  backward_step(t, dh, x_t, h_prev, h_t, step_cache, grads) -> (dh_prev, dx_t)

``dh`` is dL/dh_t, ``grads`` maps parameter names to accumulators that the
cell adds into.
"""

from __future__ import annotations

from typing import Any, Dict, Tuple

import numpy as np

from .activations import LOGISTIC, check_activation, derivate_activation, evaluate_activation
from .core import Params


class RecurrentCell:
    """Base class for single-layer recurrent cells."""

    def __init__(self, input_size: int, hidden_size: int, activation: str = LOGISTIC):
        self.input_size = input_size
        self.hidden_size = hidden_size
        self.activation = check_activation(activation)

    def collect_parameters(self) -> Tuple[Params, Params]:
        raise NotImplementedError

    def step(self, x_t: np.ndarray, h_prev: np.ndarray) -> Tuple[np.ndarray, Any]:
        raise NotImplementedError

    def backward_step(self, t: int, dh: np.ndarray, x_t: np.ndarray, h_prev: np.ndarray,
                      h_t: np.ndarray, step_cache: Any,
                      grads: Dict[str, np.ndarray]) -> Tuple[np.ndarray, np.ndarray]:
        raise NotImplementedError


class ElmanCell(RecurrentCell):
    """
    Plain recurrence:

      h(t) = f(Wxh x(t) + bh + Whh h(t-1))
    """

    def __init__(self, input_size: int, hidden_size: int, activation: str = LOGISTIC):
        super().__init__(input_size, hidden_size, activation)
        self.Wxh = np.zeros((hidden_size, input_size))
        self.Whh = np.zeros((hidden_size, hidden_size))
        self.bh = np.zeros(hidden_size)

    def collect_parameters(self) -> Tuple[Params, Params]:
        return {"Wxh": self.Wxh, "Whh": self.Whh}, {"bh": self.bh}

    def step(self, x_t, h_prev):
        h_t = evaluate_activation(self.activation, self.Wxh @ x_t + self.bh + self.Whh @ h_prev)
        return h_t, None

    def backward_step(self, t, dh, x_t, h_prev, h_t, step_cache, grads):
        dhraw = derivate_activation(self.activation, h_t) * dh

        grads["Wxh"] += np.outer(dhraw, x_t)
        grads["bh"] += dhraw
        # The initial state's share goes to h0, not to Whh.
        if t > 0:
            grads["Whh"] += np.outer(dhraw, h_prev)

        dh_prev = self.Whh.T @ dhraw
        dx_t = self.Wxh.T @ dhraw
        return dh_prev, dx_t


class GRUCell(RecurrentCell):
    """
    Gated recurrent unit with logistic gates:

      z(t) = sigma(Wxz x(t) + bz + Whz h(t-1))
      r(t) = sigma(Wxr x(t) + br + Whr h(t-1))
      u(t) = f(Wxh x(t) + bh + Whh (r(t) * h(t-1)))
      h(t) = z(t) * (u(t) - h(t-1)) + h(t-1)
    """

    def __init__(self, input_size: int, hidden_size: int, activation: str = LOGISTIC):
        super().__init__(input_size, hidden_size, activation)
        # Candidate state
        self.Wxh = np.zeros((hidden_size, input_size))
        self.Whh = np.zeros((hidden_size, hidden_size))
        self.bh = np.zeros(hidden_size)
        # Update gate
        self.Wxz = np.zeros((hidden_size, input_size))
        self.Whz = np.zeros((hidden_size, hidden_size))
        self.bz = np.zeros(hidden_size)
        # Reset gate
        self.Wxr = np.zeros((hidden_size, input_size))
        self.Whr = np.zeros((hidden_size, hidden_size))
        self.br = np.zeros(hidden_size)

    def collect_parameters(self) -> Tuple[Params, Params]:
        weights = {"Wxh": self.Wxh, "Whh": self.Whh,
                   "Wxz": self.Wxz, "Whz": self.Whz,
                   "Wxr": self.Wxr, "Whr": self.Whr}
        biases = {"bh": self.bh, "bz": self.bz, "br": self.br}
        return weights, biases

    def step(self, x_t, h_prev):
        z = evaluate_activation(LOGISTIC, self.Wxz @ x_t + self.bz + self.Whz @ h_prev)
        r = evaluate_activation(LOGISTIC, self.Wxr @ x_t + self.br + self.Whr @ h_prev)
        u = evaluate_activation(self.activation,
                                self.Wxh @ x_t + self.bh + self.Whh @ (r * h_prev))
        h_t = z * (u - h_prev) + h_prev
        return h_t, (z, r, u)

    def backward_step(self, t, dh, x_t, h_prev, h_t, step_cache, grads):
        z, r, u = step_cache

        duraw = derivate_activation(self.activation, u) * (z * dh)
        dq = self.Whh.T @ duraw                     # dL/d(r * h_prev)
        dzraw = derivate_activation(LOGISTIC, z) * ((u - h_prev) * dh)
        drraw = derivate_activation(LOGISTIC, r) * (h_prev * dq)

        grads["Wxz"] += np.outer(dzraw, x_t)
        grads["bz"] += dzraw
        grads["Wxr"] += np.outer(drraw, x_t)
        grads["br"] += drraw
        grads["Wxh"] += np.outer(duraw, x_t)
        grads["bh"] += duraw

        grads["Whz"] += np.outer(dzraw, h_prev)
        grads["Whr"] += np.outer(drraw, h_prev)
        grads["Whh"] += np.outer(duraw, r * h_prev)

        dh_prev = (self.Whz.T @ dzraw + self.Whr.T @ drraw
                   + r * dq + (1.0 - z) * dh)
        dx_t = self.Wxz.T @ dzraw + self.Wxr.T @ drraw + self.Wxh.T @ duraw
        return dh_prev, dx_t


CELLS = {
    "elman": ElmanCell,
    "gru": GRUCell,
}


def build_cell(cell_type: str, input_size: int, hidden_size: int,
               activation: str = LOGISTIC) -> RecurrentCell:
    """Create a recurrent cell by name ('elman' or 'gru')."""
    try:
        cls = CELLS[cell_type]
    except KeyError:
        raise ValueError(f"Unknown cell_type '{cell_type}', expected one of {sorted(CELLS)}") from None
    return cls(input_size, hidden_size, activation)

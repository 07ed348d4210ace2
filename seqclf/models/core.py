# core.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List
import numpy as np

Params = Dict[str, np.ndarray]


@dataclass
class ForwardCache:
    x: np.ndarray        # (d, T)  embedded input, column t = x[t]
    h: np.ndarray        # (n, T)  hidden state after step t
    h_init: np.ndarray   # (n,)    virtual state at time -1
    y: np.ndarray        # (k,)    logits from h[:, T-1]
    p: np.ndarray        # (k,)    softmax(y)
    step_caches: List[Any] = field(default_factory=list)  # per-step cell extras

    @property
    def length(self) -> int:
        return self.x.shape[1]

    def h_prev(self, t: int) -> np.ndarray:
        return self.h_init if t == 0 else self.h[:, t - 1]


def zeros_like_params(params: Params) -> Params:
    return {name: np.zeros_like(value) for name, value in params.items()}

"""
Recurrent sequence classifier.

Embedding lookup -> recurrent cell unrolled over the sequence -> projection of
the final hidden state -> softmax. Only the last timestep produces an output;
earlier timesteps only feed the recurrence.

Training is per-example SGD with gradients from full backpropagation through
time (B=1, no batching).
"""

from __future__ import annotations

from typing import Mapping, Optional, Sequence, Tuple

import numpy as np

from seqclf.errors import ContractViolation, EmptySequenceError
from .activations import LOGISTIC, check_activation
from .cells import build_cell
from .core import ForwardCache, Params, zeros_like_params
from .embedding import EmbeddingLayer
from .nn_utils import log_sum_exp, softmax


class RNNClassifier:
    """
    Sequence classifier over word ids:

      x(t) = E[:, 1 + w(t)]
      h(t) = cell(x(t), h(t-1)),   h(-1) = h0 (learned) or 0
      y    = Why h(T-1) + by
      p    = exp(y - logsumexp(y))

    Public API:
      - collect_all_parameters() -> (weights, biases)
      - initialize_parameters(rng, seed, snapshot)
      - run_forward_pass(sequence) -> ForwardCache
      - compute_gradients(cache, label) -> (grads, dX)
      - apply_gradients(sequence, grads, dX, learning_rate)
      - run_backward_pass(sequence, cache, label, learning_rate)
      - predict(sequence) -> label
    """

    def __init__(self, dictionary, embedding_dim: int, hidden_size: int, output_size: int,
                 activation: str = LOGISTIC, use_hidden_start: bool = True,
                 cell_type: str = "elman"):
        self.activation = check_activation(activation)
        self.hidden_size = hidden_size
        self.output_size = output_size
        self.use_hidden_start = use_hidden_start
        self.cell_type = cell_type

        self.lookup_layer = EmbeddingLayer(dictionary, embedding_dim)
        self.cell = build_cell(cell_type, embedding_dim, hidden_size, activation)

        self.Why = np.zeros((output_size, hidden_size))
        self.by = np.zeros(output_size)
        self.h0 = np.zeros(hidden_size) if use_hidden_start else None

    @classmethod
    def from_config(cls, config, dictionary, output_size: int) -> "RNNClassifier":
        return cls(
            dictionary,
            embedding_dim=config.embedding_dim,
            hidden_size=config.hidden_size,
            output_size=output_size,
            activation=config.activation,
            use_hidden_start=config.use_hidden_start,
            cell_type=config.cell_type,
        )

    @property
    def embedding_dim(self) -> int:
        return self.lookup_layer.embedding_dim

    # ----- parameters -----

    def collect_all_parameters(self) -> Tuple[Params, Params]:
        """
        Enumerate every trainable tensor by name.

        Returns:
            weights: embeddings, cell weights (Wxh, Whh, ...), Why
            biases: cell biases (bh, ...), by, and h0 when the initial state is learned
        """
        cell_weights, cell_biases = self.cell.collect_parameters()

        weights = dict(self.lookup_layer.collect_parameters())
        weights.update(cell_weights)
        weights["Why"] = self.Why

        biases = dict(cell_biases)
        biases["by"] = self.by
        if self.use_hidden_start:
            biases["h0"] = self.h0  # Not really a bias, but it is zero-initialized like one.
        return weights, biases

    def named_parameters(self) -> Params:
        weights, biases = self.collect_all_parameters()
        return {**weights, **biases}

    @property
    def num_parameters(self) -> int:
        return sum(p.size for p in self.named_parameters().values())

    def initialize_parameters(self, rng: Optional[np.random.Generator] = None,
                              seed: int = 1234,
                              snapshot: Optional[Mapping[str, np.ndarray]] = None) -> None:
        """
        Fill every parameter, either from a snapshot or at random.

        Random initialization zeroes all biases (and h0) and draws every weight
        matrix uniformly from [-max, max] with
        max = coeff * sqrt(6 / (fan_in + fan_out)), coeff = 4 for the logistic
        activation and 1 otherwise.

        Args:
            rng: Generator to draw from; created from ``seed`` when omitted
            seed: Seed used only when ``rng`` is None
            snapshot: Optional name -> array store to load instead
        """
        if snapshot is not None:
            self.load_parameters(snapshot)
            return

        if rng is None:
            rng = np.random.default_rng(seed)

        weights, biases = self.collect_all_parameters()
        for b in biases.values():
            b.fill(0.0)

        coeff = 4.0 if self.activation == LOGISTIC else 1.0
        for W in weights.values():
            num_outputs, num_inputs = W.shape
            limit = coeff * np.sqrt(6.0 / (num_inputs + num_outputs))
            W[...] = rng.uniform(-limit, limit, size=W.shape)

    def load_parameters(self, store: Mapping[str, np.ndarray]) -> None:
        """Copy tensors in by name; the names must match exactly and so must every shape."""
        params = self.named_parameters()
        unexpected = sorted(set(store) - set(params))
        if unexpected:
            raise ContractViolation(f"snapshot has unexpected parameters {unexpected}")
        for name, param in params.items():
            if name not in store:
                raise ContractViolation(f"snapshot has no parameter '{name}'")
            value = np.asarray(store[name], dtype=param.dtype)
            if value.shape != param.shape:
                raise ContractViolation(
                    f"shape mismatch for '{name}': expected {param.shape}, got {value.shape}")
            param[...] = value

    def state_dict(self) -> Params:
        return {name: param.copy() for name, param in self.named_parameters().items()}

    def architecture(self) -> dict:
        """Settings a snapshot only makes sense under."""
        return {
            "cell_type": self.cell_type,
            "activation": self.activation,
            "use_hidden_start": self.use_hidden_start,
            "vocab_size": self.lookup_layer.dictionary.get_num_words(),
            "embedding_dim": self.embedding_dim,
            "hidden_size": self.hidden_size,
            "output_size": self.output_size,
        }

    # ----- forward -----

    def run_forward_pass(self, sequence: Sequence[int]) -> ForwardCache:
        """
        Full forward pass over one sequence.

        Raises:
            EmptySequenceError: the sequence has no tokens
            ContractViolation: a word id is outside the dictionary
        """
        if len(sequence) == 0:
            raise EmptySequenceError("cannot classify an empty sequence")

        x = self.lookup_layer.lookup(sequence)
        T = x.shape[1]

        h = np.zeros((self.hidden_size, T))
        h_init = self.h0.copy() if self.use_hidden_start else np.zeros(self.hidden_size)
        step_caches = []

        h_prev = h_init
        for t in range(T):
            h_t, step_cache = self.cell.step(x[:, t], h_prev)
            h[:, t] = h_t
            step_caches.append(step_cache)
            h_prev = h_t

        y = self.Why @ h[:, T - 1] + self.by
        p = softmax(y)
        return ForwardCache(x=x, h=h, h_init=h_init, y=y, p=p, step_caches=step_caches)

    def _check_label(self, label: int) -> int:
        if not 0 <= label < self.output_size:
            raise ContractViolation(f"label {label} outside [0, {self.output_size - 1}]")
        return label

    def loss(self, cache: ForwardCache, label: int) -> float:
        """Cross-entropy -ln p[label], taken in log space."""
        label = self._check_label(label)
        return log_sum_exp(cache.y) - float(cache.y[label])

    @staticmethod
    def prediction(cache: ForwardCache) -> int:
        return int(np.argmax(cache.p))

    def predict(self, sequence: Sequence[int]) -> int:
        """Most probable label; ties go to the lowest index."""
        return self.prediction(self.run_forward_pass(sequence))

    # ----- backward -----

    def compute_gradients(self, cache: ForwardCache, label: int) -> Tuple[Params, np.ndarray]:
        """
        Backpropagation through time for the example in ``cache``.

        Returns:
            grads: name -> gradient for every parameter except the embeddings
            dX: (embedding_dim, T) gradient w.r.t. the embedded input
        """
        label = self._check_label(label)
        params = self.named_parameters()
        del params["embeddings"]
        grads = zeros_like_params(params)

        T = cache.length
        dy = cache.p.copy()
        dy[label] -= 1.0  # Backprop into y (softmax grad).
        grads["Why"] += np.outer(dy, cache.h[:, T - 1])
        grads["by"] += dy
        dhnext = self.Why.T @ dy  # Backprop into h.

        dX = np.zeros((self.embedding_dim, T))
        for t in range(T - 1, -1, -1):
            dh = dhnext
            dhnext, dX[:, t] = self.cell.backward_step(
                t, dh, cache.x[:, t], cache.h_prev(t), cache.h[:, t],
                cache.step_caches[t], grads)

        if self.use_hidden_start:
            grads["h0"] += dhnext
        return grads, dX

    def apply_gradients(self, sequence: Sequence[int], grads: Params, dX: np.ndarray,
                        learning_rate: float) -> None:
        """Vanilla SGD step on every parameter, then on the touched embedding columns."""
        params = self.named_parameters()
        for name, g in grads.items():
            params[name] -= learning_rate * g
        self.lookup_layer.accumulate_gradient(sequence, dX, learning_rate)

    def run_backward_pass(self, sequence: Sequence[int], cache: ForwardCache, label: int,
                          learning_rate: float) -> None:
        grads, dX = self.compute_gradients(cache, label)
        self.apply_gradients(sequence, grads, dX, learning_rate)

    def train_example(self, sequence: Sequence[int], label: int,
                      learning_rate: float) -> Tuple[float, int]:
        """Forward, score, and update on one example. Returns (loss, prediction before update)."""
        cache = self.run_forward_pass(sequence)
        loss = self.loss(cache, label)
        prediction = self.prediction(cache)
        self.run_backward_pass(sequence, cache, label, learning_rate)
        return loss, prediction

    def __repr__(self):
        return (f"RNNClassifier(cell={self.cell_type}, embedding_dim={self.embedding_dim}, "
                f"hidden_size={self.hidden_size}, output_size={self.output_size}, "
                f"activation={self.activation}, use_hidden_start={self.use_hidden_start})")

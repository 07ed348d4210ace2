"""Word embedding lookup layer."""

from __future__ import annotations

from typing import Dict, Sequence

import numpy as np

from seqclf.errors import ContractViolation


class EmbeddingLayer:
    """
    Embedding table with one column per word plus a reserved column 0.

    Word id ``i`` lives in column ``i + 1``; the out-of-vocabulary id ``-1``
    lands in column 0, which is trained like any other column.

    The dictionary is borrowed: the surrounding application owns it and the
    layer only reads its size.
    """

    def __init__(self, dictionary, embedding_dim: int):
        self.dictionary = dictionary
        self.embedding_dim = embedding_dim
        self.E = np.zeros((embedding_dim, dictionary.get_num_words() + 1))

    @property
    def num_columns(self) -> int:
        return self.E.shape[1]

    def collect_parameters(self) -> Dict[str, np.ndarray]:
        return {"embeddings": self.E}

    def _columns(self, sequence: Sequence[int]) -> np.ndarray:
        cols = np.asarray(sequence, dtype=np.int64) + 1
        bad = (cols < 0) | (cols >= self.num_columns)
        if np.any(bad):
            wid = int(cols[np.argmax(bad)]) - 1
            raise ContractViolation(
                f"word id {wid} outside [-1, {self.num_columns - 2}] "
                f"(vocabulary size {self.num_columns - 1})")
        return cols

    def lookup(self, sequence: Sequence[int]) -> np.ndarray:
        """
        Gather embeddings for a sequence of word ids.

        Args:
            sequence: Word ids, one per timestep

        Returns:
            x: (embedding_dim, T) matrix, column t is the embedding of word t
        """
        cols = self._columns(sequence)
        return self.E[:, cols].copy()

    def accumulate_gradient(self, sequence: Sequence[int], dX: np.ndarray,
                            learning_rate: float) -> None:
        """
        SGD update of the columns touched by ``sequence``.

        Updates are applied one timestep at a time in ascending order, so a
        word that occurs twice receives two separate subtractions rather than
        one subtraction of the summed gradient.
        """
        cols = self._columns(sequence)
        assert dX.shape == (self.embedding_dim, len(cols)), \
            f"dX must be ({self.embedding_dim}, {len(cols)}), got {dX.shape}"
        for t, col in enumerate(cols):
            self.E[:, col] -= learning_rate * dX[:, t]

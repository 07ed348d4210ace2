"""Recurrent classifier configuration."""

from .base_config import BaseConfig


class RNNConfig(BaseConfig):
    """Configuration for the recurrent sequence classifier."""

    # Model architecture
    embedding_dim = 50       # Dimension of word embeddings
    hidden_size = 100        # Dimension of the recurrent hidden state
    activation = "logistic"  # Options: logistic, tanh
    cell_type = "elman"      # Options: elman, gru
    use_hidden_start = True  # Learn the initial hidden state h0

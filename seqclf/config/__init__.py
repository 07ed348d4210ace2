import importlib.util

from .base_config import BaseConfig
from .rnn_config import RNNConfig


def load_config(path=None):
    """Default RNNConfig, or the RNNConfig class defined in the file at ``path``."""
    if path is None:
        return RNNConfig()
    spec = importlib.util.spec_from_file_location("config", path)
    config_module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(config_module)
    return config_module.RNNConfig()

"""Numerically stable softmax helpers."""

import numpy as np


def log_sum_exp(v):
    """
    Compute ln(sum(exp(v))) without overflow.

    Args:
        v: 1-D array of scores

    Returns:
        Scalar log-partition value
    """
    v_max = np.max(v)
    return float(v_max + np.log(np.sum(np.exp(v - v_max))))


def softmax(v):
    """Probabilities exp(v - logsumexp(v))."""
    return np.exp(v - log_sum_exp(v))

"""Recurrent sequence classifier trained with BPTT and plain SGD."""

__version__ = "0.1.0"

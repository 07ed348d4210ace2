"""Exceptions raised by the classifier."""


class ContractViolation(RuntimeError):
    """Input-contract violation (bad token id, bad label, snapshot mismatch).

    These indicate an upstream programming or data error and abort the run.
    """


class EmptySequenceError(ValueError):
    """A zero-length sequence has no final timestep to classify from."""

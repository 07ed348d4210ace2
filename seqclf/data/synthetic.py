"""Toy classification data for demos and tests."""

import numpy as np

from .dataset import SequenceDataset, SequenceExample


def make_trigger_dataset(num_examples, vocab_size, min_len, max_len, rng, trigger_id=0):
    """
    Binary task: label is 1 iff ``trigger_id`` occurs in the sequence.

    Roughly half of the examples contain the trigger, placed at a random
    position, so the model has to carry it through the recurrence.

    Args:
        num_examples: Number of sequences to generate
        vocab_size: Word ids are drawn from [0, vocab_size)
        min_len, max_len: Inclusive sequence length range
        rng: numpy Generator

    Returns:
        SequenceDataset
    """
    assert vocab_size >= 2, "need at least one trigger and one filler word"
    assert 1 <= min_len <= max_len
    fillers = np.array([w for w in range(vocab_size) if w != trigger_id])

    examples = []
    for _ in range(num_examples):
        length = int(rng.integers(min_len, max_len + 1))
        seq = rng.choice(fillers, size=length)
        label = int(rng.random() < 0.5)
        if label:
            seq[rng.integers(length)] = trigger_id
        examples.append(SequenceExample(tuple(int(w) for w in seq), label))
    return SequenceDataset(examples)

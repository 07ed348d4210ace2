"""Classification metrics."""


def accuracy(predictions, labels):
    """
    Fraction of predictions equal to the gold labels.

    An empty set has accuracy 0.0 rather than 0/0.
    """
    assert len(predictions) == len(labels), \
        f"Mismatch: {len(predictions)} predictions vs {len(labels)} labels"
    total = len(labels)
    if total == 0:
        return 0.0
    correct = sum(int(p == y) for p, y in zip(predictions, labels))
    return correct / total

"""Model checkpointing utilities."""

import os

import numpy as np

from seqclf.errors import ContractViolation

# Keys that are stored next to the parameters but are not parameters
ARCHITECTURE_KEYS = ('cell_type', 'activation', 'use_hidden_start', 'vocab_size',
                     'embedding_dim', 'hidden_size', 'output_size')
TRAINING_KEYS = ('epoch', 'loss')


def save_checkpoint(model, epoch, loss, path):
    """
    Save a named-parameter snapshot together with the model architecture.

    Args:
        model: RNNClassifier to save
        epoch: Current epoch
        loss: Current total training loss
        path: Path to save checkpoint (.npz)
    """
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    arrays = model.state_dict()
    for key, value in model.architecture().items():
        arrays[key] = np.array(value)
    arrays['epoch'] = np.array(epoch)
    arrays['loss'] = np.array(loss)

    with open(path, 'wb') as f:
        np.savez(f, **arrays)
    print(f"Checkpoint saved to {path}")


def check_architecture(model, store):
    """Raise ContractViolation unless the stored architecture matches the model's."""
    expected = model.architecture()
    for key in ARCHITECTURE_KEYS:
        if key not in store:
            raise ContractViolation(f"checkpoint does not record '{key}'")
        stored = store[key].item()
        if stored != expected[key]:
            raise ContractViolation(
                f"checkpoint was saved with {key}={stored!r}, model has {key}={expected[key]!r}")


def load_checkpoint(model, path):
    """
    Load a named-parameter snapshot into a model.

    The stored architecture (cell type, activation, initial state, sizes) must
    match the model's, and the stored parameter names and shapes must match
    exactly, otherwise ContractViolation is raised.

    Args:
        model: Model to load weights into
        path: Path to checkpoint

    Returns:
        model: Model with loaded weights
        epoch: Epoch number from checkpoint
        loss: Loss from checkpoint
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Checkpoint not found: {path}")

    with np.load(path) as checkpoint:
        store = {name: checkpoint[name] for name in checkpoint.files}

    check_architecture(model, store)

    epoch = int(store['epoch']) if 'epoch' in store else 0
    loss = float(store['loss']) if 'loss' in store else float('nan')

    snapshot = {name: value for name, value in store.items()
                if name not in ARCHITECTURE_KEYS and name not in TRAINING_KEYS}
    model.initialize_parameters(snapshot=snapshot)

    print(f"Checkpoint loaded from {path} (epoch {epoch})")
    return model, epoch, loss

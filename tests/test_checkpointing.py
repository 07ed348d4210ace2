#!/usr/bin/env python
"""Test saving and loading named-parameter snapshots."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import shutil
import tempfile

import numpy as np
import pytest

from seqclf.data import Dictionary
from seqclf.errors import ContractViolation
from seqclf.models import RNNClassifier
from seqclf.models.activations import LOGISTIC, TANH
from seqclf.utils.checkpointing import save_checkpoint, load_checkpoint


def make_model(hidden_size=4, cell_type="elman", activation=LOGISTIC, seed=0):
    dictionary = Dictionary(f"w{i}" for i in range(6))
    model = RNNClassifier(dictionary, embedding_dim=3, hidden_size=hidden_size, output_size=2,
                          cell_type=cell_type, activation=activation)
    model.initialize_parameters(seed=seed)
    return model


@pytest.mark.parametrize("cell_type", ["elman", "gru"])
def test_checkpoint_round_trip(cell_type):
    """A loaded checkpoint reproduces parameters and predictions exactly."""
    print("=" * 60)
    print(f"Testing checkpoint round trip ({cell_type})")
    print("=" * 60)

    test_dir = tempfile.mkdtemp(prefix='seqclf_ckpt_')
    try:
        model = make_model(cell_type=cell_type, seed=1)
        for _ in range(3):
            model.train_example([0, 4, 2], 1, learning_rate=0.1)
        path = os.path.join(test_dir, 'nested', 'model.npz')
        save_checkpoint(model, epoch=7, loss=1.5, path=path)
        assert os.path.exists(path)

        restored = make_model(cell_type=cell_type, seed=2)
        restored, epoch, loss = load_checkpoint(restored, path)

        assert epoch == 7
        assert loss == 1.5
        for name, value in model.named_parameters().items():
            assert np.array_equal(value, restored.named_parameters()[name]), name
        for seq in ([0], [1, 2, 3], [5, -1, 5]):
            assert np.array_equal(model.run_forward_pass(seq).p, restored.run_forward_pass(seq).p)

        print("✓ Round trip test passed!")

    finally:
        shutil.rmtree(test_dir, ignore_errors=True)


def test_checkpoint_shape_mismatch():
    """Loading into a model of a different size fails."""
    test_dir = tempfile.mkdtemp(prefix='seqclf_ckpt_')
    try:
        path = os.path.join(test_dir, 'model.npz')
        save_checkpoint(make_model(hidden_size=4), epoch=1, loss=0.0, path=path)
        with pytest.raises(ContractViolation):
            load_checkpoint(make_model(hidden_size=5), path)
    finally:
        shutil.rmtree(test_dir, ignore_errors=True)


def test_checkpoint_missing_parameter():
    """An Elman snapshot lacks the gate parameters a GRU needs."""
    test_dir = tempfile.mkdtemp(prefix='seqclf_ckpt_')
    try:
        path = os.path.join(test_dir, 'model.npz')
        save_checkpoint(make_model(cell_type="elman"), epoch=1, loss=0.0, path=path)
        with pytest.raises(ContractViolation):
            load_checkpoint(make_model(cell_type="gru"), path)
    finally:
        shutil.rmtree(test_dir, ignore_errors=True)


def test_checkpoint_wrong_cell_type():
    """A GRU snapshot does not load into an Elman model."""
    print("=" * 60)
    print("Testing cell type mismatch")
    print("=" * 60)

    test_dir = tempfile.mkdtemp(prefix='seqclf_ckpt_')
    try:
        path = os.path.join(test_dir, 'model.npz')
        save_checkpoint(make_model(cell_type="gru"), epoch=1, loss=0.0, path=path)

        with np.load(path) as checkpoint:
            assert str(checkpoint['cell_type']) == "gru"
            assert int(checkpoint['hidden_size']) == 4

        elman = make_model(cell_type="elman", seed=3)
        before = elman.state_dict()
        with pytest.raises(ContractViolation, match="cell_type"):
            load_checkpoint(elman, path)
        for name, value in before.items():
            assert np.array_equal(elman.named_parameters()[name], value), name

        print("✓ Cell type mismatch test passed!")

    finally:
        shutil.rmtree(test_dir, ignore_errors=True)


def test_checkpoint_wrong_activation():
    """A tanh-trained snapshot does not load into a logistic model."""
    test_dir = tempfile.mkdtemp(prefix='seqclf_ckpt_')
    try:
        path = os.path.join(test_dir, 'model.npz')
        save_checkpoint(make_model(activation=TANH), epoch=1, loss=0.0, path=path)
        with pytest.raises(ContractViolation, match="activation"):
            load_checkpoint(make_model(activation=LOGISTIC), path)
        load_checkpoint(make_model(activation=TANH), path)
    finally:
        shutil.rmtree(test_dir, ignore_errors=True)


def test_checkpoint_without_architecture_rejected():
    """A bare parameter store is not accepted as a checkpoint."""
    test_dir = tempfile.mkdtemp(prefix='seqclf_ckpt_')
    try:
        path = os.path.join(test_dir, 'model.npz')
        with open(path, 'wb') as f:
            np.savez(f, **make_model().state_dict())
        with pytest.raises(ContractViolation):
            load_checkpoint(make_model(), path)
    finally:
        shutil.rmtree(test_dir, ignore_errors=True)


def test_snapshot_with_unexpected_parameters():
    """load_parameters refuses names the model does not have."""
    gru_store = make_model(cell_type="gru").state_dict()
    elman = make_model(cell_type="elman")
    with pytest.raises(ContractViolation, match="unexpected"):
        elman.initialize_parameters(snapshot=gru_store)

    # The same store restricted to the Elman names loads fine
    elman_names = set(elman.named_parameters())
    elman.initialize_parameters(snapshot={k: v for k, v in gru_store.items() if k in elman_names})
    assert np.array_equal(elman.cell.Wxh, gru_store["Wxh"])


def test_missing_checkpoint_file():
    with pytest.raises(FileNotFoundError):
        load_checkpoint(make_model(), 'does/not/exist.npz')


if __name__ == "__main__":
    test_checkpoint_round_trip("elman")
    test_checkpoint_round_trip("gru")
    test_checkpoint_shape_mismatch()
    test_checkpoint_missing_parameter()
    test_missing_checkpoint_file()
    test_checkpoint_wrong_cell_type()
    test_checkpoint_wrong_activation()
    test_checkpoint_without_architecture_rejected()
    test_snapshot_with_unexpected_parameters()

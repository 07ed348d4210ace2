#!/usr/bin/env python
"""
Training script for the recurrent sequence classifier.

Usage:
    python scripts/train.py
    python scripts/train.py --train data/train.tsv --dev data/dev.tsv --test data/test.tsv
    python scripts/train.py --synthetic               # Toy trigger-word task, no data files needed
    python scripts/train.py --resume checkpoints/best_model.npz --epochs 5
"""

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

import argparse
import numpy as np

from seqclf.config import load_config
from seqclf.data import Dictionary, LabelAlphabet, SequenceDataset, read_tsv, tokenize
from seqclf.data.synthetic import make_trigger_dataset
from seqclf.models import RNNClassifier
from seqclf.training import Trainer
from seqclf.utils.checkpointing import load_checkpoint


def load_datasets(config, args):
    """Build dictionary, labels and datasets from TSV files."""
    for path in [args.train, args.dev, args.test]:
        if not os.path.exists(path):
            print("ERROR: Data file not found!")
            print(f"  - {path}")
            print()
            print("Pass --train/--dev/--test or use --synthetic")
            return None

    train_pairs = read_tsv(args.train)
    dev_pairs = read_tsv(args.dev)
    test_pairs = read_tsv(args.test)

    vocab_path = os.path.join(config.vocab_dir, 'words.txt')
    labels_path = os.path.join(config.vocab_dir, 'labels.txt')
    if args.resume and os.path.exists(vocab_path):
        # Embedding columns are tied to word ids, so a resumed run must reuse the vocabulary
        print(f"Loading vocabulary from {config.vocab_dir}...")
        dictionary = Dictionary.load(vocab_path)
        labels = LabelAlphabet.load(labels_path)
    else:
        print("Building vocabulary...")
        dictionary = Dictionary.build(
            (tokenize(text, config.lowercase) for _, text in train_pairs),
            min_freq=config.min_freq,
        )
        labels = LabelAlphabet(label for label, _ in train_pairs)
        dictionary.save(vocab_path)
        labels.save(labels_path)

    datasets = [
        SequenceDataset.from_pairs(pairs, dictionary, labels, config.lowercase, config.max_seq_length)
        for pairs in (train_pairs, dev_pairs, test_pairs)
    ]
    return dictionary, labels, datasets


def main():
    """Main training function."""
    parser = argparse.ArgumentParser(description='Train recurrent sequence classifier')
    parser.add_argument('--config', type=str, default=None, help='Path to custom config')
    parser.add_argument('--train', type=str, default=None, help='Training TSV (label<TAB>sentence)')
    parser.add_argument('--dev', type=str, default=None, help='Dev TSV')
    parser.add_argument('--test', type=str, default=None, help='Test TSV')
    parser.add_argument('--synthetic', action='store_true', help='Use generated toy data')
    parser.add_argument('--epochs', type=int, default=None, help='Override config.num_epochs')
    parser.add_argument('--lr', type=float, default=None, help='Override config.learning_rate')
    parser.add_argument('--cell', type=str, default=None, choices=['elman', 'gru'], help='Override config.cell_type')
    parser.add_argument('--seed', type=int, default=None, help='Override config.seed')
    parser.add_argument('--resume', type=str, default=None, help='Resume from checkpoint')
    args = parser.parse_args()

    config = load_config(args.config)
    if args.epochs is not None:
        config.num_epochs = args.epochs
    if args.lr is not None:
        config.learning_rate = args.lr
    if args.cell is not None:
        config.cell_type = args.cell
    if args.seed is not None:
        config.seed = args.seed
    args.train = args.train or config.train_file
    args.dev = args.dev or config.dev_file
    args.test = args.test or config.test_file

    print("=" * 60)
    print("Recurrent Sequence Classifier Training")
    print("=" * 60)
    print()
    print(f"Config: cell={config.cell_type}, embedding_dim={config.embedding_dim}, "
          f"hidden_size={config.hidden_size}, activation={config.activation}")
    print(f"Epochs: {config.num_epochs}, Learning rate: {config.learning_rate}, Seed: {config.seed}")
    print()

    rng = np.random.default_rng(config.seed)

    if args.synthetic:
        print("Generating synthetic trigger-word data...")
        dictionary = Dictionary(f"w{i}" for i in range(config.synthetic_vocab_size))
        labels = LabelAlphabet(["absent", "present"])
        train_set, dev_set, test_set = (
            make_trigger_dataset(size, config.synthetic_vocab_size,
                                 config.synthetic_min_len, config.synthetic_max_len, rng)
            for size in (config.synthetic_train_size, config.synthetic_eval_size, config.synthetic_eval_size)
        )
    else:
        loaded = load_datasets(config, args)
        if loaded is None:
            return
        dictionary, labels, (train_set, dev_set, test_set) = loaded

    print(f"Vocab size: {dictionary.get_num_words()}")
    print(f"Labels: {labels.id_to_label}")
    print(f"Train size: {len(train_set)}")
    print(f"Dev size: {len(dev_set)}")
    print(f"Test size: {len(test_set)}")
    print()

    print("Initializing model...")
    model = RNNClassifier.from_config(config, dictionary, output_size=len(labels))
    model.initialize_parameters(rng=rng)
    print(model)
    print(f"Model parameters: {model.num_parameters:,}")
    print()

    if args.resume:
        print(f"Resuming from checkpoint: {args.resume}")
        model, epoch, loss = load_checkpoint(model, args.resume)
        print()

    print("Starting training...")
    trainer = Trainer(model, config)
    trainer.train(train_set, dev_set, test_set)

    print()
    print(f"Best dev accuracy: {trainer.best_dev_accuracy:.4f}")
    print("Training complete!")


if __name__ == "__main__":
    main()

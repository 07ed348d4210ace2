#!/usr/bin/env python
"""
Evaluate a trained classifier on a labeled TSV file.

Usage:
    python scripts/evaluate.py --checkpoint checkpoints/best_model.npz --data data/test.tsv
    python scripts/evaluate.py --checkpoint checkpoints/best_model.npz --data data/test.tsv --show 5
    python scripts/evaluate.py --config my_config.py --checkpoint checkpoints/best_model.npz --data data/test.tsv
"""

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

import argparse
from collections import Counter

from seqclf.config import load_config
from seqclf.data import Dictionary, LabelAlphabet, SequenceDataset
from seqclf.models import RNNClassifier
from seqclf.training import Trainer
from seqclf.utils.checkpointing import load_checkpoint


def main():
    parser = argparse.ArgumentParser(description='Evaluate recurrent sequence classifier')
    parser.add_argument('--config', type=str, default=None, help='Config the checkpoint was trained with')
    parser.add_argument('--checkpoint', type=str, required=True, help='Checkpoint (.npz)')
    parser.add_argument('--data', type=str, required=True, help='TSV file (label<TAB>sentence)')
    parser.add_argument('--vocab-dir', type=str, default=None, help='Directory with words.txt and labels.txt')
    parser.add_argument('--cell', type=str, default=None, choices=['elman', 'gru'], help='Cell the checkpoint was trained with')
    parser.add_argument('--show', type=int, default=0, help='Print the first N predictions')
    args = parser.parse_args()

    config = load_config(args.config)
    config.log_dir = None
    config.checkpoint_dir = None
    if args.cell is not None:
        config.cell_type = args.cell
    vocab_dir = args.vocab_dir or config.vocab_dir

    dictionary = Dictionary.load(os.path.join(vocab_dir, 'words.txt'))
    labels = LabelAlphabet.load(os.path.join(vocab_dir, 'labels.txt'))
    print(f"Vocab size: {dictionary.get_num_words()}")
    print(f"Labels: {labels.id_to_label}")

    model = RNNClassifier.from_config(config, dictionary, output_size=len(labels))
    model, epoch, _ = load_checkpoint(model, args.checkpoint)
    print(f"Loaded checkpoint from epoch {epoch}")

    dataset = SequenceDataset.from_file(args.data, dictionary, labels, config.lowercase, config.max_seq_length)
    print(f"Examples: {len(dataset)}")
    print()

    trainer = Trainer(model, config)
    predictions = trainer.predict_all(dataset)
    acc = trainer.evaluate(dataset)

    print("=" * 60)
    print(f"Accuracy: {acc:.4f} ({sum(p == y for p, y in zip(predictions, dataset.labels))}/{len(dataset)})")
    print("=" * 60)

    gold_counts = Counter(dataset.labels)
    hits = Counter(y for p, y in zip(predictions, dataset.labels) if p == y)
    for lid, name in enumerate(labels.id_to_label):
        total = gold_counts.get(lid, 0)
        per_class = hits.get(lid, 0) / total if total else 0.0
        print(f"  {name:<20s} {per_class:.4f} ({hits.get(lid, 0)}/{total})")

    for i, example in enumerate(dataset.examples[:args.show]):
        words = ' '.join(dictionary.get_word(w) for w in example.token_ids)
        print()
        print(f"[{i}] {words}")
        print(f"    gold={labels.get_label(example.label)} predicted={labels.get_label(predictions[i])}")


if __name__ == "__main__":
    main()

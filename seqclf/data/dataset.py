"""
Labeled sentence datasets.

Files are tab-separated, one example per line:

    label<TAB>sentence text

Sentences are whitespace-tokenized and mapped to word ids with a Dictionary.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple


@dataclass(frozen=True)
class SequenceExample:
    """Ordered word ids plus one gold label."""
    token_ids: Tuple[int, ...]
    label: int

    def __len__(self):
        return len(self.token_ids)


def tokenize(text, lowercase=True):
    """Split a sentence on whitespace."""
    if lowercase:
        text = text.lower()
    return text.split()


def read_tsv(path):
    """
    Read (label, sentence) pairs from a TSV file.

    Args:
        path: Path to file

    Returns:
        List of (label, sentence) string pairs
    """
    if not Path(path).exists():
        raise FileNotFoundError(f"Data file not found: {path}")

    pairs = []
    with open(path, 'r', encoding='utf-8') as f:
        for line_no, line in enumerate(f, 1):
            line = line.rstrip('\n')
            if not line.strip():
                continue
            if '\t' not in line:
                raise ValueError(f"{path}:{line_no}: expected 'label<TAB>sentence'")
            label, text = line.split('\t', 1)
            pairs.append((label.strip(), text))
    return pairs


class SequenceDataset:
    """Ordered collection of SequenceExample."""

    def __init__(self, examples):
        self.examples: List[SequenceExample] = list(examples)

    @classmethod
    def from_pairs(cls, pairs, dictionary, labels, lowercase=True, max_len=None):
        """
        Encode (label, sentence) pairs.

        Sentences with no tokens are dropped, since the classifier rejects
        empty sequences.

        Args:
            pairs: Iterable of (label, sentence)
            dictionary: Dictionary used to map words to ids
            labels: LabelAlphabet used to map labels to class ids
            lowercase: Lowercase before tokenizing
            max_len: Keep only the first max_len tokens (None = no limit)
        """
        examples = []
        num_empty = 0
        for label, text in pairs:
            tokens = tokenize(text, lowercase)
            if max_len:
                tokens = tokens[:max_len]
            if not tokens:
                num_empty += 1
                continue
            examples.append(SequenceExample(tuple(dictionary.encode(tokens)), labels.get_id(label)))
        if num_empty:
            print(f"Skipped {num_empty} empty sentence(s)")
        return cls(examples)

    @classmethod
    def from_file(cls, path, dictionary, labels, lowercase=True, max_len=None):
        return cls.from_pairs(read_tsv(path), dictionary, labels, lowercase, max_len)

    @property
    def sequences(self):
        return [ex.token_ids for ex in self.examples]

    @property
    def labels(self):
        return [ex.label for ex in self.examples]

    def __len__(self):
        return len(self.examples)

    def __getitem__(self, idx):
        return self.examples[idx]

    def __iter__(self):
        return iter(self.examples)

    def __repr__(self):
        return f"SequenceDataset(size={len(self)})"

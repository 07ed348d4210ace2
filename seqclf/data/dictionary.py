"""
Word and label vocabularies.

Word ids are dense in [0, num_words); unknown words map to UNK_ID (-1), which
the embedding layer stores in its reserved column 0.
"""

from collections import Counter
from pathlib import Path

UNK_ID = -1


class Dictionary:
    """Word <-> id mapping built from training sentences."""

    def __init__(self, words=None):
        self.word_to_id = {}
        self.id_to_word = []
        for word in words or []:
            self.add_word(word)

    def add_word(self, word):
        """Add a word if new and return its id."""
        wid = self.word_to_id.get(word)
        if wid is None:
            wid = len(self.id_to_word)
            self.word_to_id[word] = wid
            self.id_to_word.append(word)
        return wid

    def get_word_id(self, word):
        """Return the id of a word, or UNK_ID if it is not in the vocabulary."""
        return self.word_to_id.get(word, UNK_ID)

    def get_word(self, wid):
        """Return the word for an id ("<unk>" for UNK_ID)."""
        if wid == UNK_ID:
            return "<unk>"
        return self.id_to_word[wid]

    def get_num_words(self):
        """Return vocabulary size."""
        return len(self.id_to_word)

    def encode(self, tokens):
        """Map a list of tokens to word ids."""
        return [self.get_word_id(token) for token in tokens]

    @classmethod
    def build(cls, sentences, min_freq=1):
        """
        Build a dictionary from tokenized sentences.

        Words are added in order of first occurrence, keeping those seen at
        least ``min_freq`` times.

        Args:
            sentences: Iterable of token lists
            min_freq: Minimum count for a word to be kept

        Returns:
            Dictionary
        """
        counts = Counter()
        order = []
        for tokens in sentences:
            for token in tokens:
                if token not in counts:
                    order.append(token)
                counts[token] += 1
        return cls(word for word in order if counts[word] >= min_freq)

    def save(self, path):
        """Write one word per line; the line index is the word id."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            for word in self.id_to_word:
                f.write(word + '\n')

    @classmethod
    def load(cls, path):
        if not Path(path).exists():
            raise FileNotFoundError(f"Vocabulary file not found: {path}")
        with open(path, 'r', encoding='utf-8') as f:
            return cls(line.rstrip('\n') for line in f if line.rstrip('\n'))

    def __len__(self):
        return self.get_num_words()

    def __contains__(self, word):
        return word in self.word_to_id

    def __repr__(self):
        return f"Dictionary(num_words={self.get_num_words()})"


class LabelAlphabet:
    """Label string <-> class id, ids assigned in first-seen order."""

    def __init__(self, labels=None):
        self.label_to_id = {}
        self.id_to_label = []
        for label in labels or []:
            self.add(label)

    def add(self, label):
        if label not in self.label_to_id:
            self.label_to_id[label] = len(self.id_to_label)
            self.id_to_label.append(label)
        return self.label_to_id[label]

    def get_id(self, label):
        try:
            return self.label_to_id[label]
        except KeyError:
            raise KeyError(f"Unknown label '{label}', known labels: {self.id_to_label}") from None

    def get_label(self, lid):
        return self.id_to_label[lid]

    def save(self, path):
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            for label in self.id_to_label:
                f.write(label + '\n')

    @classmethod
    def load(cls, path):
        if not Path(path).exists():
            raise FileNotFoundError(f"Label file not found: {path}")
        with open(path, 'r', encoding='utf-8') as f:
            return cls(line.rstrip('\n') for line in f if line.rstrip('\n'))

    def __len__(self):
        return len(self.id_to_label)

    def __repr__(self):
        return f"LabelAlphabet({self.id_to_label})"

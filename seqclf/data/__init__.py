from .dictionary import Dictionary, LabelAlphabet, UNK_ID
from .dataset import SequenceDataset, SequenceExample, read_tsv, tokenize

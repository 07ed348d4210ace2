from .rnn_classifier import RNNClassifier

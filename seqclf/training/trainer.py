"""Training loop for the recurrent sequence classifier."""

import os
import time

from tqdm import tqdm

from seqclf.utils.checkpointing import save_checkpoint
from seqclf.utils.csv_logger import CSVLogger
from seqclf.utils.metrics import accuracy


class Trainer:
    """
    Per-example SGD trainer.

    Examples are visited in dataset order and the parameters are updated right
    after each one, so results depend on that order. Dev and test sets are
    only evaluated, never trained on.
    """

    def __init__(self, model, config):
        """
        Args:
            model: RNNClassifier (already initialized)
            config: Training configuration
        """
        self.model = model
        self.config = config
        self.show_progress = getattr(config, 'show_progress', True)
        self.best_dev_accuracy = -1.0
        self.cumulative_time = 0.0
        self.history = []

        # Checkpointing
        self.checkpoint_dir = getattr(config, 'checkpoint_dir', None)
        self.save_every = getattr(config, 'save_every', 0)

        # Initialize CSV logger
        self.csv_logger = None
        log_dir = getattr(config, 'log_dir', None)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
            timestamp = time.strftime('%Y%m%d_%H%M%S')
            csv_path = os.path.join(log_dir, f'training_log_{timestamp}.csv')
            self.csv_logger = CSVLogger(csv_path, config)
            print(f"CSV logging enabled: {csv_path}")

    def predict_all(self, dataset):
        return [self.model.predict(seq) for seq in dataset.sequences]

    def evaluate(self, dataset):
        """
        Accuracy of the current parameters on a dataset (no updates).

        Returns 0.0 for an empty dataset.
        """
        return accuracy(self.predict_all(dataset), dataset.labels)

    def train_epoch(self, train_set, dev_set, test_set, epoch, learning_rate):
        """
        One sweep over the training set followed by dev/test evaluation.

        Args:
            train_set, dev_set, test_set: SequenceDataset
            epoch: Zero-based epoch index
            learning_rate: SGD step size

        Returns:
            metrics: Dictionary with loss, accuracies and timing
        """
        start = time.perf_counter()
        total_loss = 0.0
        predictions = []

        pbar = tqdm(train_set, desc=f"Epoch {epoch + 1}", leave=False, disable=not self.show_progress)
        for i, example in enumerate(pbar):
            loss, prediction = self.model.train_example(example.token_ids, example.label, learning_rate)
            total_loss += loss
            predictions.append(prediction)
            if i % 100 == 0:
                pbar.set_postfix({'loss': f'{total_loss / (i + 1):.4f}'})

        accuracy_train = accuracy(predictions, train_set.labels)
        accuracy_dev = self.evaluate(dev_set)
        accuracy_test = self.evaluate(test_set)

        elapsed = time.perf_counter() - start
        self.cumulative_time += elapsed
        print(f"Epoch: {epoch + 1}"
              f" Total loss: {total_loss:.6f}"
              f" Accuracy train: {accuracy_train:.4f}"
              f" Accuracy dev: {accuracy_dev:.4f}"
              f" Accuracy test: {accuracy_test:.4f}"
              f" Time: {elapsed * 1000.0:.0f} ms")

        return {
            'total_loss': total_loss,
            'train_accuracy': accuracy_train,
            'dev_accuracy': accuracy_dev,
            'test_accuracy': accuracy_test,
            'learning_rate': learning_rate,
            'train_size': len(train_set),
            'dev_size': len(dev_set),
            'test_size': len(test_set),
            'epoch_time_seconds': elapsed,
            'cumulative_time_seconds': self.cumulative_time,
        }

    def _save(self, name, epoch, loss):
        path = os.path.join(self.checkpoint_dir, name)
        save_checkpoint(self.model, epoch, loss, path)
        return path

    def train(self, train_set, dev_set, test_set, num_epochs=None, learning_rate=None):
        """
        Full training run.

        Args:
            train_set, dev_set, test_set: SequenceDataset
            num_epochs: Number of epochs (default: config.num_epochs)
            learning_rate: SGD step size (default: config.learning_rate)

        Returns:
            history: List of per-epoch metric dictionaries
        """
        if num_epochs is None:
            num_epochs = self.config.num_epochs
        if learning_rate is None:
            learning_rate = self.config.learning_rate

        # Initial performance.
        accuracy_dev = self.evaluate(dev_set)
        print(f" Initial accuracy dev: {accuracy_dev:.4f}")

        for epoch in range(num_epochs):
            metrics = self.train_epoch(train_set, dev_set, test_set, epoch, learning_rate)

            is_best = metrics['dev_accuracy'] > self.best_dev_accuracy
            if is_best:
                self.best_dev_accuracy = metrics['dev_accuracy']
            metrics['best_dev_accuracy'] = self.best_dev_accuracy
            metrics['is_best'] = is_best

            checkpoint_paths, checkpoint_types = [], []
            if self.checkpoint_dir:
                if self.save_every and (epoch + 1) % self.save_every == 0:
                    checkpoint_paths.append(self._save(f'checkpoint_epoch_{epoch + 1}.npz',
                                                       epoch + 1, metrics['total_loss']))
                    checkpoint_types.append('periodic')
                if is_best:
                    checkpoint_paths.append(self._save('best_model.npz', epoch + 1, metrics['total_loss']))
                    checkpoint_types.append('best')
            metrics['checkpoint_path'] = ';'.join(checkpoint_paths)
            metrics['checkpoint_type'] = ';'.join(checkpoint_types)

            if self.csv_logger:
                self.csv_logger.log_epoch(epoch + 1, metrics)
            self.history.append({'epoch': epoch + 1, **metrics})

        return self.history

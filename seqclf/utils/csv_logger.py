"""CSV logger for training metrics and configuration."""

import csv
from datetime import datetime
from pathlib import Path


class CSVLogger:
    """Logger for writing per-epoch training metrics to a CSV file."""

    CONFIG_COLUMNS = (
        'cell_type',
        'embedding_dim',
        'hidden_size',
        'activation',
        'use_hidden_start',
        'seed',
    )

    def __init__(self, log_path, config):
        """
        Initialize CSV logger.

        Args:
            log_path: Path to CSV file
            config: Training configuration object
        """
        self.log_path = Path(log_path)
        self.config = config
        self.log_path.parent.mkdir(parents=True, exist_ok=True)

        self.columns = self._get_columns()

        # Appending to an existing log keeps its header
        if not self.log_path.exists():
            self._write_header()

    def _get_columns(self):
        """Define all columns for the CSV file."""
        return [
            # Timestamp and identification
            'timestamp',
            'epoch',

            # Training metrics
            'total_loss',
            'train_accuracy',

            # Held-out metrics
            'dev_accuracy',
            'test_accuracy',
            'best_dev_accuracy',
            'is_best',

            # Optimization
            'learning_rate',

            # Checkpoint information
            'checkpoint_path',
            'checkpoint_type',  # 'periodic', 'best', or ''

            # Model architecture (from config)
            *self.CONFIG_COLUMNS,

            # Dataset sizes
            'train_size',
            'dev_size',
            'test_size',

            # Timing
            'epoch_time_seconds',
            'cumulative_time_seconds',
        ]

    def _write_header(self):
        with open(self.log_path, 'w', newline='', encoding='utf-8') as f:
            writer = csv.DictWriter(f, fieldnames=self.columns)
            writer.writeheader()

    def log(self, metrics):
        """
        Append one row. Missing columns are left empty.

        Args:
            metrics: Dictionary of metrics to log
        """
        row = dict(metrics)
        row.setdefault('timestamp', datetime.now().strftime('%Y-%m-%d %H:%M:%S'))
        for key in self.CONFIG_COLUMNS:
            if key not in row and hasattr(self.config, key):
                row[key] = getattr(self.config, key)

        with open(self.log_path, 'a', newline='', encoding='utf-8') as f:
            writer = csv.DictWriter(f, fieldnames=self.columns)
            writer.writerow({col: row.get(col, '') for col in self.columns})

    def log_epoch(self, epoch, metrics):
        """Log an epoch with standard metrics."""
        self.log({**metrics, 'epoch': epoch})

"""Base configuration for all models."""

class BaseConfig:
    """Shared configuration across all models."""

    # Reproducibility
    seed = 1234            # Seed for the generator used by parameter initialization

    # Data Preprocessing
    lowercase = True       # Lowercase sentences before whitespace tokenization
    min_freq = 1           # Minimum training-set frequency for a word to enter the dictionary
    max_seq_length = 100   # Maximum sequence length (TOKENS), None = no limit

    # Training
    num_epochs = 10
    learning_rate = 0.01   # Plain SGD step size, applied after every example

    # Checkpointing
    save_every = 1         # Save a periodic snapshot every N epochs (0 disables)

    # Reporting
    show_progress = True   # tqdm progress bar over training examples

    # Synthetic data (scripts/train.py --synthetic)
    synthetic_vocab_size = 20
    synthetic_train_size = 500
    synthetic_eval_size = 100
    synthetic_min_len = 3
    synthetic_max_len = 12

    # Paths
    data_dir = "data"
    train_file = "data/train.tsv"
    dev_file = "data/dev.tsv"
    test_file = "data/test.tsv"
    vocab_dir = "data/vocab"
    checkpoint_dir = "checkpoints"
    log_dir = "logs"

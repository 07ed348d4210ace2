#!/usr/bin/env python
"""
Summarize and plot a training log written by the trainer's CSV logger.

Generates a 2-panel figure:
- Total training loss per epoch
- Train / dev / test accuracy per epoch

Usage:
    python scripts/plot_training.py logs/training_log_20260101_120000.csv
    python scripts/plot_training.py logs/training_log_*.csv --output report.png
    python scripts/plot_training.py logs/training_log_*.csv --format summary
"""

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

import argparse
import pandas as pd
import matplotlib
matplotlib.use('Agg')  # For headless environments
import matplotlib.pyplot as plt


def summarize(df):
    """
    Build a text summary of a training log.

    Args:
        df: DataFrame with training metrics

    Returns:
        summary: Multi-line string
    """
    lines = []
    lines.append("=" * 60)
    lines.append("TRAINING LOG SUMMARY")
    lines.append("=" * 60)

    lines.append(f"   Total Epochs:  {int(df['epoch'].iloc[-1])}")
    if 'train_size' in df.columns and pd.notna(df['train_size'].iloc[0]):
        lines.append(f"   Train/Dev/Test: {int(df['train_size'].iloc[0])}/"
                     f"{int(df['dev_size'].iloc[0])}/{int(df['test_size'].iloc[0])}")
    if 'cell_type' in df.columns:
        lines.append(f"   Model: cell={df['cell_type'].iloc[0]}, "
                     f"embedding_dim={df['embedding_dim'].iloc[0]}, "
                     f"hidden_size={df['hidden_size'].iloc[0]}, "
                     f"activation={df['activation'].iloc[0]}")

    best_idx = df['dev_accuracy'].idxmax()
    lines.append(f"\n   Best dev epoch: {int(df.loc[best_idx, 'epoch'])}")
    lines.append(f"     Total loss:     {df.loc[best_idx, 'total_loss']:.4f}")
    lines.append(f"     Train accuracy: {df.loc[best_idx, 'train_accuracy']:.4f}")
    lines.append(f"     Dev accuracy:   {df.loc[best_idx, 'dev_accuracy']:.4f}")
    lines.append(f"     Test accuracy:  {df.loc[best_idx, 'test_accuracy']:.4f}")

    lines.append(f"\n   Final epoch: {int(df['epoch'].iloc[-1])}")
    lines.append(f"     Total loss:     {df['total_loss'].iloc[-1]:.4f}")
    lines.append(f"     Dev accuracy:   {df['dev_accuracy'].iloc[-1]:.4f}")
    lines.append(f"     Test accuracy:  {df['test_accuracy'].iloc[-1]:.4f}")

    if 'cumulative_time_seconds' in df.columns:
        lines.append(f"\n   Total time:    {df['cumulative_time_seconds'].iloc[-1]:.1f} s")
        lines.append(f"   Avg per epoch: {df['epoch_time_seconds'].mean():.1f} s")

    lines.append("=" * 60)
    return "\n".join(lines)


def plot_training_curves(df, output_path='outputs/training_curves.png'):
    """
    Plot loss and accuracy curves.

    Args:
        df: DataFrame with training metrics
        output_path: Where to save the plot

    Returns:
        fig: Matplotlib figure
    """
    fig, axes = plt.subplots(1, 2, figsize=(12, 5))

    ax = axes[0]
    ax.plot(df['epoch'], df['total_loss'], 'o-', color='blue', linewidth=2, markersize=5)
    ax.set_xlabel('Epoch')
    ax.set_ylabel('Total loss (cross-entropy)')
    ax.set_title('Training Loss', fontweight='bold')
    ax.grid(True, alpha=0.3)

    ax = axes[1]
    ax.plot(df['epoch'], df['train_accuracy'], 'o-', label='Train', linewidth=2, markersize=5)
    ax.plot(df['epoch'], df['dev_accuracy'], 's-', label='Dev', linewidth=2, markersize=5)
    ax.plot(df['epoch'], df['test_accuracy'], '^-', label='Test', linewidth=2, markersize=5)
    best_epoch = df.loc[df['dev_accuracy'].idxmax(), 'epoch']
    ax.axvline(best_epoch, color='green', linestyle='--', alpha=0.7,
               label=f'Best dev (Epoch {int(best_epoch)})')
    ax.set_xlabel('Epoch')
    ax.set_ylabel('Accuracy')
    ax.set_ylim(0, 1.05)
    ax.set_title('Accuracy', fontweight='bold')
    ax.legend()
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    output_dir = os.path.dirname(output_path)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)
    plt.savefig(output_path, dpi=150)
    print(f"✓ Plot saved to: {output_path}")
    return fig


def main():
    parser = argparse.ArgumentParser(description='Analyze a training log CSV')
    parser.add_argument('log_file', type=str, help='CSV written by the trainer')
    parser.add_argument('--output', type=str, default='outputs/training_curves.png', help='Plot path')
    parser.add_argument('--format', type=str, default='both', choices=['plot', 'summary', 'both'])
    args = parser.parse_args()

    if not os.path.exists(args.log_file):
        print(f"ERROR: Log file not found: {args.log_file}")
        sys.exit(1)

    df = pd.read_csv(args.log_file)
    if df.empty:
        print(f"ERROR: Log file has no epochs: {args.log_file}")
        sys.exit(1)

    if args.format in ('summary', 'both'):
        print(summarize(df))
    if args.format in ('plot', 'both'):
        plot_training_curves(df, args.output)


if __name__ == "__main__":
    main()

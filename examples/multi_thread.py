#!/usr/bin/env python3
"""
Multi-Threaded Histogram Example
================================

Splits normally distributed samples into chunks, builds one histogram per
chunk on a thread pool, merges the partial histograms and prints the result.

To run this example:
    python examples/multi_thread.py

With custom parameters:
    python examples/multi_thread.py --n-samples 5000000 --workers 8 --seed 42
"""

import argparse
import os

import matplotlib.pyplot as plt
import numpy as np

from hstats import RenderOptions, format_histogram, histogram_from_chunks, plot_histogram


def parse_args():
    parser = argparse.ArgumentParser(
        description="Multi-threaded histogram example for the hstats package.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--mean", type=float, default=2.0, help="Mean of the sampled normal distribution")
    parser.add_argument("--std-dev", type=float, default=3.0, help="Standard deviation of the sampled distribution")
    parser.add_argument("--n-samples", type=int, default=5_000_000, help="Number of random samples")
    parser.add_argument("--bins", type=int, default=30, help="Number of histogram bins")
    parser.add_argument("--start", type=float, default=-8.0, help="Lower bound of the binned range")
    parser.add_argument("--end", type=float, default=10.0, help="Upper bound of the binned range")
    parser.add_argument("--workers", type=int, default=os.cpu_count() or 1, help="Thread pool size")
    parser.add_argument("--precision", type=int, default=2, help="Digits shown after the decimal point")
    parser.add_argument("--seed", type=int, default=42, help="Random seed for reproducibility")
    parser.add_argument("--plot", action="store_true", help="Show a bar chart of the bins")
    return parser.parse_args()


def main():
    args = parse_args()

    rng = np.random.default_rng(args.seed)
    data = rng.normal(args.mean, args.std_dev, size=args.n_samples)

    n_chunks = 2 * args.workers
    print(f"Number of random samples: {data.size:,}")
    print(f"Number of bins: {args.bins}")
    print(f"Start: {args.start}")
    print(f"End: {args.end}")
    print(f"Worker count: {args.workers}")
    print(f"Chunk count: {n_chunks}")
    print()

    histogram = histogram_from_chunks(
        data,
        args.start,
        args.end,
        args.bins,
        n_chunks=n_chunks,
        max_workers=args.workers,
    )

    print(format_histogram(histogram, RenderOptions(precision=args.precision)))

    if args.plot:
        plot_histogram(histogram, title="Merged histogram")
        plt.tight_layout()
        plt.show()


if __name__ == "__main__":
    main()

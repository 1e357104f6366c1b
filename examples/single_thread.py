#!/usr/bin/env python3
"""
Single-Threaded Histogram Example
=================================

Streams normally distributed samples through one histogram and prints the
text rendering with the running statistics.

To run this example:
    python examples/single_thread.py

With custom parameters:
    python examples/single_thread.py --mean 2 --std-dev 3 --n-samples 200000 \
        --bins 30 --start -8 --end 10 --seed 42 --plot
"""

import argparse

import matplotlib.pyplot as plt
import numpy as np

from hstats import Histogram, RenderOptions, format_histogram, plot_histogram


def parse_args():
    parser = argparse.ArgumentParser(
        description="Single-threaded histogram example for the hstats package.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--mean", type=float, default=2.0, help="Mean of the sampled normal distribution")
    parser.add_argument("--std-dev", type=float, default=3.0, help="Standard deviation of the sampled distribution")
    parser.add_argument("--n-samples", type=int, default=200_000, help="Number of random samples")
    parser.add_argument("--bins", type=int, default=30, help="Number of histogram bins")
    parser.add_argument("--start", type=float, default=-8.0, help="Lower bound of the binned range")
    parser.add_argument("--end", type=float, default=10.0, help="Upper bound of the binned range")
    parser.add_argument("--precision", type=int, default=2, help="Digits shown after the decimal point")
    parser.add_argument("--seed", type=int, default=42, help="Random seed for reproducibility")
    parser.add_argument("--plot", action="store_true", help="Show a bar chart of the bins")
    return parser.parse_args()


def main():
    args = parse_args()

    rng = np.random.default_rng(args.seed)
    data = rng.normal(args.mean, args.std_dev, size=args.n_samples)

    histogram = Histogram(args.start, args.end, args.bins)
    for value in data:
        histogram.add(value)

    print(format_histogram(histogram, RenderOptions(precision=args.precision)))

    print("Quartile bins:")
    for q, (lower, upper, cumulative) in zip((0.25, 0.50, 0.75), histogram.bins_at_quartiles()):
        print(f"  q={q:.2f}: [{lower:.{args.precision}f}, {upper:.{args.precision}f})  cumulative={cumulative:,}")

    if args.plot:
        plot_histogram(histogram, title="Single-threaded histogram")
        plt.tight_layout()
        plt.show()


if __name__ == "__main__":
    main()

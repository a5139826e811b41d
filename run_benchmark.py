#!/usr/bin/env python3
"""
Benchmark every sieve against every candidate source.

Writes a CSV of timings and, optionally, a plot of time against prime count.

Usage:
    python run_benchmark.py
    python run_benchmark.py --config config/custom.yaml --plot
"""

import argparse
import sys
import time
from pathlib import Path

from lazy_primes.benchmark import load_config, run_benchmark, check_agreement
from lazy_primes.plotting import plot_timings


def main():
    parser = argparse.ArgumentParser(description='Benchmark lazy prime sieves')
    parser.add_argument('--config', type=str, default='config/default.yaml',
                        help='Path to config file')
    parser.add_argument('--output', type=str, default='data/results',
                        help='Directory for CSV and figures')
    parser.add_argument('--plot', action='store_true',
                        help='Also save a timing plot')
    args = parser.parse_args()

    config = load_config(Path(args.config))

    print("=" * 60)
    print("Lazy Prime Sieves - Benchmark")
    print("=" * 60)
    print(f"\nConfiguration:")
    print(f"  counts  = {config['counts']}")
    print(f"  sieves  = {config['sieves']}")
    print(f"  sources = {config['sources']}")
    print(f"  repeats = {config['repeats']}")
    print()

    output_dir = Path(args.output)
    output_dir.mkdir(parents=True, exist_ok=True)

    start = time.time()
    df = run_benchmark(config)
    print()
    print(f"Completed in {time.time() - start:.1f}s")

    csv_path = output_dir / 'sieve_timings.csv'
    df.to_csv(csv_path, index=False)
    print(f"Timings saved to {csv_path}")

    if args.plot:
        figure_path = output_dir / 'sieve_timings.png'
        plot_timings(df, figure_path)
        print(f"Figure saved to {figure_path}")

    problems = check_agreement(df)
    if problems:
        print("\nDISAGREEMENT between sieves:")
        for problem in problems:
            print(f"  - {problem}")
        sys.exit(1)

    print("\n" + "=" * 60)
    print("SUMMARY (median seconds)")
    print("=" * 60)
    summary = df.pivot_table(index=['sieve', 'source'], columns='count',
                             values='median_s')
    print(summary.to_string())


if __name__ == '__main__':
    main()

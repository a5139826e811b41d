"""
Benchmark: time every sieve against every candidate source.

Responsibility: timing grid only. Pulls `count` primes through the public
sieve/source operations and records wall-clock time; the primes are
discarded.
"""

import itertools
import time
import numpy as np
import pandas as pd
import yaml
from pathlib import Path
from collections import deque
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .sieve import SIEVES, make_sieve
from .source import SOURCES, make_candidates


REQUIRED_KEYS = ('counts', 'sieves', 'sources', 'repeats')


def load_config(path: Path) -> Dict[str, Any]:
    """
    Load and validate a benchmark config.

    Parameters
    ----------
    path : Path
        YAML file with keys: counts, sieves, sources, repeats.

    Returns
    -------
    dict
        The parsed config.
    """
    with open(path) as f:
        config = yaml.safe_load(f)

    if not isinstance(config, dict):
        raise ValueError(f"{path}: expected a mapping, got {type(config).__name__}")
    missing = [key for key in REQUIRED_KEYS if key not in config]
    if missing:
        raise ValueError(f"{path}: missing config keys {missing}")

    for name in config['sieves']:
        if name not in SIEVES:
            raise ValueError(f"{path}: unknown sieve {name!r}")
    for name in config['sources']:
        if name not in SOURCES:
            raise ValueError(f"{path}: unknown source {name!r}")
    if any(int(n) < 0 for n in config['counts']):
        raise ValueError(f"{path}: counts must be non-negative")
    if int(config['repeats']) < 1:
        raise ValueError(f"{path}: repeats must be >= 1")

    return config


def prime_stream(sieve: str, source: str) -> Iterator[int]:
    """Primes from the named sieve over the named source, prefix included."""
    prefix, candidates = make_candidates(source)
    return itertools.chain(prefix, make_sieve(sieve, candidates))


def time_sieve(sieve: str, source: str, count: int) -> Tuple[float, Optional[int]]:
    """
    Pull `count` primes from a fresh stream.

    Returns
    -------
    tuple
        (elapsed seconds, last prime pulled or None when count is 0)
    """
    t0 = time.perf_counter()
    tail = deque(itertools.islice(prime_stream(sieve, source), count), maxlen=1)
    elapsed = time.perf_counter() - t0
    return elapsed, (tail[0] if tail else None)


def run_benchmark(config: Dict[str, Any], verbose: bool = True) -> pd.DataFrame:
    """
    Time the full (sieve, source, count) grid.

    Parameters
    ----------
    config : dict
        As returned by load_config.
    verbose : bool
        Print one line per grid cell.

    Returns
    -------
    pd.DataFrame
        Columns: sieve, source, count, repeats, median_s, min_s, max_s,
        last_prime.
    """
    repeats = int(config['repeats'])
    rows: List[Dict[str, Any]] = []

    for sieve in config['sieves']:
        if verbose:
            print("-" * 60)
            print(f"Sieve: {sieve}")
            print("-" * 60)
        for source in config['sources']:
            for count in config['counts']:
                count = int(count)
                results = [time_sieve(sieve, source, count) for _ in range(repeats)]
                timings = np.array([elapsed for elapsed, _ in results])
                last = results[-1][1]
                rows.append({
                    'sieve': sieve,
                    'source': source,
                    'count': count,
                    'repeats': repeats,
                    'median_s': float(np.median(timings)),
                    'min_s': float(timings.min()),
                    'max_s': float(timings.max()),
                    'last_prime': last,
                })
                if verbose:
                    print(f"  {source:<20} n={count:>6,}  {np.median(timings):.4f}s")

    return pd.DataFrame(rows)


def check_agreement(df: pd.DataFrame) -> List[str]:
    """
    Return (count, last_prime) disagreements between grid cells.

    Every sieve over every source must reach the same n-th prime.
    """
    problems = []
    for count, group in df[df['count'] > 0].groupby('count'):
        values = group['last_prime'].unique()
        if len(values) > 1:
            problems.append(f"count={count}: last primes differ {sorted(values)}")
    return problems

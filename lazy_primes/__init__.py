"""
lazy_primes: unbounded prime generation with interchangeable sieves.

    >>> from itertools import islice
    >>> list(islice(primes(), 10))
    [2, 3, 5, 7, 11, 13, 17, 19, 23, 29]
"""

import itertools
from typing import Iterator

from .sieve import GenuineSieve, TrialDivisionSieve, UnfaithfulSieve
from .source import integer_candidates, odds_with_2
from .wheel import SpinWheel, WHEEL_2357_PREFIX

__version__ = '0.1.0'

__all__ = [
    'primes',
    'GenuineSieve',
    'TrialDivisionSieve',
    'UnfaithfulSieve',
    'SpinWheel',
    'integer_candidates',
    'odds_with_2',
]


def primes() -> Iterator[int]:
    """All primes from 2: a genuine sieve over the 2·3·5·7 wheel."""
    return itertools.chain(WHEEL_2357_PREFIX, GenuineSieve(SpinWheel()))

"""
Candidate sources.

Responsibility: the integers offered to a sieve. No primality logic here.

Every source is an infinite (or explicitly finite), strictly increasing
iterator of ints that can be duplicated at its current position in O(1).
The genuine sieve depends on that: each prime it finds seeds its own
multiples stream from a clone of the source.
"""

import copy
from typing import Callable, Dict, Iterable, Iterator, Tuple


class CandidateSource:
    """
    Base class for cloneable candidate streams.

    Subclasses implement ``__next__`` and ``clone``. ``clone`` must copy
    only the small cursor state, never replay earlier output.
    """

    def __iter__(self) -> Iterator[int]:
        return self

    def __next__(self) -> int:
        raise NotImplementedError

    def clone(self) -> 'CandidateSource':
        raise NotImplementedError

    def __copy__(self) -> 'CandidateSource':
        return self.clone()


class Counter(CandidateSource):
    """
    Arithmetic progression start, start + step, start + 2*step, ...

    Parameters
    ----------
    start : int
        First value yielded (>= 2).
    step : int
        Positive distance between consecutive values.
    """

    def __init__(self, start: int = 2, step: int = 1):
        if start < 2:
            raise ValueError(f"start must be >= 2, got {start}")
        if step < 1:
            raise ValueError(f"step must be positive, got {step}")
        self.n = start
        self.step = step

    def __next__(self) -> int:
        n = self.n
        self.n = n + self.step
        return n

    def clone(self) -> 'Counter':
        twin = Counter.__new__(Counter)
        twin.n = self.n
        twin.step = self.step
        return twin

    def __repr__(self) -> str:
        return f"Counter(start={self.n}, step={self.step})"


class FiniteSource(CandidateSource):
    """Cloneable stream over a fixed tuple of values."""

    def __init__(self, values: Iterable[int]):
        self.values = tuple(values)
        self.pos = 0

    def __next__(self) -> int:
        if self.pos >= len(self.values):
            raise StopIteration
        value = self.values[self.pos]
        self.pos += 1
        return value

    def clone(self) -> 'FiniteSource':
        # The tuple is immutable, so clones share it.
        twin = FiniteSource.__new__(FiniteSource)
        twin.values = self.values
        twin.pos = self.pos
        return twin


class Prefixed(CandidateSource):
    """
    Literal prefix followed by another cloneable source.

    Parameters
    ----------
    prefix : iterable of int
        Values yielded first, in order.
    source : CandidateSource
        Source that takes over once the prefix is spent.
    """

    def __init__(self, prefix: Iterable[int], source: CandidateSource):
        self.prefix = tuple(prefix)
        self.pos = 0
        self.source = source

    def __next__(self) -> int:
        if self.pos < len(self.prefix):
            value = self.prefix[self.pos]
            self.pos += 1
            return value
        return next(self.source)

    def clone(self) -> 'Prefixed':
        twin = Prefixed.__new__(Prefixed)
        twin.prefix = self.prefix
        twin.pos = self.pos
        twin.source = copy.copy(self.source)
        return twin


def integer_candidates() -> Counter:
    """2, 3, 4, 5, ..."""
    return Counter(2, 1)


def odds_with_2() -> Prefixed:
    """2, 3, 5, 7, 9, ... (every odd number from 3 onward)."""
    return Prefixed((2,), Counter(3, 2))


def _spin_wheel_2357() -> Tuple[Tuple[int, ...], CandidateSource]:
    # Imported lazily: wheel.py subclasses CandidateSource from this module.
    from .wheel import SpinWheel, WHEEL_2357_PREFIX
    return WHEEL_2357_PREFIX, SpinWheel()


# name -> factory returning (literal prefix chained outside the sieve, source)
SOURCES: Dict[str, Callable[[], Tuple[Tuple[int, ...], CandidateSource]]] = {
    'integer_candidates': lambda: ((), integer_candidates()),
    'odds_with_2': lambda: ((), odds_with_2()),
    'spin_wheel_2357': _spin_wheel_2357,
}


def make_candidates(name: str) -> Tuple[Tuple[int, ...], CandidateSource]:
    """
    Build a candidate source by registry name.

    Parameters
    ----------
    name : str
        One of the keys of ``SOURCES``.

    Returns
    -------
    tuple
        (prefix, source). ``prefix`` holds the primes the source skips by
        construction; callers chain it in front of the sieve output.
    """
    try:
        factory = SOURCES[name]
    except KeyError:
        raise ValueError(
            f"Unknown candidate source {name!r}; expected one of {sorted(SOURCES)}"
        ) from None
    return factory()

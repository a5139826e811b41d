"""
Lazy prime sieves.

Responsibility: turn a candidate stream into the stream of primes.
No candidate generation here (see source.py / wheel.py).

Three strategies, all pulled one prime at a time:

- UnfaithfulSieve: the classic recursive filter
      primes = sieve [2..]
      sieve (p : xs) = p : sieve [x | x <- xs, x mod p > 0]
  Every prime found wraps the stream in one more filter, so each candidate
  is tested against every smaller prime, not only those <= its square root.
- TrialDivisionSieve: test each candidate against the primes seen so far,
  stopping at the square root.
- GenuineSieve: the incremental Sieve of Eratosthenes from O'Neill,
  "The Genuine Sieve of Eratosthenes" (JFP 2009). A min-heap maps the next
  composite multiple of each prime p (starting at p*p) to a lazy stream of
  further multiples.

Values are plain Python ints, so squares and products never wrap.
"""

import heapq
import itertools
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from .source import CandidateSource


class UnfaithfulSieve:
    """
    Recursive-filter sieve over any iterable of candidates.

    Parameters
    ----------
    source : iterable of int
        Increasing candidates starting at 2 (or at the first value not
        covered by a chained literal prefix).
    """

    def __init__(self, source: Iterable[int]):
        self.source: Iterator[int] = iter(source)

    def __iter__(self) -> 'UnfaithfulSieve':
        return self

    def __next__(self) -> int:
        prime = next(self.source)
        self.source = filter(lambda x, p=prime: x % p, self.source)
        return prime


class TrialDivisionSieve:
    """
    Memoized trial division.

    Parameters
    ----------
    source : iterable of int
        Increasing candidates.
    """

    def __init__(self, source: Iterable[int]):
        self.source: Iterator[int] = iter(source)
        self.primes: List[int] = []

    def __iter__(self) -> 'TrialDivisionSieve':
        return self

    def __next__(self) -> int:
        for candidate in self.source:
            if self._is_prime(candidate):
                self.primes.append(candidate)
                return candidate
        raise StopIteration

    def _is_prime(self, candidate: int) -> bool:
        for p in self.primes:
            if p * p > candidate:
                break
            if candidate % p == 0:
                return False
        return True


class Multiples(CandidateSource):
    """
    A cloneable source with every value multiplied by a fixed factor.

    Parameters
    ----------
    source : CandidateSource
        Underlying cloneable source.
    factor : int
        Multiplier applied to each value (1 = identity).
    """

    def __init__(self, source: CandidateSource, factor: int = 1):
        self.source = source
        self.factor = factor

    def multiply(self, factor: int) -> 'Multiples':
        """Compose another factor onto this stream (consumes self)."""
        return Multiples(self.source, self.factor * factor)

    def __next__(self) -> int:
        return next(self.source) * self.factor

    def clone(self) -> 'Multiples':
        return Multiples(self.source.clone(), self.factor)


class CompositeTable:
    """
    Min-heap of (next composite, multiples stream) entries.

    Heap items are (key, seq, multiples); seq is an insertion counter so
    equal keys never fall through to comparing streams.
    """

    def __init__(self):
        self._heap: List[Tuple[int, int, Multiples]] = []
        self._seq = itertools.count()

    def __len__(self) -> int:
        return len(self._heap)

    def peek_key(self) -> Optional[int]:
        """Smallest pending composite, or None if the table is empty."""
        return self._heap[0][0] if self._heap else None

    def push(self, key: int, multiples: Multiples) -> None:
        heapq.heappush(self._heap, (key, next(self._seq), multiples))

    def advance_through(self, value: int) -> bool:
        """
        Roll every entry with key <= value forward to its next multiple.

        Several primes can share a composite (e.g. 15 for 3 and 5), so
        entries are popped and reinserted until the minimum exceeds value.
        An entry whose multiples stream is exhausted is dropped.

        Returns
        -------
        bool
            True if some entry's key was exactly value, i.e. value is a
            known composite.
        """
        hit = False
        while self._heap and self._heap[0][0] <= value:
            key, _, multiples = heapq.heappop(self._heap)
            hit = hit or key == value
            try:
                next_key = next(multiples)
            except StopIteration:
                continue
            self.push(next_key, multiples)
        return hit


class GenuineSieve:
    """
    Incremental Sieve of Eratosthenes.

    Parameters
    ----------
    source : CandidateSource
        Increasing candidates. Must support clone(): each prime p found
        seeds its multiples stream p*c from a copy of the source at the
        current position, so the keys it produces are p*p, p*c1, p*c2, ...
        for the candidates c1 < c2 < ... that follow p.
    """

    def __init__(self, source: CandidateSource):
        if not callable(getattr(source, 'clone', None)):
            raise TypeError(
                f"GenuineSieve needs a cloneable candidate source, got {type(source).__name__}"
            )
        self.source = source
        self.table = CompositeTable()

    def __iter__(self) -> 'GenuineSieve':
        return self

    def __next__(self) -> int:
        for candidate in self.source:
            key = self.table.peek_key()
            if key is not None and key <= candidate:
                if self.table.advance_through(candidate):
                    continue
                # Only stale keys (multiples the source never offers, such
                # as the even multiples of 2 under odds_with_2) were passed.
            self.table.push(candidate * candidate,
                            Multiples(self.source.clone(), candidate))
            return candidate
        raise StopIteration


SIEVES: Dict[str, Callable[[CandidateSource], Iterator[int]]] = {
    'unfaithful': UnfaithfulSieve,
    'trial_division': TrialDivisionSieve,
    'genuine': GenuineSieve,
}


def make_sieve(name: str, source: CandidateSource) -> Iterator[int]:
    """Wrap source in the sieve registered under name."""
    try:
        sieve_cls = SIEVES[name]
    except KeyError:
        raise ValueError(
            f"Unknown sieve {name!r}; expected one of {sorted(SIEVES)}"
        ) from None
    return sieve_cls(source)

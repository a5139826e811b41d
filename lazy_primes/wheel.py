"""
Wheel candidates for 2·3·5·7 (and other small bases).

A wheel skips every multiple of a fixed set of small primes by walking a
repeating table of gaps between consecutive integers coprime to their
product. For the basis (2, 3, 5, 7) the product is 210 and there are
phi(210) = 48 such integers per turn, so the table has 48 entries summing
to 210.

The wheel never yields the basis primes themselves: callers chain
WHEEL_2357_PREFIX = (2, 3, 5, 7) in front of whatever consumes it.

Starting at 11:
  11 +2 → 13 +4 → 17 +2 → 19 +4 → 23 +6 → 29 ...
  after 48 gaps: 11 + 210 = 221 (= 13·17, coprime to 210 but composite)
"""

import numpy as np
from typing import Iterable, Optional, Tuple

from .source import CandidateSource


WHEEL_2357_HOLES: Tuple[int, ...] = (
    2, 4, 2, 4, 6, 2, 6, 4, 2, 4, 6, 6, 2, 6, 4, 2, 6, 4, 6, 8, 4, 2, 4, 2,
    4, 8, 6, 4, 6, 2, 4, 6, 2, 6, 6, 4, 2, 4, 6, 2, 6, 4, 2, 4, 2, 10, 2, 10,
)

WHEEL_2357_PREFIX: Tuple[int, ...] = (2, 3, 5, 7)

WHEEL_2357_START = 11


def _coprime_residues(basis: Tuple[int, ...]) -> np.ndarray:
    """Integers in [1, 2M+1] coprime to every element of basis, M = prod(basis)."""
    modulus = int(np.prod(basis, dtype=np.int64))
    values = np.arange(1, 2 * modulus + 2, dtype=np.int64)
    mask = np.ones(len(values), dtype=bool)
    for p in basis:
        mask &= (values % p) != 0
    return values[mask]


def _check_basis(basis: Iterable[int]) -> Tuple[int, ...]:
    basis = tuple(int(p) for p in basis)
    if not basis:
        raise ValueError("Wheel basis must not be empty")
    if any(p < 2 for p in basis):
        raise ValueError(f"Wheel basis values must be >= 2, got {basis}")
    return basis


def wheel_start(basis: Iterable[int]) -> int:
    """First integer > 1 that no element of basis divides."""
    coprime = _coprime_residues(_check_basis(basis))
    return int(coprime[coprime > 1][0])


def wheel_holes(basis: Iterable[int]) -> Tuple[int, ...]:
    """
    Compute the gap table of the wheel for the given basis.

    Parameters
    ----------
    basis : iterable of int
        Small primes whose multiples the wheel skips, e.g. (2, 3, 5, 7).

    Returns
    -------
    tuple of int
        Gaps between consecutive integers coprime to prod(basis), starting
        from wheel_start(basis). One full turn: the gaps sum to prod(basis).
    """
    basis = _check_basis(basis)
    modulus = int(np.prod(basis, dtype=np.int64))
    coprime = _coprime_residues(basis)
    start = coprime[coprime > 1][0]
    turn = coprime[(coprime >= start) & (coprime <= start + modulus)]
    return tuple(int(g) for g in np.diff(turn))


class SpinWheel(CandidateSource):
    """
    Candidates that are not multiples of the wheel basis.

    Yields the current value, then advances it by the next gap, cycling
    through the table forever.

    Parameters
    ----------
    holes : tuple of int, optional
        Gap table. Defaults to WHEEL_2357_HOLES.
    start : int, optional
        First value yielded. Defaults to 11.
    """

    def __init__(self, holes: Optional[Iterable[int]] = None,
                 start: int = WHEEL_2357_START):
        holes = WHEEL_2357_HOLES if holes is None else tuple(holes)
        if not holes:
            raise ValueError("Wheel gap table must not be empty")
        if any(g < 1 for g in holes):
            raise ValueError(f"Wheel gaps must be positive, got {holes}")
        if start < 2:
            raise ValueError(f"start must be >= 2, got {start}")
        self.holes = holes
        self.pos = 0
        self.n = start

    @classmethod
    def for_basis(cls, basis: Iterable[int]) -> 'SpinWheel':
        """Wheel over a computed gap table, starting at wheel_start(basis)."""
        basis = tuple(basis)
        return cls(wheel_holes(basis), wheel_start(basis))

    def __next__(self) -> int:
        n = self.n
        self.n = n + self.holes[self.pos]
        self.pos = (self.pos + 1) % len(self.holes)
        return n

    def clone(self) -> 'SpinWheel':
        # holes is an immutable tuple shared between clones
        twin = SpinWheel.__new__(SpinWheel)
        twin.holes = self.holes
        twin.pos = self.pos
        twin.n = self.n
        return twin

    def __repr__(self) -> str:
        return f"SpinWheel(n={self.n}, pos={self.pos}, turn={sum(self.holes)})"

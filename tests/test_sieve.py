"""
Tests for the three lazy sieves.

All three must agree with each other and with the reference primes for
every candidate source, and must stop cleanly on a finite source.
"""

import itertools
import pytest

from lazy_primes import primes
from lazy_primes.sieve import (
    SIEVES,
    CompositeTable,
    GenuineSieve,
    Multiples,
    TrialDivisionSieve,
    UnfaithfulSieve,
    make_sieve,
)
from lazy_primes.source import (
    Counter,
    FiniteSource,
    integer_candidates,
    make_candidates,
    odds_with_2,
)
from lazy_primes.wheel import SpinWheel, WHEEL_2357_PREFIX


SIEVE_CLASSES = [UnfaithfulSieve, TrialDivisionSieve, GenuineSieve]
SOURCE_NAMES = ['integer_candidates', 'odds_with_2', 'spin_wheel_2357']


def take(n, iterable):
    return list(itertools.islice(iterable, n))


def is_prime(n):
    if n < 2:
        return False
    d = 2
    while d * d <= n:
        if n % d == 0:
            return False
        d += 1
    return True


def sieve_over(sieve_cls, source_name):
    prefix, source = make_candidates(source_name)
    return itertools.chain(prefix, sieve_cls(source))


class TestFirstHundredPrimes:
    """Every sieve reproduces the first 100 primes."""

    @pytest.mark.parametrize('sieve_cls', SIEVE_CLASSES)
    def test_integer_candidates(self, sieve_cls, primes_100):
        """Sieving 2, 3, 4, ... yields 2 .. 541."""
        assert take(100, sieve_cls(integer_candidates())) == primes_100

    @pytest.mark.parametrize('sieve_cls', SIEVE_CLASSES)
    def test_odds_with_2(self, sieve_cls, primes_100):
        """Sieving 2, 3, 5, 7, 9, ... yields 2 .. 541."""
        assert take(100, sieve_cls(odds_with_2())) == primes_100

    @pytest.mark.parametrize('sieve_cls', SIEVE_CLASSES)
    def test_spin_wheel_with_prefix(self, sieve_cls, primes_100):
        """The wheel needs 2, 3, 5, 7 chained in front."""
        stream = itertools.chain(WHEEL_2357_PREFIX, sieve_cls(SpinWheel()))
        assert take(100, stream) == primes_100

    def test_primes_function(self, primes_100):
        """Top-level primes() uses the genuine sieve over the wheel."""
        assert take(100, primes()) == primes_100

    def test_primes_function_fresh_each_call(self):
        """Each call starts again from 2."""
        first = primes()
        take(50, first)
        assert take(3, primes()) == [2, 3, 5]


class TestStreamProperties:
    """Order, soundness, completeness and cross-sieve agreement."""

    @pytest.mark.parametrize('source_name', SOURCE_NAMES)
    @pytest.mark.parametrize('sieve_cls', SIEVE_CLASSES)
    def test_strictly_increasing(self, sieve_cls, source_name):
        values = take(500, sieve_over(sieve_cls, source_name))
        for a, b in zip(values, values[1:]):
            assert a < b, f"{sieve_cls.__name__}/{source_name}: {a} !< {b}"

    @pytest.mark.parametrize('source_name', SOURCE_NAMES)
    @pytest.mark.parametrize('sieve_cls', SIEVE_CLASSES)
    def test_every_value_prime(self, sieve_cls, source_name):
        for v in take(500, sieve_over(sieve_cls, source_name)):
            assert is_prime(v), f"{sieve_cls.__name__}/{source_name}: {v} is composite"

    @pytest.mark.parametrize('source_name', SOURCE_NAMES)
    @pytest.mark.parametrize('sieve_cls', SIEVE_CLASSES)
    def test_no_gaps(self, sieve_cls, source_name):
        values = take(500, sieve_over(sieve_cls, source_name))
        expected = [n for n in range(2, values[-1] + 1) if is_prime(n)]
        assert values == expected

    @pytest.mark.parametrize('source_name', SOURCE_NAMES)
    def test_sieves_agree(self, source_name):
        """For a fixed source all sieves produce the same sequence."""
        outputs = {cls.__name__: take(1000, sieve_over(cls, source_name))
                   for cls in SIEVE_CLASSES}
        reference = outputs['TrialDivisionSieve']
        for name, values in outputs.items():
            assert values == reference, f"{name} disagrees over {source_name}"

    def test_thousandth_prime(self):
        assert take(1000, primes())[-1] == 7919


class TestFiniteSources:
    """Exhausting the source ends production without raising."""

    @pytest.mark.parametrize('sieve_cls', SIEVE_CLASSES)
    def test_empty_source(self, sieve_cls):
        assert list(sieve_cls(FiniteSource([]))) == []

    @pytest.mark.parametrize('sieve_cls', SIEVE_CLASSES)
    def test_finite_source_stops(self, sieve_cls):
        sieve = sieve_cls(FiniteSource(range(2, 31)))
        assert list(sieve) == [2, 3, 5, 7, 11, 13, 17, 19, 23, 29]
        with pytest.raises(StopIteration):
            next(sieve)

    def test_plain_iterables_accepted(self):
        """Unfaithful and trial division need no clone capability."""
        assert list(UnfaithfulSieve(range(2, 20))) == [2, 3, 5, 7, 11, 13, 17, 19]
        assert list(TrialDivisionSieve(iter(range(2, 20)))) == [2, 3, 5, 7, 11, 13, 17, 19]

    def test_genuine_rejects_uncloneable(self):
        with pytest.raises(TypeError, match='cloneable'):
            GenuineSieve(iter(range(2, 20)))


class TestTrialDivisionSieve:

    def test_primes_seen_list(self):
        sieve = TrialDivisionSieve(integer_candidates())
        take(10, sieve)
        assert sieve.primes == [2, 3, 5, 7, 11, 13, 17, 19, 23, 29]


class TestGenuineSieve:

    def test_table_holds_one_entry_per_prime(self):
        sieve = GenuineSieve(integer_candidates())
        take(25, sieve)
        assert len(sieve.table) == 25

    def test_first_key_is_square(self):
        sieve = GenuineSieve(integer_candidates())
        assert next(sieve) == 2
        assert sieve.table.peek_key() == 4

    def test_source_not_consumed_by_clones(self):
        """Multiples streams run on clones; the main source is untouched."""
        source = Counter(2, 1)
        sieve = GenuineSieve(source)
        take(5, sieve)
        assert source.n == 12  # 2..11 pulled

    def test_different_sieves_independent(self):
        a = GenuineSieve(SpinWheel())
        b = GenuineSieve(SpinWheel())
        take(100, a)
        assert next(b) == 11


class TestCompositeTable:

    def test_empty(self):
        table = CompositeTable()
        assert len(table) == 0
        assert table.peek_key() is None
        assert table.advance_through(100) is False

    def test_min_ordering(self):
        table = CompositeTable()
        table.push(25, Multiples(Counter(6), 5))
        table.push(9, Multiples(Counter(4), 3))
        table.push(49, Multiples(Counter(8), 7))
        assert table.peek_key() == 9

    def test_shared_composite_advances_all(self):
        """15 is a multiple of both 3 and 5; both entries move past it."""
        table = CompositeTable()
        table.push(15, Multiples(Counter(6), 3))   # 15, then 18, 21, ...
        table.push(15, Multiples(Counter(4), 5))   # 15, then 20, 25, ...
        assert table.advance_through(15) is True
        assert table.peek_key() == 18
        assert len(table) == 2

    def test_stale_key_is_not_a_hit(self):
        table = CompositeTable()
        table.push(4, Multiples(Counter(3, 2), 2))  # 4, then 6, 10, ...
        assert table.advance_through(5) is False
        assert table.peek_key() == 6

    def test_exhausted_entry_dropped(self):
        table = CompositeTable()
        table.push(4, Multiples(FiniteSource([]), 2))
        assert table.advance_through(4) is True
        assert len(table) == 0


class TestMultiples:

    def test_multiply_composes(self):
        stream = Multiples(Counter(2)).multiply(3).multiply(5)
        assert take(3, stream) == [30, 45, 60]

    def test_clone_independent(self):
        stream = Multiples(Counter(2), 7)
        next(stream)
        twin = stream.clone()
        assert take(3, stream) == [21, 28, 35]
        assert take(3, twin) == [21, 28, 35]


class TestRegistry:

    def test_all_sieves_registered(self):
        assert set(SIEVES) == {'unfaithful', 'trial_division', 'genuine'}

    def test_make_sieve(self, primes_100):
        assert take(100, make_sieve('genuine', integer_candidates())) == primes_100

    def test_unknown_sieve(self):
        with pytest.raises(ValueError, match='Unknown sieve'):
            make_sieve('atkin', integer_candidates())

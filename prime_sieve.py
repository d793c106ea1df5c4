#!/usr/bin/env python3
"""
prime_sieve.py

Bounded sieve of Eratosthenes shared by every cube search worker.

The sieve is built once per run and never mutated afterwards:

  - a boolean compositeness marker for every integer in [0, limit]
  - the ascending sequence of primes <= limit

Workers read it concurrently without locking. The marker doubles as an
O(1) primality oracle for small values; the prime sequence is the source
of subtractor primes for the decomposition search.
"""

import numpy as np


SIEVE_LIMIT = 100_000_000   # largest integer covered by the marker array
CHUNK_SIZE = 4096           # primes converted to Python ints per batch


class Sieve:
    """
    Immutable prime table up to `limit` (inclusive).

    Invariant: composite[i] is False iff i is prime, for 0 <= i <= limit,
    and `primes` holds exactly those i >= 2, ascending.
    """

    def __init__(self, limit: int = SIEVE_LIMIT):
        if limit < 1:
            raise ValueError(f"Sieve limit must be >= 1, got {limit}")

        composite = np.zeros(limit + 1, dtype=bool)
        composite[:2] = True

        i = 2
        while i * i <= limit:
            if not composite[i]:
                composite[i * i :: i] = True
            i += 1

        primes = np.flatnonzero(~composite).astype(np.int64)

        composite.setflags(write=False)
        primes.setflags(write=False)

        self._limit = limit
        self._composite = composite
        self._primes = primes

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def primes(self) -> np.ndarray:
        """Read-only ascending array of all primes <= limit."""
        return self._primes

    def __len__(self) -> int:
        return int(self._primes.size)

    def is_prime_small(self, x: int) -> bool:
        # Caller guarantees 0 <= x <= limit.
        return not self._composite[x]

    def iter_primes(self, start_index: int = 0):
        """
        Yield the primes from position `start_index` onwards as plain ints.

        Every call returns a fresh iterator, so nested and concurrent
        iterations over the same sieve are independent. Values are handed
        out as Python ints so that arithmetic against 64-bit cubes never
        wraps inside numpy.
        """
        primes = self._primes
        total = primes.size
        for lo in range(start_index, total, CHUNK_SIZE):
            yield from primes[lo : lo + CHUNK_SIZE].tolist()

    def __repr__(self) -> str:
        return f"Sieve(limit={self._limit}, primes={len(self)})"

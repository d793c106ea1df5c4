#!/usr/bin/env python3
"""
cubesearch.py

Search for n^3 = p + q + r with p, q, r pairwise distinct primes.

For a single n we compute m = n^3 and try two phases, first match wins:

Phase 1 (m even only): 2 + p + q
    - p runs over the sieve's primes ascending, q = m - 2 - p.
    - Stop once q <= p.
    - Accept when q is prime and neither p nor q is 2.

Phase 2: p + q + r with p < q < r
    - p at index i ascending; give up entirely once 3p > m.
    - q at index j > i ascending, r = m - p - q; stop once r < q.
    - Accept the first prime r distinct from p and q.

If neither phase matches, the n is reported as NO REPRESENTATION FOUND.
That is a result, not an error, and still yields one line.

Result lines look like:

    4^3 = 64 = 2 + 3 + 59
    3^3 = 27 = 3 + 5 + 19
    n^3 = m: NO REPRESENTATION FOUND
"""

import re
from dataclasses import dataclass
from typing import Optional, Tuple

from gmpy2 import is_prime

from prime_sieve import Sieve
from primality import is_prime64


MIN_N = 3
MAX_N = 2_642_245          # largest n with n^3 < 2^64
NOT_FOUND = "NO REPRESENTATION FOUND"

_LINE_RE = re.compile(
    r"^(?P<n>\d+)\^3 = (?P<cube>\d+)"
    r"(?:: (?P<none>NO REPRESENTATION FOUND)"
    r"| = (?P<a>\d+) \+ (?P<b>\d+) \+ (?P<c>\d+))$"
)


class RangeError(ValueError):
    """Range bounds outside 3 <= start <= end <= MAX_N, or not integers."""


# ----------------------------------------------------------------------
# Search range
# ----------------------------------------------------------------------

@dataclass(frozen=True)
class SearchRange:
    start: int
    end: int

    @property
    def size(self) -> int:
        return self.end - self.start + 1

    def __iter__(self):
        return iter(range(self.start, self.end + 1))


def check_bound(n: int, low: int = MIN_N) -> int:
    if n < low or n > MAX_N:
        raise RangeError(f"n must be in [{low}, {MAX_N}], got {n}")
    return n


def validate_range(start: int, end: int) -> SearchRange:
    check_bound(start)
    check_bound(end, low=start)
    return SearchRange(start, end)


# ----------------------------------------------------------------------
# Result record
# ----------------------------------------------------------------------

@dataclass(frozen=True)
class CubeResult:
    """One line of output: n, n^3 and the addends found (or None)."""

    n: int
    cube: int
    addends: Optional[Tuple[int, int, int]] = None

    @property
    def found(self) -> bool:
        return self.addends is not None

    def __str__(self) -> str:
        if self.addends is None:
            return f"{self.n}^3 = {self.cube}: {NOT_FOUND}"
        a, b, c = self.addends
        return f"{self.n}^3 = {self.cube} = {a} + {b} + {c}"

    def verify(self) -> bool:
        """
        Independent check of a found decomposition: pairwise distinct
        primes (by gmpy2, not by the search's own oracle) summing to n^3.
        Not-found results verify trivially.
        """
        if self.cube != cube(self.n):
            return False
        if self.addends is None:
            return True
        if len(set(self.addends)) != 3 or sum(self.addends) != self.cube:
            return False
        return all(is_prime(x) for x in self.addends)


def parse_result_line(line: str) -> CubeResult:
    m = _LINE_RE.match(line.strip())
    if m is None:
        raise ValueError(f"Not a result line: {line!r}")
    n = int(m.group("n"))
    c = int(m.group("cube"))
    if m.group("none"):
        return CubeResult(n, c)
    return CubeResult(n, c, (int(m.group("a")), int(m.group("b")), int(m.group("c"))))


# ----------------------------------------------------------------------
# Search
# ----------------------------------------------------------------------

def cube(n: int) -> int:
    return n * n * n


def even_cube_pair(m, sieve):
    """Phase 1: primes (p, q), p < q, with m = 2 + p + q. None if absent."""
    for p in sieve.iter_primes():
        if p >= m:
            break
        q = m - 2 - p
        if q <= p:
            break
        if p != 2 and q != 2 and is_prime64(q, sieve):
            return p, q
    return None


def distinct_triple(m, sieve):
    """Phase 2: primes (p, q, r), p < q < r, with m = p + q + r."""
    even = m % 2 == 0

    for i, p in enumerate(sieve.iter_primes()):
        if 3 * p > m:
            break

        # q >= 3 is odd, so r is odd only when m - p is even. Otherwise r is
        # even and >= q > 2. Only p == 2 can work for even m, and p == 2
        # never works for odd m.
        if (p == 2) != even:
            if even:
                break
            continue

        for q in sieve.iter_primes(i + 1):
            r = m - p - q
            if r < q:
                break
            if r != p and r != q and is_prime64(r, sieve):
                return p, q, r

    return None


def find_decomposition(n: int, sieve: Sieve) -> CubeResult:
    """Run both phases for n and return its result line."""
    m = cube(n)

    if m % 2 == 0:
        pair = even_cube_pair(m, sieve)
        if pair is not None:
            return CubeResult(n, m, (2,) + pair)

    triple = distinct_triple(m, sieve)
    if triple is not None:
        return CubeResult(n, m, triple)

    return CubeResult(n, m)

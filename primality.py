#!/usr/bin/env python3
"""
primality.py

Deterministic primality for every integer in [0, 2^64 - 1].

Small inputs (n <= SMALL_PRIME_BOUND, and never above the sieve's own
limit) are answered by the sieve's marker array. Larger inputs go through
a Miller-Rabin strong probable prime test with a fixed witness set:

  n - 1 = 2^r * d  with d odd
  for each base a < n:
      x = a^d mod n
      pass if x == 1 or x == n - 1
      else square x up to r - 1 times, pass if x ever hits n - 1
      otherwise n is composite

The bases {2, 3, 5, 7, 11, 13, 17} admit no strong pseudoprime below
341,550,071,728,321. From that bound up to 2^64 the first twelve primes
are used, which admit none below 2^64. The test is therefore exact, not
probabilistic, over the whole 64-bit domain.

Modular arithmetic runs on gmpy2 mpz values, so squaring a 64-bit residue
can never overflow.
"""

from gmpy2 import mpz, powmod

from prime_sieve import Sieve


SMALL_PRIME_BOUND = 10_000_000
U64_MAX = 2 ** 64 - 1

WITNESS_BASES = (2, 3, 5, 7, 11, 13, 17)
WITNESS_BASES_BOUND = 341_550_071_728_321
WITNESS_BASES_64 = (2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37)


def split_power_of_two(n):
    """Return (r, d) with n = 2^r * d and d odd. n must be positive."""
    if n < 1:
        raise ValueError(f"n must be positive, got {n}")
    d = n
    r = 0
    while d % 2 == 0:
        d //= 2
        r += 1
    return r, d


def is_strong_probable_prime(n, a, r=None, d=None) -> bool:
    """
    One Miller-Rabin round: is odd n > 2 a strong probable prime to base a?

    (r, d) may be passed in when the caller already decomposed n - 1.
    """
    if n < 3 or n % 2 == 0:
        raise ValueError(f"n must be odd and >= 3, got {n}")
    n = mpz(n)
    if r is None or d is None:
        r, d = split_power_of_two(n - 1)

    x = powmod(a, d, n)
    if x == 1 or x == n - 1:
        return True

    for _ in range(r - 1):
        x = x * x % n
        if x == n - 1:
            return True

    return False


def witness_bases_for(n):
    if n < WITNESS_BASES_BOUND:
        return WITNESS_BASES
    return WITNESS_BASES_64


def is_prime64(n: int, sieve: Sieve) -> bool:
    """Exact primality of 0 <= n <= 2^64 - 1, using `sieve` for small n."""
    if n < 0 or n > U64_MAX:
        raise ValueError(f"{n} is outside the unsigned 64-bit domain")

    if n <= min(SMALL_PRIME_BOUND, sieve.limit):
        return sieve.is_prime_small(n)

    if n % 2 == 0:
        return n == 2

    n_mpz = mpz(n)
    r, d = split_power_of_two(n_mpz - 1)

    for a in witness_bases_for(n):
        if a >= n:
            break
        if not is_strong_probable_prime(n_mpz, a, r, d):
            return False

    return True

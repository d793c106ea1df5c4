"""Tests for the bounded sieve: marker array, prime sequence, iteration."""
import sys, os
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from prime_sieve import Sieve


def trial_division(x):
    if x < 2:
        return False
    d = 2
    while d * d <= x:
        if x % d == 0:
            return False
        d += 1
    return True


class TestSieveMarker(unittest.TestCase):
    def test_agrees_with_trial_division(self):
        sieve = Sieve(5000)
        for x in range(0, 5001):
            self.assertEqual(sieve.is_prime_small(x), trial_division(x), x)

    def test_zero_and_one(self):
        sieve = Sieve(10)
        self.assertFalse(sieve.is_prime_small(0))
        self.assertFalse(sieve.is_prime_small(1))

    def test_limit_inclusive(self):
        sieve = Sieve(97)
        self.assertTrue(sieve.is_prime_small(97))
        self.assertEqual(sieve.primes[-1], 97)

    def test_square_of_prime_at_limit(self):
        sieve = Sieve(49)
        self.assertFalse(sieve.is_prime_small(49))
        self.assertEqual(sieve.primes[-1], 47)

    def test_rejects_bad_limit(self):
        with self.assertRaises(ValueError):
            Sieve(0)


class TestPrimeSequence(unittest.TestCase):
    def test_first_primes(self):
        sieve = Sieve(30)
        self.assertEqual(list(sieve.iter_primes()),
                         [2, 3, 5, 7, 11, 13, 17, 19, 23, 29])
        self.assertEqual(len(sieve), 10)

    def test_count_below_million(self):
        self.assertEqual(len(Sieve(1_000_000)), 78498)

    def test_sequence_matches_marker(self):
        sieve = Sieve(2000)
        expected = [x for x in range(2, 2001) if sieve.is_prime_small(x)]
        self.assertEqual(list(sieve.iter_primes()), expected)

    def test_yields_python_ints(self):
        sieve = Sieve(100)
        self.assertTrue(all(type(p) is int for p in sieve.iter_primes()))

    def test_iteration_is_restartable(self):
        sieve = Sieve(100_000)
        first = list(sieve.iter_primes())
        second = list(sieve.iter_primes())
        self.assertEqual(first, second)
        self.assertEqual(len(first), 9592)

    def test_start_index(self):
        sieve = Sieve(30)
        self.assertEqual(list(sieve.iter_primes(3)), [7, 11, 13, 17, 19, 23, 29])
        self.assertEqual(list(sieve.iter_primes(10)), [])

    def test_nested_iterations_independent(self):
        sieve = Sieve(20)
        pairs = [(p, q) for i, p in enumerate(sieve.iter_primes())
                 for q in sieve.iter_primes(i + 1)]
        self.assertEqual(len(pairs), 8 * 7 // 2)
        self.assertTrue(all(p < q for p, q in pairs))

    def test_read_only(self):
        sieve = Sieve(100)
        with self.assertRaises(ValueError):
            sieve.primes[0] = 4


if __name__ == '__main__':
    unittest.main()

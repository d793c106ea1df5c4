#!/usr/bin/env python3
"""
cubeprime.py

For every n in [start, end], look for n^3 = p + q + r with p, q, r
pairwise distinct primes, and write one line per n to a results file.

Range bounds come from --start / --end, or are prompted for on stdin:

    start n (3-2642245): 3
    end n (3-2642245): 20000

Bounds must satisfy 3 <= start <= end <= 2642245 (the largest n whose cube
fits in an unsigned 64-bit integer). Anything else is reported on stderr
and the program exits with status 1 before any search runs.

The sieve is built once (primes up to 10^8 by default), then the range is
spread over a pool of workers. Output is sorted by n regardless of which
worker processed which n.

Example:
    python3 cubeprime.py --start 3 --end 2000 --workers 4 --output results.txt
"""

import argparse
import sys
import time

try:
    import gmpy2  # noqa: F401
except ImportError:
    sys.stderr.write(
        "Error: gmpy2 is required for this script.\n"
        "Install with: pip install gmpy2\n"
    )
    sys.exit(1)

from cubesearch import MAX_N, MIN_N, RangeError, check_bound, validate_range
from distributor import BACKENDS, default_worker_count, distribute
from prime_sieve import SIEVE_LIMIT, Sieve


DEFAULT_OUTPUT = "results.txt"


# ----------------------------------------------------------------------
# Input
# ----------------------------------------------------------------------

def to_int(text):
    """Parse an integer typed by the user, or raise RangeError."""
    try:
        return int(text.strip())
    except ValueError:
        raise RangeError(f"not an integer: {text.strip()!r}")


def prompt_int(prompt):
    """Read one integer from stdin after printing `prompt`."""
    try:
        text = input(prompt)
    except EOFError:
        raise RangeError("no input")
    return to_int(text)


def read_range(start=None, end=None):
    """
    Build the SearchRange from given bounds, prompting for any missing one.
    start is checked before end is asked for.
    """
    if start is None:
        start = prompt_int(f"start n ({MIN_N}-{MAX_N}): ")
    elif isinstance(start, str):
        start = to_int(start)
    check_bound(start)

    if end is None:
        end = prompt_int(f"end n ({start}-{MAX_N}): ")
    elif isinstance(end, str):
        end = to_int(end)

    return validate_range(start, end)


# ----------------------------------------------------------------------
# Output
# ----------------------------------------------------------------------

def write_results(results, path):
    """Write one line per result, in the given order. Returns the line count."""
    count = 0
    with open(path, "w", encoding="utf-8") as f:
        for res in results:
            f.write(f"{res}\n")
            count += 1
    return count


# ----------------------------------------------------------------------
# CLI
# ----------------------------------------------------------------------

def parse_args(argv=None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        description="Search n^3 = p + q + r over distinct primes for a range of n."
    )
    p.add_argument(
        "--start",
        type=str,
        default=None,
        help=f"First n ({MIN_N}-{MAX_N}). Prompted for if omitted.",
    )
    p.add_argument(
        "--end",
        type=str,
        default=None,
        help=f"Last n (start-{MAX_N}). Prompted for if omitted.",
    )
    p.add_argument(
        "--output",
        type=str,
        default=DEFAULT_OUTPUT,
        help=f"Results file (default {DEFAULT_OUTPUT}).",
    )
    p.add_argument(
        "--workers",
        type=str,
        default=None,
        help=f"Worker count (default max(2, cpu count) = {default_worker_count()}).",
    )
    p.add_argument(
        "--backend",
        choices=BACKENDS,
        default="thread",
        help="Run workers as threads or processes (default thread).",
    )
    p.add_argument(
        "--sieve-limit",
        type=str,
        default=str(SIEVE_LIMIT),
        help=f"Sieve bound (default {SIEVE_LIMIT}).",
    )
    p.add_argument(
        "--quiet",
        action="store_true",
        help="Only print the final line count.",
    )
    return p.parse_args(argv)


def main(argv=None) -> None:
    args = parse_args(argv)

    try:
        search_range = read_range(args.start, args.end)
    except RangeError as e:
        sys.stderr.write(f"Error: invalid range: {e}\n")
        sys.exit(1)

    try:
        workers = to_int(args.workers) if args.workers is not None else default_worker_count()
        sieve_limit = to_int(args.sieve_limit)
    except RangeError as e:
        sys.stderr.write(f"Error: --workers and --sieve-limit take integers: {e}\n")
        sys.exit(1)

    if workers < 1:
        sys.stderr.write(f"Error: --workers must be >= 1, got {workers}\n")
        sys.exit(1)
    if sieve_limit < 2:
        sys.stderr.write(f"Error: --sieve-limit must be >= 2, got {sieve_limit}\n")
        sys.exit(1)

    total = search_range.size

    t0 = time.perf_counter()
    sieve = Sieve(sieve_limit)
    sieve_ms = (time.perf_counter() - t0) * 1000.0

    if not args.quiet:
        print(f"Sieve: {len(sieve)} primes <= {sieve.limit} | Ms: {sieve_ms:.3f}")
        print(
            f"Range: {search_range.start}..{search_range.end} ({total} n) | "
            f"Workers: {workers} ({args.backend})"
        )

    def report(merged):
        print(f"  merged {merged}/{total}")

    t1 = time.perf_counter()
    results = distribute(
        search_range,
        sieve,
        workers=workers,
        backend=args.backend,
        progress=None if args.quiet else report,
    )
    elapsed_ms = (time.perf_counter() - t1) * 1000.0

    count = write_results(results, args.output)

    if not args.quiet:
        found = sum(1 for res in results if res.found)
        ms_per_n = elapsed_ms / total if total > 0 else 0.0
        print(
            f"Found: {found} | Not found: {count - found} | "
            f"Ms: {elapsed_ms:.3f} | Ms per n: {ms_per_n:.6f}"
        )

    print(f"done: {count} lines -> {args.output}")


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
distributor.py

Spread a range of n across a pool of workers and collect one result per n.

All workers share a single SearchContext:

  - the sieve (read-only, built once in the parent)
  - a cursor: fetch-and-increment counter, so every n is claimed exactly once
  - a result list guarded by a lock

Each worker claims n values until the cursor passes the end of the range,
keeping its results in a local list. On exit it takes the lock once and
merges the whole list. Which worker gets which n is up to the scheduler;
the final sort by n makes the output deterministic.

Two backends:

  thread:  ThreadPoolExecutor. The with-block joins every worker before
           results are read.
  process: multiprocessing.Process workers. The context (sieve included)
           is handed over at start, results and lock live in a Manager.
"""

import multiprocessing as mp
import os
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from cubesearch import CubeResult, SearchRange, find_decomposition
from prime_sieve import Sieve


BACKENDS = ("thread", "process")


class Cursor:
    """Shared next-n counter. claim() is an atomic fetch-and-increment."""

    def __init__(self, start: int):
        # multiprocessing.Value works for threads of one process as well as
        # for child processes it is handed to at start.
        self._next = mp.Value("Q", start)

    def claim(self) -> int:
        with self._next.get_lock():
            n = self._next.value
            self._next.value = n + 1
        return n

    def peek(self) -> int:
        return self._next.value


@dataclass
class SearchContext:
    search_range: SearchRange
    sieve: Sieve
    cursor: Cursor
    results: Any                 # list, or a Manager list proxy
    lock: Any                    # threading.Lock, or a Manager lock proxy
    cancel: Any = None           # optional Event checked before each claim

    def cancelled(self) -> bool:
        return self.cancel is not None and self.cancel.is_set()


def default_worker_count() -> int:
    return max(2, os.cpu_count() or 1)


# ----------------------------------------------------------------------
# Worker
# ----------------------------------------------------------------------

def drain(ctx: SearchContext) -> int:
    """
    Claim and search n values until the range is exhausted (or cancelled),
    then merge the local results under the lock. Returns how many n this
    worker processed.
    """
    local: List[CubeResult] = []
    end = ctx.search_range.end

    while not ctx.cancelled():
        n = ctx.cursor.claim()
        if n > end:
            break
        local.append(find_decomposition(n, ctx.sieve))

    with ctx.lock:
        ctx.results.extend(local)

    return len(local)


# ----------------------------------------------------------------------
# Backends
# ----------------------------------------------------------------------

def _run_threads(ctx, workers, progress):
    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = [pool.submit(drain, ctx) for _ in range(workers)]
        for fut in as_completed(futures):
            fut.result()
            if progress is not None:
                with ctx.lock:
                    merged = len(ctx.results)
                progress(merged)
    return list(ctx.results)


def _run_processes(ctx, workers, progress):
    processes = [mp.Process(target=drain, args=(ctx,)) for _ in range(workers)]

    for p in processes:
        p.start()

    for p in processes:
        p.join()
        if progress is not None:
            progress(len(ctx.results))

    failed = [p.exitcode for p in processes if p.exitcode != 0]
    if failed:
        raise RuntimeError(f"{len(failed)} worker process(es) failed, exit codes {failed}")

    return list(ctx.results)


def distribute(
    search_range: SearchRange,
    sieve: Sieve,
    workers: Optional[int] = None,
    backend: str = "thread",
    progress: Optional[Callable[[int], None]] = None,
    cancel=None,
) -> List[CubeResult]:
    """
    Search every n of `search_range` and return the results sorted by n.

    `progress` is called in the calling process with the number of merged
    results after each worker finishes. `cancel` is an Event (a
    multiprocessing one for the process backend); once set, workers stop
    claiming and the results merged so far are returned.
    """
    if workers is None:
        workers = default_worker_count()
    if workers < 1:
        raise ValueError(f"workers must be >= 1, got {workers}")
    if backend not in BACKENDS:
        raise ValueError(f"backend must be one of {BACKENDS}, got {backend!r}")

    cursor = Cursor(search_range.start)

    if backend == "thread":
        ctx = SearchContext(search_range, sieve, cursor, [], threading.Lock(), cancel)
        results = _run_threads(ctx, workers, progress)
    else:
        with mp.Manager() as manager:
            ctx = SearchContext(
                search_range, sieve, cursor, manager.list(), manager.Lock(), cancel
            )
            results = _run_processes(ctx, workers, progress)

    results.sort(key=lambda res: res.n)
    return results

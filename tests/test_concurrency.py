"""Concurrent consuming reads never over-deliver a view-limited paste."""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from app.exceptions import PasteNotAvailableError


def fire_concurrently(store, handle, now, n):
    """
    Run n consuming reads released at the same moment.

    Returns:
        (successful results, number of not-available outcomes)
    """
    barrier = threading.Barrier(n)

    def read():
        barrier.wait()
        try:
            return store.fetch_and_consume(handle, now)
        except PasteNotAvailableError:
            return None

    with ThreadPoolExecutor(max_workers=n) as pool:
        results = list(pool.map(lambda _: read(), range(n)))

    successes = [r for r in results if r is not None]
    return successes, results.count(None)


@pytest.mark.parametrize("k,n", [(1, 20), (3, 32), (10, 50)])
def test_exactly_k_concurrent_readers_succeed(store, backend, t0, k, n):
    handle = store.create("shared secret", max_views=k, now=t0).id

    successes, misses = fire_concurrently(store, handle, t0, n)

    assert len(successes) == k
    assert misses == n - k
    assert backend.load(handle).view_count == k
    assert sorted(s.remaining_views for s in successes) == list(range(k))
    assert {s.content for s in successes} == {"shared secret"}


def test_unlimited_paste_counts_every_concurrent_read(store, backend, t0):
    handle = store.create("hello", now=t0).id

    successes, misses = fire_concurrently(store, handle, t0, 40)

    assert len(successes) == 40
    assert misses == 0
    assert backend.load(handle).view_count == 40


def test_different_handles_are_independent(store, backend, t0):
    handles = [store.create(f"paste {i}", max_views=2, now=t0).id for i in range(8)]
    barrier = threading.Barrier(len(handles) * 2)

    def read(handle):
        barrier.wait()
        return store.fetch_and_consume(handle, t0).content

    with ThreadPoolExecutor(max_workers=len(handles) * 2) as pool:
        contents = list(pool.map(read, handles * 2))

    assert sorted(contents) == sorted([f"paste {i}" for i in range(8)] * 2)
    assert all(backend.load(h).view_count == 2 for h in handles)

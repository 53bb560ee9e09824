"""
Shared worker pool for data-parallel fan-out in the vq library.

Operations switch from a single sequential numpy pass to a chunked fan-out
over this pool once their input exceeds ``PARALLEL_THRESHOLD`` elements (or
training vectors). Work submitted from inside a pool worker runs inline, so
nested fan-outs never wait on the pool they are running in.
"""

import os
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, List, Optional, Tuple, TypeVar

import numpy as np

from ..exceptions import InvalidParameterError

# Size threshold for enabling parallel computation.
PARALLEL_THRESHOLD = 1024

T = TypeVar("T")
R = TypeVar("R")

_executor: Optional[ThreadPoolExecutor] = None
_max_workers: Optional[int] = None
_lock = threading.Lock()
_local = threading.local()


def _mark_worker() -> None:
    _local.in_worker = True


def in_worker() -> bool:
    """Return True when called from one of the pool's worker threads."""
    return getattr(_local, "in_worker", False)


def worker_count() -> int:
    """Number of workers the shared pool runs with."""
    return _max_workers or os.cpu_count() or 1


def configure_parallelism(max_workers: Optional[int] = None) -> None:
    """
    Resize the shared worker pool.

    The current pool (if any) is shut down after pending work completes and a
    new one is created lazily on the next fan-out.

    Args:
        max_workers: Number of worker threads, or None for one per CPU
    """
    global _executor, _max_workers

    if max_workers is not None and max_workers < 1:
        raise InvalidParameterError("max_workers must be at least 1")

    with _lock:
        previous = _executor
        _executor = None
        _max_workers = max_workers

    if previous is not None:
        previous.shutdown(wait=True)


def get_executor() -> ThreadPoolExecutor:
    """Return the shared executor, creating it on first use."""
    global _executor
    with _lock:
        if _executor is None:
            _executor = ThreadPoolExecutor(
                max_workers=worker_count(),
                thread_name_prefix="vq-worker",
                initializer=_mark_worker,
            )
        return _executor


def should_parallelize(size: int) -> bool:
    """Whether an operation over ``size`` elements should fan out."""
    return size > PARALLEL_THRESHOLD and not in_worker()


def parallel_map(
    func: Callable[[T], R], items: Iterable[T], size: Optional[int] = None
) -> List[R]:
    """
    Map ``func`` over ``items``, in the shared pool when ``size`` is large.

    Args:
        func: Function applied to each item
        items: Items to process; results keep their order
        size: Logical work size that decides the strategy (defaults to the
            number of items)

    Returns:
        List of results in input order
    """
    items = list(items)
    if size is None:
        size = len(items)

    if len(items) < 2 or not should_parallelize(size):
        return [func(item) for item in items]

    return list(get_executor().map(func, items))


def chunk_bounds(length: int, n_chunks: Optional[int] = None) -> List[Tuple[int, int]]:
    """Split ``range(length)`` into at most ``n_chunks`` contiguous slices."""
    if n_chunks is None:
        n_chunks = worker_count()
    n_chunks = max(1, min(n_chunks, length))
    edges = np.linspace(0, length, n_chunks + 1).astype(int)
    return [(int(s), int(e)) for s, e in zip(edges[:-1], edges[1:]) if e > s]


def chunked_map(func: Callable[[int, int], R], length: int) -> List[R]:
    """
    Apply ``func(start, end)`` over contiguous slices of ``range(length)``.

    Below the threshold a single call covers the whole range; above it each
    worker receives a disjoint slice. Callers merge the partial results.
    """
    if not should_parallelize(length):
        return [func(0, length)]

    bounds = chunk_bounds(length)
    return list(get_executor().map(lambda b: func(b[0], b[1]), bounds))


def parallel_join(
    left: Callable[[], T], right: Callable[[], R], size: int
) -> Tuple[T, R]:
    """Run two independent tasks, concurrently when ``size`` is large."""
    if not should_parallelize(size):
        return left(), right()

    future = get_executor().submit(left)
    right_result = right()
    return future.result(), right_result

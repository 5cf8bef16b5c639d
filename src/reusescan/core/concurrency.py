# concurrency.py
# SPDX-License-Identifier: MIT
"""Bounded thread-pool fan-out for per-file work.

File resolution is I/O bound, so a thread pool is used; a submission window
keeps the number of queued futures bounded however large the tree is.
"""
from __future__ import annotations

import os
from collections.abc import Callable, Iterable
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Generic, TypeVar

from .config import ScanConfig
from .log import get_logger

__all__ = [
    "Executor",
    "ExecutorConfig",
    "resolve_executor_config",
]

log = get_logger(__name__)

T = TypeVar("T")
R = TypeVar("R")

_THREADS_PER_CPU = 4
_DEFAULT_WORKER_CAP = 32
_WINDOW_PER_WORKER = 4


@dataclass(frozen=True)
class ExecutorConfig:
    """Pool sizing.

    Attributes:
        max_workers (int): Worker thread count.
        window (int): In-flight task limit; submission pauses at this many
            unfinished futures.
    """
    max_workers: int
    window: int


class _Inflight(Generic[R]):
    """Futures submitted but not yet handed to the result callback."""

    def __init__(
        self,
        on_result: Callable[[R], None],
        on_error: Callable[[BaseException], None] | None,
        fail_fast: bool,
    ) -> None:
        self.futures: set[Future[R]] = set()
        self._on_result = on_result
        self._on_error = on_error
        self._fail_fast = fail_fast

    def __len__(self) -> int:
        return len(self.futures)

    def settle_some(self) -> None:
        """Block until at least one future finishes and deliver what is done."""
        done, self.futures = wait(self.futures, return_when=FIRST_COMPLETED)
        for fut in done:
            exc = fut.exception()
            if exc is None:
                self._on_result(fut.result())
                continue
            if self._on_error is not None:
                self._on_error(exc)
            if self._fail_fast:
                for other in self.futures:
                    other.cancel()
                raise exc
            log.warning("Worker failed: %s", exc)


class Executor:
    """Run a function over items on a thread pool.

    Results reach the callback on the calling thread, in completion order.
    """

    def __init__(self, cfg: ExecutorConfig) -> None:
        self.cfg = cfg

    def _make_executor(self) -> ThreadPoolExecutor:
        if self.cfg.max_workers < 1:
            raise ValueError(f"Executor needs at least one worker (got {self.cfg.max_workers})")
        return ThreadPoolExecutor(max_workers=self.cfg.max_workers, thread_name_prefix="reusescan")

    def map_unordered(
        self,
        items: Iterable[T],
        fn: Callable[[T], R],
        on_result: Callable[[R], None],
        *,
        fail_fast: bool = True,
        on_error: Callable[[BaseException], None] | None = None,
    ) -> None:
        """Apply ``fn`` to every item and feed results to ``on_result``.

        Returns once every task has finished. With ``fail_fast`` the first
        worker exception is re-raised after cancelling the tasks that had
        not started; tasks already running are waited for when the pool
        shuts down. Without it, failures are logged and skipped.

        Args:
            items (Iterable[T]): Work items, consumed lazily.
            fn (Callable[[T], R]): Per-item work, run on a pool thread.
            on_result (Callable[[R], None]): Receives each successful result.
            fail_fast (bool): Abort on the first failure.
            on_error (Callable[[BaseException], None] | None): Sees every
                failure, before it is raised or logged.

        Raises:
            Exception: The first worker failure when ``fail_fast`` is set.
        """
        limit = max(self.cfg.window, self.cfg.max_workers)
        inflight: _Inflight[R] = _Inflight(on_result, on_error, fail_fast)
        with self._make_executor() as pool:
            for item in items:
                inflight.futures.add(pool.submit(fn, item))
                if len(inflight) >= limit:
                    inflight.settle_some()
            while inflight:
                inflight.settle_some()


def resolve_executor_config(cfg: ScanConfig) -> ExecutorConfig:
    """Derive pool sizing from ``cfg.pipeline``.

    Unset values scale with the host: a few threads per CPU up to a cap,
    and a window of four tasks per worker. The window is never smaller
    than the worker count.
    """
    pc = cfg.pipeline
    workers = pc.max_workers or min(_DEFAULT_WORKER_CAP, (os.cpu_count() or 1) * _THREADS_PER_CPU)
    workers = max(1, workers)
    window = pc.submit_window or workers * _WINDOW_PER_WORKER
    return ExecutorConfig(max_workers=workers, window=max(window, workers))

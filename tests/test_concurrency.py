import threading
import time

import pytest

from reusescan.core.concurrency import Executor, ExecutorConfig, resolve_executor_config
from reusescan.core.config import ScanConfig


def test_map_unordered_collects_all_results():
    executor = Executor(ExecutorConfig(max_workers=4, window=4))
    seen = []

    executor.map_unordered(range(50), lambda x: x * 2, seen.append)

    assert sorted(seen) == [x * 2 for x in range(50)]


def test_map_unordered_bounds_in_flight_tasks():
    cfg = ExecutorConfig(max_workers=2, window=3)
    executor = Executor(cfg)
    lock = threading.Lock()
    state = {"submitted": 0, "finished": 0, "max_gap": 0}

    def items():
        for i in range(20):
            with lock:
                state["submitted"] += 1
                gap = state["submitted"] - state["finished"]
                state["max_gap"] = max(state["max_gap"], gap)
            yield i

    def fn(x):
        time.sleep(0.001)
        return x

    def on_result(_):
        with lock:
            state["finished"] += 1

    executor.map_unordered(items(), fn, on_result)

    assert state["finished"] == 20
    # one more item is pulled from the iterator before the window drains
    assert state["max_gap"] <= cfg.window + 1


def test_map_unordered_fail_fast_raises_and_cancels():
    executor = Executor(ExecutorConfig(max_workers=1, window=4))
    started = []

    def fn(x):
        started.append(x)
        if x == 0:
            raise OSError("boom")
        time.sleep(0.01)
        return x

    with pytest.raises(OSError, match="boom"):
        executor.map_unordered(range(100), fn, lambda _: None)

    assert len(started) < 100


def test_map_unordered_on_error_callback_without_fail_fast():
    executor = Executor(ExecutorConfig(max_workers=2, window=2))
    errors = []
    seen = []

    def fn(x):
        if x % 2:
            raise ValueError(f"odd {x}")
        return x

    executor.map_unordered(range(6), fn, seen.append, fail_fast=False, on_error=errors.append)

    assert sorted(seen) == [0, 2, 4]
    assert len(errors) == 3
    assert all(isinstance(e, ValueError) for e in errors)


def test_executor_rejects_zero_workers():
    executor = Executor(ExecutorConfig(max_workers=0, window=1))

    with pytest.raises(ValueError):
        executor.map_unordered([1], lambda x: x, lambda _: None)


def test_resolve_executor_config_uses_explicit_values():
    cfg = ScanConfig()
    cfg.pipeline.max_workers = 3
    cfg.pipeline.submit_window = 5

    exec_cfg = resolve_executor_config(cfg)

    assert exec_cfg == ExecutorConfig(max_workers=3, window=5)


def test_resolve_executor_config_defaults(monkeypatch):
    monkeypatch.setattr("reusescan.core.concurrency.os.cpu_count", lambda: 2)

    exec_cfg = resolve_executor_config(ScanConfig())

    assert exec_cfg.max_workers == 8
    assert exec_cfg.window == 32


def test_resolve_executor_config_caps_default_workers(monkeypatch):
    monkeypatch.setattr("reusescan.core.concurrency.os.cpu_count", lambda: 64)

    assert resolve_executor_config(ScanConfig()).max_workers == 32


def test_window_never_smaller_than_workers():
    cfg = ScanConfig()
    cfg.pipeline.max_workers = 8
    cfg.pipeline.submit_window = 2

    assert resolve_executor_config(cfg).window == 8

"""
Opt-in timing of the tokenizer, parser and encoder hot paths.

Set ``JSONCODEC_PROFILE`` in the environment to collect per-function call
counts, elapsed nanoseconds and characters processed. The counters are
process-wide: calls made from several threads add into the same registry,
which is guarded by a lock. Without the variable ``ProfileContext`` records
nothing.
"""

import os
import threading
import time
from dataclasses import dataclass
from typing import Any

PROFILE_HOT_PATHS = __debug__ and "JSONCODEC_PROFILE" in os.environ

_registry: dict[str, "HotPathStats"] = {}
_registry_lock = threading.Lock()


@dataclass
class HotPathStats:
    """Accumulated timings for one profiled function."""

    function_name: str
    call_count: int = 0
    total_time_ns: int = 0
    chars_processed: int = 0

    def record_call(self, duration_ns: int, chars: int = 0) -> None:
        self.call_count += 1
        self.total_time_ns += duration_ns
        self.chars_processed += chars


class ProfileContext:
    """Context manager timing a single hot-path call."""

    __slots__ = ("chars", "func_name", "start_time")

    def __init__(self, func_name: str, chars: int = 0) -> None:
        self.func_name = func_name
        self.chars = chars
        self.start_time = 0

    def __enter__(self) -> "ProfileContext":
        if PROFILE_HOT_PATHS:
            self.start_time = time.perf_counter_ns()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if not PROFILE_HOT_PATHS or not self.start_time:
            return
        duration = time.perf_counter_ns() - self.start_time
        with _registry_lock:
            stats = _registry.get(self.func_name)
            if stats is None:
                stats = _registry[self.func_name] = HotPathStats(
                    self.func_name
                )
            stats.record_call(duration, self.chars)


def get_hot_path_stats() -> dict[str, HotPathStats]:
    """Returns a snapshot of the collected statistics, keyed by function."""
    with _registry_lock:
        return {
            name: HotPathStats(
                name, s.call_count, s.total_time_ns, s.chars_processed
            )
            for name, s in _registry.items()
        }


def clear_hot_path_stats() -> None:
    with _registry_lock:
        _registry.clear()

"""Per-source fan-out with a supervisor that fires once every source returns."""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor, wait
from threading import Lock
from typing import Callable, Dict, Iterable

SourceTask = tuple[str, Callable[[], None]]


class FanOutPool:
    """Run one task per source and report when the whole batch has finished.

    Every source name owns a single-worker executor. Supervisors run on a
    separate shared pool and only wait on source futures.
    """

    def __init__(self, supervisor_workers: int = 4) -> None:
        self._supervisors = ThreadPoolExecutor(
            max_workers=supervisor_workers, thread_name_prefix="waybackurls-supervisor"
        )
        self._sources: Dict[str, ThreadPoolExecutor] = {}
        self._lock = Lock()

    def fan_out(self, tasks: Iterable[SourceTask], on_complete: Callable[[], None]) -> Future:
        """Submit ``tasks`` and call ``on_complete`` after all of them return.

        ``on_complete`` runs even when tasks raise; the returned future
        resolves once it has run.
        """

        futures = [self._executor_for(name).submit(task) for name, task in tasks]
        return self._supervisors.submit(self._supervise, futures, on_complete)

    def shutdown(self, wait: bool = True) -> None:
        self._supervisors.shutdown(wait=wait)
        with self._lock:
            for executor in self._sources.values():
                executor.shutdown(wait=wait)
            self._sources.clear()

    def _executor_for(self, source_name: str) -> ThreadPoolExecutor:
        with self._lock:
            executor = self._sources.get(source_name)
            if executor is None:
                executor = ThreadPoolExecutor(
                    max_workers=1, thread_name_prefix=f"waybackurls-{source_name}"
                )
                self._sources[source_name] = executor
            return executor

    @staticmethod
    def _supervise(futures: list[Future], on_complete: Callable[[], None]) -> None:
        wait(futures)
        on_complete()


__all__ = ["FanOutPool", "SourceTask"]

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from threading import Lock
from typing import Callable, Dict, Optional

from application.ports.step_scheduler import StepSchedulerPort


class ThreadStepScheduler(StepSchedulerPort):
    def __init__(self, max_workers: int = 4) -> None:
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="wizard-step")
        self._lock = Lock()
        self._futures: Dict[str, Future] = {}

    def submit(self, key: str, task: Callable[[], object]) -> Future:
        with self._lock:
            future = self._executor.submit(task)
            self._futures[key] = future
            return future

    def wait(self, key: str, timeout_sec: float) -> bool:
        future = self.get_future(key)
        if future is None:
            return False
        try:
            future.result(timeout=timeout_sec)
        except FutureTimeoutError:
            return False
        except Exception:
            return future.done()
        return True

    def get_future(self, key: str) -> Optional[Future]:
        with self._lock:
            return self._futures.get(key)

    def drop(self, prefix: str) -> int:
        with self._lock:
            keys = [k for k, f in self._futures.items() if k.startswith(prefix) and f.done()]
            for key in keys:
                del self._futures[key]
            return len(keys)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

from __future__ import annotations

from abc import ABC, abstractmethod
from concurrent.futures import Future
from typing import Callable, Optional, TypeVar

T = TypeVar("T")


class StepSchedulerPort(ABC):
    """Runs one in-flight step request off the caller's thread."""

    @abstractmethod
    def submit(self, key: str, task: Callable[[], T]) -> "Future[T]":
        ...

    @abstractmethod
    def wait(self, key: str, timeout_sec: float) -> bool:
        ...

    @abstractmethod
    def get_future(self, key: str) -> Optional[Future]:
        ...

    @abstractmethod
    def drop(self, prefix: str) -> int:
        """Forget finished futures whose key starts with prefix."""
        ...

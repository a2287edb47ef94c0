from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

from domain.session_log import SessionLogEntry


class SessionLogStorePort(ABC):
    @abstractmethod
    def append(self, session_id: str, entry: SessionLogEntry) -> None:
        ...

    @abstractmethod
    def list(self, session_id: str) -> List[SessionLogEntry]:
        ...

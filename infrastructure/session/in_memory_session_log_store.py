from __future__ import annotations

from threading import Lock
from typing import Dict, List

from application.ports.session_log_store import SessionLogStorePort
from domain.session_log import SessionLogEntry


class InMemorySessionLogStore(SessionLogStorePort):
    def __init__(self, max_entries: int = 1000) -> None:
        self._logs: Dict[str, List[SessionLogEntry]] = {}
        self._max_entries = max_entries
        self._lock = Lock()

    def append(self, session_id: str, entry: SessionLogEntry) -> None:
        with self._lock:
            entries = self._logs.setdefault(session_id, [])
            entries.append(entry)
            if len(entries) > self._max_entries:
                del entries[: len(entries) - self._max_entries]

    def list(self, session_id: str) -> List[SessionLogEntry]:
        with self._lock:
            return list(self._logs.get(session_id, []))

    def drop(self, session_id: str) -> None:
        with self._lock:
            self._logs.pop(session_id, None)

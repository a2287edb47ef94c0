from __future__ import annotations

from threading import Lock
from typing import Dict, Optional

from application.ports.session_repository import SessionRepositoryPort
from domain.exceptions import SessionStateError
from domain.session import WizardSession


class InMemorySessionRepository(SessionRepositoryPort):
    def __init__(self) -> None:
        self._sessions: Dict[str, WizardSession] = {}
        self._lock = Lock()

    def create(self, session: WizardSession) -> None:
        with self._lock:
            if session.session_id in self._sessions:
                raise SessionStateError(f"Session already exists: {session.session_id}")
            self._sessions[session.session_id] = session

    def get(self, session_id: str) -> Optional[WizardSession]:
        with self._lock:
            return self._sessions.get(session_id)

    def delete(self, session_id: str) -> None:
        with self._lock:
            if self._sessions.pop(session_id, None) is None:
                raise SessionStateError(f"Session not found: {session_id}")

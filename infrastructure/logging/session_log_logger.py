from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict

from application.ports.logger import LoggerPort
from application.ports.session_log_store import SessionLogStorePort
from domain.session_log import SessionLogEntry


@dataclass(frozen=True)
class SessionLogLogger(LoggerPort):
    """Keeps every event of one wizard session so the API can serve it back."""

    session_id: str
    log_store: SessionLogStorePort
    bound: Dict[str, Any] = field(default_factory=dict)

    def bind(self, **fields: Any) -> "SessionLogLogger":
        merged = dict(self.bound)
        merged.update(fields)
        return SessionLogLogger(session_id=self.session_id, log_store=self.log_store, bound=merged)

    def debug(self, event: str, **fields: Any) -> None:
        self._emit("debug", event, fields)

    def info(self, event: str, **fields: Any) -> None:
        self._emit("info", event, fields)

    def warning(self, event: str, **fields: Any) -> None:
        self._emit("warning", event, fields)

    def error(self, event: str, **fields: Any) -> None:
        self._emit("error", event, fields)

    def _emit(self, level: str, event: str, fields: Dict[str, Any]) -> None:
        payload = dict(self.bound)
        payload.update(fields)
        payload.setdefault("type", event)
        entry = SessionLogEntry(
            timestamp=datetime.now(timezone.utc),
            event=event,
            level=level,
            fields=payload,
        )
        self.log_store.append(self.session_id, entry)

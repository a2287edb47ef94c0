# domain/session.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from threading import RLock
from typing import Any, Dict, Optional

from domain.steps.base import StepStatus
from domain.view import ViewState
from domain.wizard import Wizard


@dataclass
class LastResponse:
    status: int
    url: str
    text: str
    headers: Dict[str, str]


@dataclass
class WizardSession:
    session_id: str
    wizard_id: str
    view: ViewState
    statuses: Dict[str, StepStatus] = field(default_factory=dict)
    errors: Dict[str, str] = field(default_factory=dict)
    last: Optional[LastResponse] = None
    result: Dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    closed: bool = False
    # serialises trigger bookkeeping and completions of this session
    lock: RLock = field(default_factory=RLock, repr=False, compare=False)

    @classmethod
    def open(cls, session_id: str, wizard: Wizard) -> "WizardSession":
        return cls(
            session_id=session_id,
            wizard_id=wizard.meta.id,
            view=ViewState.from_initial(wizard.view),
            statuses={step.id: StepStatus.IDLE for step in wizard.steps},
        )

    def status_of(self, step_id: str) -> StepStatus:
        return self.statuses.get(step_id, StepStatus.IDLE)

    def mark(self, step_id: str, status: StepStatus, error: Optional[str] = None) -> None:
        self.statuses[step_id] = status
        if error is None:
            self.errors.pop(step_id, None)
        else:
            self.errors[step_id] = error
        self.updated_at = datetime.now(timezone.utc)

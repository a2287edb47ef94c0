# application/handlers/base.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from application.outcome import StepOutcome
from domain.steps.base import Step

if TYPE_CHECKING:
    from domain.session import WizardSession
    from application.services.execution_deps import ExecutionDeps


class StepHandler(ABC):
    """
    Renders a successful (HTTP 200) response into the session view.

    Handlers write the display area and links only; revealing panels and
    unlocking triggers is left to the orchestrator.
    """

    @abstractmethod
    def supports(self, step: Step) -> bool: ...

    @abstractmethod
    def apply(self, step: Step, session: "WizardSession", body: str, deps: "ExecutionDeps") -> StepOutcome: ...

# domain/wizard.py
"""
Wizard domain model
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from domain.exceptions import UnknownStepError
from domain.steps.base import Step
from domain.view import InitialView


@dataclass(frozen=True)
class WizardMeta:
    id: str
    name: str
    version: int = 1
    description: str = ""
    on_load: Optional[str] = None  # step fired when a session opens


@dataclass(frozen=True)
class HttpDefaults:
    base_url: str = ""
    endpoint: str = "api.php"
    timeout_sec: int = 120
    headers: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class WizardDefaults:
    http: Optional[HttpDefaults] = None


@dataclass(frozen=True)
class Wizard:
    """
    Wizard aggregate root
    """
    meta: WizardMeta
    steps: List[Step]
    view: InitialView = field(default_factory=InitialView)
    defaults: WizardDefaults = field(default_factory=WizardDefaults)

    def find_step(self, step_id: str) -> Optional[Step]:
        for step in self.steps:
            if step.id == step_id:
                return step
        return None

    def get_step(self, step_id: str) -> Step:
        step = self.find_step(step_id)
        if step is None:
            raise UnknownStepError(step_id)
        return step

    def ordered_steps(self) -> List[Step]:
        """On-load step first, then the declared order."""
        if not self.meta.on_load:
            return list(self.steps)
        first = self.get_step(self.meta.on_load)
        return [first] + [s for s in self.steps if s.id != first.id]

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from domain.session import WizardSession


class SessionRepositoryPort(ABC):
    @abstractmethod
    def create(self, session: WizardSession) -> None:
        ...

    @abstractmethod
    def get(self, session_id: str) -> Optional[WizardSession]:
        ...

    @abstractmethod
    def delete(self, session_id: str) -> None:
        ...

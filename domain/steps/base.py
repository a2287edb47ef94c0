# domain/steps/base.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class StepStatus(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class Step:
    id: str
    name: str
    display: str  # display area id
    trigger: Optional[str] = field(default=None, kw_only=True)  # None => on-load step
    reveal: List[str] = field(default_factory=list, kw_only=True)
    unlocks: Optional[str] = field(default=None, kw_only=True)  # successor step id
    terminal: bool = field(default=False, kw_only=True)
    placeholder: Optional[str] = field(default=None, kw_only=True)

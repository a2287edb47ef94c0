from dataclasses import dataclass
from typing import Optional

@dataclass(frozen=True)
class StepOutcome:
    ok: bool
    error_message: Optional[str] = None
    status: Optional[int] = None  # HTTP status of the completion, None on transport errors

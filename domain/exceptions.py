# domain/exceptions.py
from __future__ import annotations


class DomainError(Exception):
    pass


class ValidationError(DomainError):
    pass


class UnknownStepError(DomainError):
    def __init__(self, step_id: str):
        super().__init__(f"Unknown step: {step_id}")
        self.step_id = step_id


class StepStateError(DomainError):
    """Raised when a step is triggered while its trigger is disabled or a request is in flight."""

    def __init__(self, step_id: str, reason: str):
        super().__init__(f"Step {step_id} cannot be triggered: {reason}")
        self.step_id = step_id
        self.reason = reason


class SessionStateError(DomainError):
    pass

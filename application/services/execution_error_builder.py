# application/services/execution_error_builder.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from application.executor.step_orchestrator import ExecutionResult
from domain.session import WizardSession


@dataclass(frozen=True)
class ExecutionErrorDetail:
    code: str
    message: str
    step_id: Optional[str]
    last_status: Optional[int]


class ExecutionErrorBuilder:
    def build_from_result(self, result: ExecutionResult, session: Optional[WizardSession]) -> ExecutionErrorDetail:
        message = result.error_message or "Step execution failed"
        return ExecutionErrorDetail(
            code="step_failed",
            message=message,
            step_id=result.failed_step_id,
            last_status=getattr(getattr(session, "last", None), "status", None),
        )

    def build_from_step_error(self, step_id: str, message: str, session: Optional[WizardSession]) -> ExecutionErrorDetail:
        return ExecutionErrorDetail(
            code="step_failed",
            message=message,
            step_id=step_id,
            last_status=getattr(getattr(session, "last", None), "status", None),
        )

    def build_from_exception(self, message: str, session: Optional[WizardSession]) -> ExecutionErrorDetail:
        return ExecutionErrorDetail(
            code="exception",
            message=message,
            step_id=None,
            last_status=getattr(getattr(session, "last", None), "status", None),
        )

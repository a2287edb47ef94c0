# application/handlers/ping_handler.py
from __future__ import annotations

from application.handlers.base import StepHandler
from application.outcome import StepOutcome
from application.services.execution_deps import ExecutionDeps
from domain.session import WizardSession
from domain.steps.http import RemoteStep, ResponseFormat


class PingResponseHandler(StepHandler):
    """
    Warm-up ping: only the fact that the request completed matters. The body
    is never read; the display area (the "initialising" notice) is cleared.
    """

    def supports(self, step) -> bool:
        return isinstance(step, RemoteStep) and step.response.format == ResponseFormat.IGNORE

    def apply(self, step: RemoteStep, session: WizardSession, body: str, deps: ExecutionDeps) -> StepOutcome:
        try:
            session.view.set_text(step.display, "")
            return StepOutcome(ok=True, status=200)
        except Exception as e:
            deps.logger.error("ping.step_failed", step_id=getattr(step, "id", "unknown"), error=str(e))
            return StepOutcome(ok=False, error_message=str(e), status=200)

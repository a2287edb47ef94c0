# application/handlers/text_handler.py
from __future__ import annotations

from application.handlers.base import StepHandler
from application.outcome import StepOutcome
from application.services.execution_deps import ExecutionDeps
from domain.session import WizardSession
from domain.steps.http import RemoteStep, ResponseFormat


class TextResponseHandler(StepHandler):
    def supports(self, step) -> bool:
        return isinstance(step, RemoteStep) and step.response.format == ResponseFormat.TEXT

    def apply(self, step: RemoteStep, session: WizardSession, body: str, deps: ExecutionDeps) -> StepOutcome:
        try:
            session.view.set_text(step.display, body)
            deps.logger.debug("text.rendered", step_id=step.id, area=step.display, text_len=len(body))
            return StepOutcome(ok=True, status=200)
        except Exception as e:
            deps.logger.error("text.render_failed", step_id=getattr(step, "id", "unknown"), error=str(e))
            return StepOutcome(ok=False, error_message=str(e), status=200)

# application/handlers/json_handler.py
from __future__ import annotations

from typing import Dict

from application.handlers.base import StepHandler
from application.outcome import StepOutcome
from application.services.execution_deps import ExecutionDeps
from application.services.response_reader import ResponseFormatError, parse_json_object
from application.services.template_renderer import RenderSources, TemplateRenderer
from domain.session import WizardSession
from domain.steps.http import RemoteStep, ResponseFormat


class JsonResponseHandler(StepHandler):
    """
    Handle JSON bodies such as the issuer's ``{"lines": "...", "tx": "..."}``.

    ``display_field`` goes to the display area; every link template is
    rendered against the parsed object (``${result.tx}``). The parsed object
    is merged into ``session.result``.
    """

    def __init__(self, renderer: TemplateRenderer):
        self._renderer = renderer

    def supports(self, step) -> bool:
        return isinstance(step, RemoteStep) and step.response.format == ResponseFormat.JSON

    def apply(self, step: RemoteStep, session: WizardSession, body: str, deps: ExecutionDeps) -> StepOutcome:
        try:
            data = parse_json_object(body)
            field = step.response.display_field
            if field not in data:
                raise ResponseFormatError(f"JSON response has no '{field}' field")

            # render links before touching the view so a bad template leaves it untouched
            src = RenderSources(result=data, last=self._last_to_dict(session))
            hrefs: Dict[str, str] = {
                link.target: self._renderer.render(link.template, src)
                for link in step.response.links
            }

            lines = data.get(field)
            session.view.set_text(step.display, "" if lines is None else str(lines))
            for target, href in hrefs.items():
                session.view.set_link(target, href)
            session.result.update(data)

            if any(data.get(k) is None for k in data):
                deps.logger.warning(
                    "json.null_fields",
                    step_id=step.id,
                    fields=sorted(k for k, v in data.items() if v is None),
                )
            deps.logger.info("json.rendered", step_id=step.id, area=step.display, links=hrefs)
            return StepOutcome(ok=True, status=200)

        except Exception as e:
            deps.logger.error("json.step_failed", step_id=getattr(step, "id", "unknown"), error=str(e))
            return StepOutcome(ok=False, error_message=str(e), status=200)

    def _last_to_dict(self, session: WizardSession) -> Dict[str, object]:
        last = session.last
        if last is None:
            return {}
        return {
            "status": last.status,
            "url": last.url,
            "headers": last.headers,
        }

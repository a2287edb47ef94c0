# application/services/request_preparer.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from application.services.execution_deps import ExecutionDeps
from application.services.form_encoder import FORM_CONTENT_TYPE, FormEncoder
from domain.session import WizardSession
from domain.steps.http import RemoteStep


@dataclass(frozen=True)
class PreparedRequest:
    method: str
    url: str
    headers: Dict[str, str]
    body: Optional[str]
    timeout_sec: float


class RequestPreparer:
    """
    Build the single HTTP request a step issues.

    The body value is read from the step's input area, so it must be called
    before the placeholder overwrites that area.
    """

    def __init__(self, encoder: Optional[FormEncoder] = None):
        self._encoder = encoder or FormEncoder()

    def prepare(self, step: RemoteStep, session: WizardSession, deps: ExecutionDeps) -> PreparedRequest:
        spec = step.request
        headers = dict(spec.headers or {})

        body: Optional[str] = None
        if spec.body_field:
            value = session.view.text(spec.body_source) if spec.body_source else ""
            body = self._encoder.encode_field(spec.body_field, value)
            headers.setdefault("Content-Type", FORM_CONTENT_TYPE)

        return PreparedRequest(
            method=spec.method.upper(),
            url=deps.resolve_endpoint(spec.selector),
            headers=headers,
            body=body,
            timeout_sec=spec.timeout_sec if spec.timeout_sec is not None else deps.timeout_sec,
        )

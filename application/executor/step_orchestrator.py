# application/executor/step_orchestrator.py
from __future__ import annotations

import time
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Dict, Optional

from application.executor.handler_registry import HandlerRegistry
from application.handlers.base import StepHandler
from application.outcome import StepOutcome
from application.ports.http_client import HttpClientPort
from application.ports.step_scheduler import StepSchedulerPort
from application.services.execution_deps import ExecutionDeps
from application.services.redactor import mask_dict, summarize_body
from application.services.request_preparer import PreparedRequest, RequestPreparer
from application.services.response_reader import decode_body, describe_failure
from domain.exceptions import DomainError, StepStateError, ValidationError
from domain.session import LastResponse, WizardSession
from domain.steps.base import Step, StepStatus
from domain.wizard import Wizard

FAILURE_PREFIX = "Error: "


@dataclass(frozen=True)
class ExecutionResult:
    ok: bool
    failed_step_id: Optional[str] = None
    error_message: Optional[str] = None


class StepOrchestrator:
    """
    Drives wizard steps: idle -> pending -> done | failed.

    ``trigger`` disables the step's trigger and shows the placeholder before
    any network activity, submits exactly one request and returns at once.
    The completion runs on the scheduler's worker under the session lock.
    """

    def __init__(
        self,
        registry: HandlerRegistry,
        http_client: HttpClientPort,
        scheduler: StepSchedulerPort,
        preparer: Optional[RequestPreparer] = None,
    ):
        self._registry = registry
        self._http = http_client
        self._scheduler = scheduler
        self._preparer = preparer or RequestPreparer()

    def trigger(
        self,
        wizard: Wizard,
        session: WizardSession,
        step_id: str,
        deps: ExecutionDeps,
        input_value: Optional[str] = None,
    ) -> "Future[StepOutcome]":
        step = wizard.get_step(step_id)
        handler = self._registry.get_handler(step)
        deps = deps.with_logger(deps.logger.bind(session_id=session.session_id))

        input_area = getattr(step, "input_area", None)
        with session.lock:
            self._ensure_triggerable(step, session)

            if input_value is not None:
                if not input_area:
                    raise ValidationError(f"Step {step.id} does not take input")
                session.view.set_text(input_area, input_value)

            # body is read from the input area before the placeholder may overwrite it
            request = self._preparer.prepare(step, session, deps)
            # an input area doubling as display gets its text back on failure
            restore_text = session.view.text(input_area) if input_area and input_area == step.display else None

            if step.trigger:
                session.view.disable(step.trigger)
            if step.placeholder is not None:
                session.view.set_text(step.display, step.placeholder)
            session.mark(step.id, StepStatus.PENDING)

        deps.logger.info(
            "step.start",
            step_id=step.id,
            method=request.method,
            url=request.url,
            headers=mask_dict(request.headers),
            body=summarize_body(request.body),
            timeout_sec=request.timeout_sec,
        )

        return self._scheduler.submit(
            f"{session.session_id}:{step.id}",
            lambda: self._execute(wizard, step, handler, session, request, deps, restore_text),
        )

    def run(
        self,
        wizard: Wizard,
        session: WizardSession,
        deps: ExecutionDeps,
        inputs: Optional[Dict[str, str]] = None,
        wait_sec: Optional[float] = None,
    ) -> ExecutionResult:
        """Trigger every step in order, waiting for each completion. Stops at the first failure."""
        inputs = inputs or {}
        for step in wizard.ordered_steps():
            if step.trigger is None and session.status_of(step.id) == StepStatus.DONE:
                continue

            try:
                future = self.trigger(wizard, session, step.id, deps, input_value=inputs.get(step.id))
            except DomainError as e:
                return ExecutionResult(ok=False, failed_step_id=step.id, error_message=str(e))

            outcome = future.result(timeout=wait_sec)
            if not outcome.ok:
                return ExecutionResult(
                    ok=False,
                    failed_step_id=step.id,
                    error_message=outcome.error_message,
                )

        return ExecutionResult(ok=True)

    def _ensure_triggerable(self, step: Step, session: WizardSession) -> None:
        if session.closed:
            raise StepStateError(step.id, "session is closed")
        status = session.status_of(step.id)
        if status == StepStatus.PENDING:
            raise StepStateError(step.id, "request already in flight")
        if step.trigger is None:
            if status == StepStatus.DONE:
                raise StepStateError(step.id, "on-load step already completed")
            return
        if not session.view.is_enabled(step.trigger):
            raise StepStateError(step.id, f"trigger '{step.trigger}' is disabled")

    def _execute(
        self,
        wizard: Wizard,
        step: Step,
        handler: StepHandler,
        session: WizardSession,
        request: PreparedRequest,
        deps: ExecutionDeps,
        restore_text: Optional[str] = None,
    ) -> StepOutcome:
        t0 = time.perf_counter()
        try:
            resp = self._http.request(
                method=request.method,
                url=request.url,
                headers=request.headers,
                body=request.body,
                timeout_sec=request.timeout_sec,
            )
        except Exception as e:
            return self._fail(step, session, deps, f"Request failed: {e}", None, t0, restore_text)

        body = decode_body(resp)
        deps.logger.info(
            "http.response",
            step_id=step.id,
            status=resp.status,
            final_url=resp.url,
            headers=mask_dict(resp.headers),
            text_head=body[:200],
        )

        with session.lock:
            session.last = LastResponse(
                status=resp.status,
                url=resp.url,
                text=body,
                headers=resp.headers,
            )

            if resp.status != 200:
                return self._fail(step, session, deps, describe_failure(resp), resp.status, t0, restore_text)

            outcome = handler.apply(step, session, body, deps)
            if outcome is None:
                raise RuntimeError(
                    f"Handler returned None: handler={type(handler).__name__}, step={step.id} ({type(step).__name__})"
                )
            if not outcome.ok:
                return self._fail(step, session, deps, outcome.error_message or "Step failed", resp.status, t0, restore_text)

            for panel in step.reveal:
                session.view.show(panel)
            if step.trigger and not step.terminal:
                session.view.enable(step.trigger)
            if step.unlocks:
                successor = wizard.get_step(step.unlocks)
                if successor.trigger:
                    session.view.enable(successor.trigger)
            session.mark(step.id, StepStatus.DONE)

        deps.logger.info(
            "step.end",
            step_id=step.id,
            ok=True,
            status=resp.status,
            unlocked=step.unlocks,
            elapsed_ms=int((time.perf_counter() - t0) * 1000),
        )
        return outcome

    def _fail(
        self,
        step: Step,
        session: WizardSession,
        deps: ExecutionDeps,
        message: str,
        status: Optional[int],
        t0: float,
        restore_text: Optional[str] = None,
    ) -> StepOutcome:
        with session.lock:
            if restore_text is not None:
                session.view.set_text(step.display, restore_text)
            else:
                session.view.set_text(step.display, FAILURE_PREFIX + message)
            # the trigger comes back on failure, terminal step included
            if step.trigger:
                session.view.enable(step.trigger)
            session.mark(step.id, StepStatus.FAILED, error=message)

        deps.logger.error(
            "step.failed",
            step_id=step.id,
            status=status,
            error=message,
            elapsed_ms=int((time.perf_counter() - t0) * 1000),
        )
        return StepOutcome(ok=False, error_message=message, status=status)

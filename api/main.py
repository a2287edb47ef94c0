"""FastAPI application - wizard session endpoints"""
from concurrent.futures import TimeoutError as FutureTimeoutError
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import uuid4

from fastapi import Body, FastAPI, HTTPException, Query, Response, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from application.executor.handler_registry import HandlerRegistry
from application.executor.step_orchestrator import StepOrchestrator
from application.outcome import StepOutcome
from application.ports.requests_client import RequestsSessionHttpClient
from application.services.execution_deps import ExecutionDeps
from application.services.execution_error_builder import ExecutionErrorBuilder
from domain.exceptions import StepStateError, UnknownStepError, ValidationError
from domain.session import WizardSession
from domain.steps.base import StepStatus
from domain.wizard import HttpDefaults, Wizard
from infrastructure.config.settings import WizardSettings
from infrastructure.logging.composite_logger import CompositeLogger
from infrastructure.logging.console_logger import ConsoleLogger
from infrastructure.logging.session_log_logger import SessionLogLogger
from infrastructure.session.in_memory_session_log_store import InMemorySessionLogStore
from infrastructure.session.in_memory_session_repository import InMemorySessionRepository
from infrastructure.session.thread_step_scheduler import ThreadStepScheduler
from infrastructure.url.endpoint_resolver import EndpointResolver
from infrastructure.wizard.base_loader import WizardLoadError
from infrastructure.wizard.file_finder import WizardFileFinder
from infrastructure.wizard.loader_registry import WizardLoaderRegistry


class TriggerStepRequest(BaseModel):
    """Step trigger request"""
    input: Optional[str] = Field(
        default=None,
        description="New content of the step's input area (roster CSV). Omit to send the current content.",
    )


class ViewResponse(BaseModel):
    controls: Dict[str, bool] = Field(description="Trigger controls and whether they are enabled")
    areas: Dict[str, str] = Field(description="Display area contents")
    panels: Dict[str, bool] = Field(description="Panels and whether they are visible")
    links: Dict[str, str] = Field(description="Link targets")


class StepStatusResponse(BaseModel):
    step_id: str
    name: str
    status: str = Field(description="idle | pending | done | failed")
    trigger: Optional[str] = Field(default=None, description="Trigger control id")
    error: Optional[str] = Field(default=None, description="Failure message of the last attempt")


class ErrorDetailResponse(BaseModel):
    """Structured error detail"""
    code: str = Field(description="Error code")
    message: str = Field(description="Error message")
    step_id: Optional[str] = Field(default=None, description="Failed step id")
    last_status: Optional[int] = Field(default=None, description="Last response status")


class SessionResponse(BaseModel):
    session_id: str
    wizard_id: str
    view: ViewResponse
    steps: List[StepStatusResponse]
    result: Dict[str, Any] = Field(default_factory=dict, description="Parsed JSON results (e.g. tx)")
    error_detail: Optional[ErrorDetailResponse] = None
    links: Dict[str, str] = Field(description="Related resources")
    created_at: datetime
    updated_at: datetime


class SessionLogEntryResponse(BaseModel):
    timestamp: datetime = Field(description="Log timestamp")
    event: str = Field(description="Log event name")
    level: str = Field(description="Log level")
    fields: Dict[str, Any] = Field(description="Log payload")


app = FastAPI(
    title="Certificate Wizard Runner",
    description="Drives the Blockcerts issuing wizard step by step against its remote endpoint",
    version="1.0.0",
)

SETTINGS = WizardSettings.from_env()
SESSION_REPOSITORY = InMemorySessionRepository()
SESSION_LOG_STORE = InMemorySessionLogStore()
STEP_SCHEDULER = ThreadStepScheduler()
WIZARDS: Dict[str, Wizard] = {}
ORCHESTRATORS: Dict[str, StepOrchestrator] = {}
MAX_WAIT_SEC = 30


@app.get("/")
def read_root():
    """Health check"""
    return {"status": "ok", "service": "cert-wizard"}


def _load_wizard(wizard_id: str) -> Wizard:
    cached = WIZARDS.get(wizard_id)
    if cached is not None:
        return cached

    wizard_file = WizardFileFinder(SETTINGS.wizard_dir).find_by_id(wizard_id)
    if wizard_file is None:
        raise HTTPException(status_code=404, detail=f"Wizard file not found: {wizard_id}")

    try:
        wizard = WizardLoaderRegistry().load(wizard_file)
    except WizardLoadError as e:
        raise HTTPException(status_code=500, detail=str(e))

    WIZARDS[wizard_id] = wizard
    return wizard


def _http_defaults(wizard: Wizard) -> HttpDefaults:
    return SETTINGS.http_defaults(wizard.defaults.http)


def _build_http_client(http: HttpDefaults) -> RequestsSessionHttpClient:
    return RequestsSessionHttpClient(base_headers=http.headers, timeout_sec=http.timeout_sec)


def _get_orchestrator(wizard: Wizard) -> StepOrchestrator:
    orchestrator = ORCHESTRATORS.get(wizard.meta.id)
    if orchestrator is None:
        orchestrator = StepOrchestrator(
            registry=HandlerRegistry.default(),
            http_client=_build_http_client(_http_defaults(wizard)),
            scheduler=STEP_SCHEDULER,
        )
        ORCHESTRATORS[wizard.meta.id] = orchestrator
    return orchestrator


def _build_logger(session_id: str) -> CompositeLogger:
    return CompositeLogger(
        [
            ConsoleLogger(),
            SessionLogLogger(session_id=session_id, log_store=SESSION_LOG_STORE),
        ]
    )


def _build_deps(wizard: Wizard, session_id: str) -> ExecutionDeps:
    http = _http_defaults(wizard)
    return ExecutionDeps(
        endpoint_resolver=EndpointResolver(base_url=http.base_url, endpoint=http.endpoint),
        logger=_build_logger(session_id),
        timeout_sec=http.timeout_sec,
    )


def _get_session(session_id: str) -> WizardSession:
    session = SESSION_REPOSITORY.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}")
    return session


def _check_wait(wait_sec: Optional[int]) -> None:
    if wait_sec is not None and wait_sec > MAX_WAIT_SEC:
        raise HTTPException(
            status_code=400,
            detail=f"wait_sec must be <= {MAX_WAIT_SEC}",
        )


def _build_session_response(
    wizard: Wizard,
    session: WizardSession,
    error_detail: Optional[ErrorDetailResponse] = None,
) -> SessionResponse:
    with session.lock:
        snapshot = session.view.snapshot()
        steps = [
            StepStatusResponse(
                step_id=step.id,
                name=step.name,
                status=session.status_of(step.id).value,
                trigger=step.trigger,
                error=session.errors.get(step.id),
            )
            for step in wizard.ordered_steps()
        ]
        return SessionResponse(
            session_id=session.session_id,
            wizard_id=session.wizard_id,
            view=ViewResponse(**snapshot),
            steps=steps,
            result=dict(session.result),
            error_detail=error_detail,
            links={
                "self": f"/sessions/{session.session_id}",
                "logs": f"/sessions/{session.session_id}/logs",
            },
            created_at=session.created_at,
            updated_at=session.updated_at,
        )


def _wait_for(future, wait_sec: Optional[int]) -> Optional[StepOutcome]:
    if not wait_sec:
        return None
    try:
        return future.result(timeout=wait_sec)
    except FutureTimeoutError:
        return None


def _complete(
    wizard: Wizard,
    session: WizardSession,
    step_id: str,
    future,
    wait_sec: Optional[int],
    deps: ExecutionDeps,
    done_status: int,
    pending_status: int,
) -> JSONResponse:
    """Wait up to wait_sec for the step, then render the session view."""
    error_builder = ExecutionErrorBuilder()
    error_detail = None
    status_code = done_status
    try:
        outcome = _wait_for(future, wait_sec)
    except Exception as e:
        deps.logger.bind(session_id=session.session_id).error("step_execution_failed", step_id=step_id, error=str(e))
        detail = error_builder.build_from_exception(str(e), session)
        error_detail = ErrorDetailResponse(**detail.__dict__)
    else:
        if outcome is None:
            status_code = pending_status
        elif not outcome.ok:
            detail = error_builder.build_from_step_error(step_id, outcome.error_message or "", session)
            error_detail = ErrorDetailResponse(**detail.__dict__)

    body = _build_session_response(wizard, session, error_detail)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


@app.post("/wizards/{wizard_id}/sessions", response_model=SessionResponse, status_code=201)
def create_session(
    wizard_id: str,
    wait_sec: Optional[int] = Query(default=None, ge=0),
):
    """
    Open a wizard session and fire its on-load step.

    Args:
        wizard_id: Wizard ID (e.g. "cert_demo")
        wait_sec: wait up to this many seconds for the on-load step

    Returns:
        201 with the session view
    """
    _check_wait(wait_sec)
    wizard = _load_wizard(wizard_id)

    session = WizardSession.open(uuid4().hex, wizard)
    SESSION_REPOSITORY.create(session)

    logger = _build_logger(session.session_id).bind(session_id=session.session_id)
    logger.info("session.open", wizard_id=wizard_id)

    if not wizard.meta.on_load:
        body = _build_session_response(wizard, session)
        return JSONResponse(status_code=status.HTTP_201_CREATED, content=body.model_dump(mode="json"))

    deps = _build_deps(wizard, session.session_id)
    future = _get_orchestrator(wizard).trigger(wizard, session, wizard.meta.on_load, deps)
    # 201 even while the on-load step is still pending
    return _complete(
        wizard, session, wizard.meta.on_load, future, wait_sec, deps,
        done_status=status.HTTP_201_CREATED,
        pending_status=status.HTTP_201_CREATED,
    )


@app.get("/sessions/{session_id}", response_model=SessionResponse)
def get_session(session_id: str) -> SessionResponse:
    session = _get_session(session_id)
    wizard = _load_wizard(session.wizard_id)
    return _build_session_response(wizard, session)


@app.post("/sessions/{session_id}/steps/{step_id}", response_model=SessionResponse)
def trigger_step(
    session_id: str,
    step_id: str,
    request: Optional[TriggerStepRequest] = Body(default=None),
    wait_sec: Optional[int] = Query(default=None, ge=0),
):
    """
    Trigger one wizard step.

    Returns:
        202 while the request is in flight, 200 once it completed within wait_sec.
        409 when the step's trigger is disabled or its request is still pending.
    """
    _check_wait(wait_sec)
    session = _get_session(session_id)
    wizard = _load_wizard(session.wizard_id)
    deps = _build_deps(wizard, session_id)

    try:
        future = _get_orchestrator(wizard).trigger(
            wizard, session, step_id, deps, input_value=request.input if request else None
        )
    except UnknownStepError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StepStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return _complete(
        wizard, session, step_id, future, wait_sec, deps,
        done_status=status.HTTP_200_OK,
        pending_status=status.HTTP_202_ACCEPTED,
    )


@app.get("/sessions/{session_id}/logs", response_model=List[SessionLogEntryResponse])
def get_session_logs(session_id: str) -> List[SessionLogEntryResponse]:
    _get_session(session_id)
    entries = SESSION_LOG_STORE.list(session_id)
    return [
        SessionLogEntryResponse(
            timestamp=entry.timestamp,
            event=entry.event,
            level=entry.level,
            fields=entry.fields,
        )
        for entry in entries
    ]


@app.delete("/sessions/{session_id}", status_code=204)
def close_session(session_id: str) -> Response:
    session = _get_session(session_id)
    # held across the delete so no trigger can start in between
    with session.lock:
        pending = [k for k, v in session.statuses.items() if v == StepStatus.PENDING]
        if pending:
            raise HTTPException(status_code=409, detail=f"Session has pending steps: {', '.join(pending)}")
        session.closed = True
        SESSION_REPOSITORY.delete(session_id)
    SESSION_LOG_STORE.drop(session_id)
    STEP_SCHEDULER.drop(f"{session_id}:")
    return Response(status_code=204)

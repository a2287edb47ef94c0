from __future__ import annotations

from application.executor.step_orchestrator import ExecutionResult
from application.services.execution_error_builder import ExecutionErrorBuilder
from domain.session import LastResponse, WizardSession
from domain.view import ViewState


def _session_with_last(status: int) -> WizardSession:
    session = WizardSession(session_id="sess-1", wizard_id="cert_demo", view=ViewState())
    session.last = LastResponse(status=status, url="http://demo/api.php?issuer", text="oops", headers={})
    return session


def test_build_from_result_includes_step_and_status() -> None:
    # Arrange
    builder = ExecutionErrorBuilder()
    result = ExecutionResult(ok=False, failed_step_id="roster", error_message="HTTP 500: boom")

    # Act
    detail = builder.build_from_result(result, _session_with_last(500))

    # Assert
    assert detail.code == "step_failed"
    assert detail.message == "HTTP 500: boom"
    assert detail.step_id == "roster"
    assert detail.last_status == 500


def test_build_from_step_error() -> None:
    # Arrange
    builder = ExecutionErrorBuilder()

    # Act
    detail = builder.build_from_step_error("issuer", "Malformed JSON response", _session_with_last(200))

    # Assert
    assert detail.step_id == "issuer"
    assert detail.last_status == 200


def test_build_from_exception_accepts_missing_session() -> None:
    # Arrange
    builder = ExecutionErrorBuilder()

    # Act
    detail = builder.build_from_exception("boom", None)

    # Assert
    assert detail.code == "exception"
    assert detail.message == "boom"
    assert detail.step_id is None
    assert detail.last_status is None

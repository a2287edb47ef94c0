from __future__ import annotations

from dataclasses import dataclass

import pytest

from application.services.execution_deps import ExecutionDeps
from application.services.request_preparer import RequestPreparer
from domain.exceptions import ValidationError
from domain.session import WizardSession
from domain.steps.http import RemoteRequestSpec, RemoteStep
from domain.view import InitialView
from domain.wizard import Wizard, WizardMeta


@dataclass(frozen=True)
class DummyEndpointResolver:
    def resolve(self, selector: str) -> str:
        return f"http://demo.local/cert-demo/api.php?{selector}"


@dataclass(frozen=True)
class DummyLogger:
    def info(self, _message: str, **_kwargs) -> None:
        return None

    def bind(self, **_kwargs) -> "DummyLogger":
        return self


def _session(roster: str = "a,b,c") -> WizardSession:
    wizard = Wizard(
        meta=WizardMeta(id="demo", name="demo"),
        steps=[],
        view=InitialView(areas={"ta_roster": roster, "ta_template": ""}),
    )
    return WizardSession.open("sess-1", wizard)


def _deps(timeout_sec: float = 120) -> ExecutionDeps:
    return ExecutionDeps(endpoint_resolver=DummyEndpointResolver(), logger=DummyLogger(), timeout_sec=timeout_sec)


def test_get_request_has_no_body() -> None:
    # Arrange
    step = RemoteStep(
        id="template",
        name="Template",
        display="ta_template",
        trigger="btn_template",
        request=RemoteRequestSpec(method="get", selector="template"),
    )

    # Act
    prepared = RequestPreparer().prepare(step, _session(), _deps())

    # Assert
    assert prepared.method == "GET"
    assert prepared.url == "http://demo.local/cert-demo/api.php?template"
    assert prepared.body is None
    assert prepared.headers == {}
    assert prepared.timeout_sec == 120


def test_post_request_reads_body_from_input_area() -> None:
    # Arrange
    step = RemoteStep(
        id="roster",
        name="Roster",
        display="ta_roster",
        trigger="btn_roster",
        request=RemoteRequestSpec(method="POST", selector="roster", body_field="csv", body_source="ta_roster"),
    )

    # Act
    prepared = RequestPreparer().prepare(step, _session("a,b,c"), _deps())

    # Assert
    assert prepared.method == "POST"
    assert prepared.body == "csv=a,b,c"
    assert prepared.headers["Content-Type"] == "application/x-www-form-urlencoded"


def test_step_timeout_and_headers_override_defaults() -> None:
    # Arrange
    step = RemoteStep(
        id="roster",
        name="Roster",
        display="ta_roster",
        trigger="btn_roster",
        request=RemoteRequestSpec(
            method="POST",
            selector="roster",
            body_field="csv",
            body_source="ta_roster",
            headers={"Content-Type": "application/x-www-form-urlencoded; charset=UTF-8"},
            timeout_sec=300,
        ),
    )

    # Act
    prepared = RequestPreparer().prepare(step, _session(), _deps(timeout_sec=5))

    # Assert
    assert prepared.timeout_sec == 300
    assert prepared.headers["Content-Type"] == "application/x-www-form-urlencoded; charset=UTF-8"


def test_unknown_body_source_raises() -> None:
    step = RemoteStep(
        id="roster",
        name="Roster",
        display="ta_roster",
        trigger="btn_roster",
        request=RemoteRequestSpec(method="POST", selector="roster", body_field="csv", body_source="missing"),
    )

    with pytest.raises(ValidationError, match="Unknown area: missing"):
        RequestPreparer().prepare(step, _session(), _deps())

from __future__ import annotations

import pytest

from domain.exceptions import UnknownStepError
from domain.session import WizardSession
from domain.steps.base import Step, StepStatus
from domain.view import InitialView
from domain.wizard import Wizard, WizardMeta


def _wizard(on_load=None) -> Wizard:
    return Wizard(
        meta=WizardMeta(id="demo", name="Demo", on_load=on_load),
        steps=[
            Step(id="template", name="Template", display="ta", trigger="btn"),
            Step(id="prepare", name="Prepare", display="main"),
        ],
        view=InitialView(controls={"btn": True}, areas={"ta": "", "main": "loading"}),
    )


class TestWizard:
    def test_get_step(self):
        wizard = _wizard()
        assert wizard.get_step("template").trigger == "btn"

    def test_find_step_missing_returns_none(self):
        assert _wizard().find_step("nope") is None

    def test_get_step_missing_raises(self):
        with pytest.raises(UnknownStepError) as excinfo:
            _wizard().get_step("nope")
        assert excinfo.value.step_id == "nope"

    def test_ordered_steps_puts_on_load_first(self):
        wizard = _wizard(on_load="prepare")
        assert [s.id for s in wizard.ordered_steps()] == ["prepare", "template"]

    def test_ordered_steps_without_on_load_keeps_order(self):
        wizard = _wizard()
        assert [s.id for s in wizard.ordered_steps()] == ["template", "prepare"]


class TestWizardSession:
    def test_open_starts_idle_with_initial_view(self):
        session = WizardSession.open("sess-1", _wizard())

        assert session.wizard_id == "demo"
        assert session.status_of("template") == StepStatus.IDLE
        assert session.view.text("main") == "loading"
        assert session.last is None
        assert session.result == {}

    def test_mark_records_and_clears_error(self):
        session = WizardSession.open("sess-1", _wizard())
        before = session.updated_at

        session.mark("template", StepStatus.FAILED, error="HTTP 500")
        assert session.errors == {"template": "HTTP 500"}
        assert session.updated_at >= before

        session.mark("template", StepStatus.DONE)
        assert session.status_of("template") == StepStatus.DONE
        assert session.errors == {}

    def test_sessions_do_not_share_views(self):
        wizard = _wizard()
        first = WizardSession.open("a", wizard)
        second = WizardSession.open("b", wizard)

        first.view.disable("btn")

        assert second.view.is_enabled("btn") is True

from __future__ import annotations

import threading

import pytest

from domain.exceptions import SessionStateError
from domain.session import WizardSession
from domain.view import ViewState
from infrastructure.session.in_memory_session_repository import InMemorySessionRepository
from infrastructure.session.thread_step_scheduler import ThreadStepScheduler


def _session(session_id: str) -> WizardSession:
    return WizardSession(session_id=session_id, wizard_id="cert_demo", view=ViewState())


class TestInMemorySessionRepository:
    def test_create_get_delete(self):
        repo = InMemorySessionRepository()
        session = _session("s1")

        repo.create(session)

        assert repo.get("s1") is session
        repo.delete("s1")
        assert repo.get("s1") is None

    def test_duplicate_create_rejected(self):
        repo = InMemorySessionRepository()
        repo.create(_session("s1"))

        with pytest.raises(SessionStateError, match="already exists"):
            repo.create(_session("s1"))

    def test_delete_unknown_rejected(self):
        with pytest.raises(SessionStateError, match="not found"):
            InMemorySessionRepository().delete("nope")


class TestThreadStepScheduler:
    def test_submit_runs_task_off_caller_thread(self):
        scheduler = ThreadStepScheduler(max_workers=1)
        caller = threading.get_ident()
        try:
            future = scheduler.submit("s1:template", threading.get_ident)

            assert future.result(timeout=5) != caller
            assert scheduler.get_future("s1:template") is future
            assert scheduler.wait("s1:template", timeout_sec=1) is True
        finally:
            scheduler.shutdown()

    def test_wait_times_out_while_blocked(self):
        scheduler = ThreadStepScheduler(max_workers=1)
        release = threading.Event()
        try:
            scheduler.submit("s1:roster", lambda: release.wait(timeout=5))

            assert scheduler.wait("s1:roster", timeout_sec=0.05) is False
        finally:
            release.set()
            scheduler.shutdown()

    def test_wait_unknown_key(self):
        scheduler = ThreadStepScheduler()
        try:
            assert scheduler.wait("missing", timeout_sec=0.01) is False
            assert scheduler.get_future("missing") is None
        finally:
            scheduler.shutdown()

    def test_wait_on_failed_task_reports_done(self):
        scheduler = ThreadStepScheduler(max_workers=1)

        def boom():
            raise RuntimeError("handler bug")

        try:
            future = scheduler.submit("s1:issuer", boom)
            assert scheduler.wait("s1:issuer", timeout_sec=5) is True
            with pytest.raises(RuntimeError, match="handler bug"):
                future.result()
        finally:
            scheduler.shutdown()

    def test_drop_forgets_finished_futures_of_one_session(self):
        scheduler = ThreadStepScheduler(max_workers=2)
        release = threading.Event()
        try:
            scheduler.submit("s1:template", lambda: "ok").result(timeout=5)
            scheduler.submit("s1:roster", lambda: release.wait(timeout=5))
            scheduler.submit("s2:template", lambda: "ok").result(timeout=5)

            dropped = scheduler.drop("s1:")

            assert dropped == 1
            assert scheduler.get_future("s1:template") is None
            assert scheduler.get_future("s1:roster") is not None
            assert scheduler.get_future("s2:template") is not None
        finally:
            release.set()
            scheduler.shutdown()

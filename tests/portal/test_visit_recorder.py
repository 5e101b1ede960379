import logging

from src.cardhub.cardhub.portal.context import RequestMeta
from src.cardhub.cardhub.portal.dispatch import ThreadPoolDispatcher
from src.cardhub.cardhub.portal.visit_recorder import VisitRecorder
from tests.portal.fakes import FakeBackend, InlineDispatcher


def test_build_visit_defaults():
    visit = VisitRecorder.build_visit(5, RequestMeta())
    assert visit.to_payload() == {
        "employeeId": 5,
        "source": "link",
        "os": "unknown",
        "browser": "unknown",
        "deviceType": "desktop",
        "ipAddress": "",
    }


def test_failed_write_is_swallowed_and_logged(caplog):
    backend = FakeBackend(failing={"log_visit"})
    recorder = VisitRecorder(backend, InlineDispatcher())

    with caplog.at_level(logging.WARNING):
        recorder.record(1, RequestMeta(source_hint="qr"))

    assert backend.logged_visits == []
    assert "Visit write failed for employee 1" in caplog.text


def test_thread_pool_dispatcher_runs_in_background():
    backend = FakeBackend()
    dispatcher = ThreadPoolDispatcher(max_workers=1)
    recorder = VisitRecorder(backend, dispatcher)

    recorder.record(7, RequestMeta(remote_addr="127.0.0.1"))
    dispatcher.shutdown(wait=True)

    assert backend.logged_visits[0]["employeeId"] == 7
    assert backend.logged_visits[0]["ipAddress"] == "127.0.0.1"


def test_thread_pool_dispatcher_logs_crashes(caplog):
    dispatcher = ThreadPoolDispatcher(max_workers=1)

    def boom():
        raise RuntimeError("boom")

    with caplog.at_level(logging.ERROR):
        dispatcher.submit(boom)
        dispatcher.shutdown(wait=True)

    assert "Background task crashed: boom" in caplog.text


def test_dispatch_failure_is_swallowed_and_logged(caplog):
    backend = FakeBackend()
    dispatcher = ThreadPoolDispatcher(max_workers=1)
    dispatcher.shutdown(wait=True)
    recorder = VisitRecorder(backend, dispatcher)

    with caplog.at_level(logging.WARNING):
        recorder.record(3, RequestMeta())

    assert backend.logged_visits == []
    assert "Visit for employee 3 was not dispatched" in caplog.text
